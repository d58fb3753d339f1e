"""기본 레포지토리와 저장소 오류 변환기.

Base repository and store-error translation.
Provides generic read, insert and upsert helpers shared by the domain
repositories, and the store_errors context manager that turns SQLAlchemy
failures into DataAccessError subclasses with a descriptive message and
exactly one log record.

Usage:
    class SprintRepository(BaseRepository[Sprint]):
        def __init__(self) -> None:
            super().__init__(Sprint, id_attr="sprint_id")

    with store_errors(messages, logger):
        rows = await repository.get_all(db)
"""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import exc as orm_exc

from sprintboard.database import Base
from sprintboard.utils.exceptions import (
    ERROR_CLASSES,
    DataAccessError,
    InvalidArgumentError,
    NoActiveTransactionError,
    StoreErrorKind,
)

logger = logging.getLogger(__name__)

# 제네릭 타입 변수 (Generic type variable representing a SQLAlchemy model)
ModelType = TypeVar("ModelType", bound=Base)

# SQLSTATE 코드별 분류 (PostgreSQL SQLSTATE codes with a dedicated category)
_SQLSTATE_KINDS: dict[str, StoreErrorKind] = {
    "57014": StoreErrorKind.TIMEOUT,  # query_canceled (statement_timeout)
    "55P03": StoreErrorKind.TIMEOUT,  # lock_not_available (lock_timeout, NOWAIT)
    "40P01": StoreErrorKind.LOCK_CONFLICT,  # deadlock_detected
    "40001": StoreErrorKind.CONCURRENCY_CONFLICT,  # serialization_failure
}

_LOCK_MARKERS: tuple[str, ...] = ("deadlock", "database is locked", "database table is locked")
_TIMEOUT_MARKERS: tuple[str, ...] = ("timeout", "timed out", "canceling statement")


def _sqlstate(exc: sa_exc.DBAPIError) -> str | None:
    """드라이버 예외에서 SQLSTATE 코드를 추출합니다 (Extract the driver's SQLSTATE, if any)."""
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def classify_error(exc: BaseException) -> StoreErrorKind | None:
    """예외를 저장소 실패 분류로 매핑합니다.

    Map an exception to its store failure category.

    Args:
        exc: 발생한 예외 (The raised exception)

    Returns:
        StoreErrorKind | None: 실패 분류, 인식할 수 없는 예외면 None
                               (Failure category, or None for non-store exceptions)
    """
    if isinstance(exc, DataAccessError):
        return exc.kind
    if not isinstance(exc, sa_exc.SQLAlchemyError):
        return None

    if isinstance(exc, (sa_exc.ArgumentError, orm_exc.UnmappedInstanceError, sa_exc.IntegrityError)):
        return StoreErrorKind.INVALID_ARGUMENT
    if isinstance(exc, sa_exc.PendingRollbackError):
        return StoreErrorKind.NO_ACTIVE_TRANSACTION
    if isinstance(exc, (sa_exc.NoResultFound, orm_exc.ObjectDeletedError)):
        return StoreErrorKind.NOT_FOUND
    if isinstance(exc, (sa_exc.MultipleResultsFound, orm_exc.DetachedInstanceError)):
        return StoreErrorKind.AMBIGUOUS_RESULT
    if isinstance(exc, orm_exc.StaleDataError):
        return StoreErrorKind.CONCURRENCY_CONFLICT
    if isinstance(exc, sa_exc.TimeoutError):
        return StoreErrorKind.TIMEOUT

    if isinstance(exc, sa_exc.DBAPIError):
        state: str | None = _sqlstate(exc)
        if state in _SQLSTATE_KINDS:
            return _SQLSTATE_KINDS[state]
        text: str = str(exc.orig).lower()
        if any(marker in text for marker in _LOCK_MARKERS):
            return StoreErrorKind.LOCK_CONFLICT
        if any(marker in text for marker in _TIMEOUT_MARKERS):
            return StoreErrorKind.TIMEOUT

    return StoreErrorKind.STORE_FAILURE


@dataclass(frozen=True)
class OperationMessages:
    """작업별 오류 메시지 표.

    Descriptive messages for one repository operation.
    Templates may reference keyword context passed to store_errors,
    e.g. "Sprint not found for the given ID: {sprint_id}.".

    Attributes:
        default: 따로 지정하지 않은 분류의 메시지 (Message for categories not listed)
        by_kind: 분류별 메시지 (Message per failure category)
        by_error: 예외 타입별 메시지, 분류보다 우선
                  (Message per exception type; checked before by_kind)
    """

    default: str
    by_kind: Mapping[StoreErrorKind, str] = field(default_factory=dict)
    by_error: Mapping[type[BaseException], str] = field(default_factory=dict)

    def for_kind(self, kind: StoreErrorKind, **context: Any) -> str:
        template: str = self.by_kind.get(kind, self.default)
        return template.format(**context) if context else template

    def for_failure(self, exc: BaseException, kind: StoreErrorKind, **context: Any) -> str:
        for error_type, template in self.by_error.items():
            if isinstance(exc, error_type):
                return template.format(**context) if context else template
        return self.for_kind(kind, **context)


@contextmanager
def store_errors(
    messages: OperationMessages,
    log: logging.Logger | None = None,
    **context: Any,
) -> Iterator[None]:
    """저장소 오류를 같은 분류의 DataAccessError로 변환합니다.

    Translate store failures raised inside the block.
    The failure is logged once at ERROR, tagged with its category, and a
    DataAccessError of the same category is raised with the operation's
    message, chained from the original. Exceptions that are neither
    SQLAlchemy errors nor DataAccessError propagate untouched.

    Args:
        messages: 작업별 메시지 표 (Messages for the running operation)
        log: 기록할 로거 (Logger receiving the failure record)
        **context: 메시지 템플릿 값 (Values substituted into message templates)
    """
    try:
        yield
    except (sa_exc.SQLAlchemyError, DataAccessError) as exc:
        kind: StoreErrorKind = classify_error(exc) or StoreErrorKind.STORE_FAILURE
        detail: str = messages.for_failure(exc, kind, **context)
        (log or logger).error("[%s] %s", kind.value, detail, exc_info=exc)
        raise ERROR_CLASSES[kind](detail) from exc


def require_identifier(value: Any, name: str = "id") -> int:
    """정수 식별자인지 검증합니다.

    Validate an integer identifier. bool is rejected even though it is an
    int subclass.

    Raises:
        InvalidArgumentError: 정수가 아닐 때 (When the value is not an int)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"Invalid {name}: {value!r}")
    return value


def require_transaction(db: AsyncSession) -> None:
    """세션에 활성 트랜잭션이 있는지 확인합니다.

    Raises:
        NoActiveTransactionError: 트랜잭션이 없을 때 (When no transaction is active)
    """
    if not db.in_transaction():
        raise NoActiveTransactionError()


class BaseRepository(Generic[ModelType]):
    """제네릭 레포지토리.

    Generic repository with read, insert and upsert helpers.
    Helpers raise raw SQLAlchemy errors; callers wrap them in store_errors.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
        id_attr: 단일 기본 키 속성 이름 (Name of the single primary key attribute)
    """

    def __init__(self, model: type[ModelType], id_attr: str = "id") -> None:
        self.model: type[ModelType] = model
        self.id_attr: str = id_attr

    async def fetch_all(self, db: AsyncSession, query: Select) -> Sequence[Any]:
        """SELECT 결과의 첫 번째 엔티티 열을 목록으로 반환합니다 (Execute and return scalars)."""
        result = await db.execute(query)
        return result.scalars().all()

    async def get_by_id(self, db: AsyncSession, record_id: int) -> ModelType:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by primary key.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드 ID (Identifier of the record)

        Returns:
            ModelType: 조회된 레코드 (Found record)

        Raises:
            NoResultFound: 레코드가 없을 때 (When no row matches)
        """
        query: Select = select(self.model).where(getattr(self.model, self.id_attr) == record_id)
        result = await db.execute(query)
        return result.scalar_one()

    async def get_all(
        self,
        db: AsyncSession,
        filters: dict[str, Any] | None = None,
        model: type[Base] | None = None,
    ) -> Sequence[Any]:
        """조건에 맞는 모든 레코드를 조회합니다.

        Retrieve all records matching the given equality filters.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            filters: 필터 딕셔너리 {'컬럼명': 값} (Filter dict {'column_name': value})
            model: 조회할 모델 클래스, None이면 self.model
                   (Model to query; defaults to self.model)

        Returns:
            Sequence: 조회된 레코드 목록 (List of matching records)

        Raises:
            ArgumentError: 모델에 없는 컬럼 이름일 때 (When a filter names an unknown column)
        """
        target: type[Base] = model or self.model
        query: Select = select(target)

        # 동적 필터 적용 (Dynamic filter application)
        for column_name, value in (filters or {}).items():
            if not hasattr(target, column_name):
                raise sa_exc.ArgumentError(f"{target.__name__} has no column {column_name!r}")
            query = query.where(getattr(target, column_name) == value)

        return await self.fetch_all(db, query)

    async def insert(self, db: AsyncSession, entity: Base, model: type[Base] | None = None) -> Base:
        """새 레코드를 추가합니다 (갱신 분기 없음).

        Insert a new record. There is no update branch.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            entity: 추가할 엔티티 (Entity to insert)
            model: 기대하는 모델 클래스, None이면 self.model
                   (Expected model class; defaults to self.model)

        Returns:
            Base: 저장된 엔티티 (The persisted entity)
        """
        self._require_instance(entity, model or self.model)
        require_transaction(db)
        db.add(entity)
        await db.flush()
        return entity

    async def upsert(
        self,
        db: AsyncSession,
        entity: Base,
        model: type[Base] | None = None,
        id_attr: str | None = None,
    ) -> Base:
        """식별자 값에 따라 추가 또는 병합합니다.

        Insert the entity when its identifier is 0 or None, otherwise merge
        it over the stored row (whole entity, last write wins). Nullable
        columns left unset on the entity are written as None.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            entity: 저장할 엔티티 (Entity to store)
            model: 기대하는 모델 클래스 (Expected model class)
            id_attr: 식별자 속성 이름 (Identifier attribute name)

        Returns:
            Base: 세션에 연결된 엔티티, 생성된 ID 포함
                  (Session-attached entity, with generated identifier)
        """
        attr: str = id_attr or self.id_attr
        self._require_instance(entity, model or self.model)
        require_transaction(db)

        if not getattr(entity, attr):
            # 0은 미저장 엔티티 표시 (0 marks an unsaved entity; let the store assign the key)
            setattr(entity, attr, None)
            db.add(entity)
            await db.flush()
            await db.refresh(entity)
            return entity

        self._clear_unset_columns(entity)
        merged: Base = await db.merge(entity)
        await db.flush()
        return merged

    @staticmethod
    def _clear_unset_columns(entity: Base) -> None:
        """병합 전에 지정하지 않은 nullable 컬럼을 None으로 채웁니다.

        Assign None to every nullable, non-key column the caller never set,
        so merge overwrites the stored value instead of keeping it.
        """
        state = sa_inspect(entity)
        for column_attr in sa_inspect(type(entity)).column_attrs:
            if column_attr.key in state.dict:
                continue
            if all(col.nullable and not col.primary_key for col in column_attr.columns):
                setattr(entity, column_attr.key, None)

    @staticmethod
    def _require_instance(entity: Any, model: type[Base]) -> None:
        if not isinstance(entity, model):
            raise InvalidArgumentError(f"Expected {model.__name__}, got {type(entity).__name__}")
