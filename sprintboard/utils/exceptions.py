"""데이터 접근 계층 예외 클래스 모듈.

Data-access exception classes module.
Every store failure surfaced by a repository is one of a closed set of
kinds (StoreErrorKind). Each kind has its own DataAccessError subclass
carrying a descriptive message instead of the driver's low-level detail;
the original exception stays available as __cause__.

Usage:
    from sprintboard.utils.exceptions import RecordNotFoundError
    raise RecordNotFoundError("Sprint not found for the given ID: 42.")
"""

from enum import Enum


class StoreErrorKind(str, Enum):
    """저장소 실패 분류 (Closed enumeration of store failure categories)."""

    INVALID_ARGUMENT = "invalid_argument"
    NO_ACTIVE_TRANSACTION = "no_active_transaction"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    LOCK_CONFLICT = "lock_conflict"
    CONCURRENCY_CONFLICT = "concurrency_conflict"
    AMBIGUOUS_RESULT = "ambiguous_result"
    STORE_FAILURE = "store_failure"


class DataAccessError(Exception):
    """데이터 접근 예외의 공통 부모 클래스.

    Base class for all data-access failures.

    Args:
        detail: 오류 메시지 (Error message)

    Attributes:
        kind: 실패 분류 (Failure category)
        detail: 오류 메시지 (Error message)
    """

    kind: StoreErrorKind = StoreErrorKind.STORE_FAILURE
    default_detail: str = "An error occurred while accessing the database."

    def __init__(self, detail: str | None = None) -> None:
        self.detail: str = detail or self.default_detail
        super().__init__(self.detail)


class InvalidArgumentError(DataAccessError):
    """잘못된 인자 또는 제약 조건 위반 시 사용.

    Raised for invalid identifiers or entities, including entities that
    violate a store constraint on write.
    """

    kind = StoreErrorKind.INVALID_ARGUMENT
    default_detail = "Invalid argument."


class NoActiveTransactionError(DataAccessError):
    """활성 트랜잭션이 없을 때 사용.

    Raised when a write is attempted outside an active transaction, or the
    session's transaction has already been invalidated.
    """

    kind = StoreErrorKind.NO_ACTIVE_TRANSACTION
    default_detail = "An active transaction is required."


class RecordNotFoundError(DataAccessError):
    """요청한 레코드가 없을 때 사용 (Raised when a looked-up record does not exist)."""

    kind = StoreErrorKind.NOT_FOUND
    default_detail = "Record not found."


class StoreTimeoutError(DataAccessError):
    """쿼리 또는 락 대기 시간 초과 (Raised when a query or lock wait times out)."""

    kind = StoreErrorKind.TIMEOUT
    default_detail = "The operation exceeded the store timeout."


class LockConflictError(DataAccessError):
    """락 충돌 또는 교착 상태 (Raised on lock conflicts and deadlocks)."""

    kind = StoreErrorKind.LOCK_CONFLICT
    default_detail = "The operation failed due to a lock conflict."


class ConcurrencyConflictError(DataAccessError):
    """낙관적 동시성 충돌 (Raised when a concurrent change invalidates the write)."""

    kind = StoreErrorKind.CONCURRENCY_CONFLICT
    default_detail = "The record was modified concurrently."


class AmbiguousResultError(DataAccessError):
    """결과가 중복되거나 초기화되지 않았을 때 사용.

    Raised when a single result was expected but several rows matched, or
    the result object is not attached to a session.
    """

    kind = StoreErrorKind.AMBIGUOUS_RESULT
    default_detail = "The query returned an ambiguous result."


class StoreFailureError(DataAccessError):
    """기타 저장소 오류 (Raised for any other store failure)."""

    kind = StoreErrorKind.STORE_FAILURE


# 분류별 예외 클래스 매핑 (Exception class for each failure category)
ERROR_CLASSES: dict[StoreErrorKind, type[DataAccessError]] = {
    cls.kind: cls
    for cls in (
        InvalidArgumentError,
        NoActiveTransactionError,
        RecordNotFoundError,
        StoreTimeoutError,
        LockConflictError,
        ConcurrencyConflictError,
        AmbiguousResultError,
        StoreFailureError,
    )
}
