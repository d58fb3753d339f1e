"""저장소 오류 변환 테스트.

Store error translation tests: classification of SQLAlchemy and driver
failures, and the log-once/re-raise behaviour of every repository
operation against a stubbed session.
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import exc as orm_exc

from sprintboard.models import Sprint, SprintResource, SprintTasks, Task
from sprintboard.repositories.base import OperationMessages, classify_error, store_errors
from sprintboard.repositories.sprint_repository import sprint_repository as repo
from sprintboard.utils.exceptions import (
    AmbiguousResultError,
    ConcurrencyConflictError,
    DataAccessError,
    InvalidArgumentError,
    LockConflictError,
    NoActiveTransactionError,
    RecordNotFoundError,
    StoreErrorKind,
    StoreFailureError,
    StoreTimeoutError,
)


class DriverError(Exception):
    """SQLSTATE를 가진 드라이버 예외 흉내 (Stand-in for a DBAPI error carrying a SQLSTATE)."""

    def __init__(self, message: str, sqlstate: str | None = None) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate


def operational(message: str, sqlstate: str | None = None) -> sa_exc.OperationalError:
    return sa_exc.OperationalError("SELECT 1", {}, DriverError(message, sqlstate))


def stub_session(failure: BaseException) -> MagicMock:
    """모든 DB 호출이 주어진 예외를 던지는 세션."""
    session = MagicMock()
    session.in_transaction.return_value = True
    session.execute = AsyncMock(side_effect=failure)
    session.flush = AsyncMock(side_effect=failure)
    session.merge = AsyncMock(side_effect=failure)
    session.refresh = AsyncMock()
    return session


def error_records(caplog) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.levelno >= logging.ERROR and r.name.startswith("sprintboard")]


class TestClassifyError:
    """예외 분류 테스트."""

    @pytest.mark.parametrize(
        ("exc", "kind"),
        [
            (sa_exc.ArgumentError("bad column"), StoreErrorKind.INVALID_ARGUMENT),
            (sa_exc.IntegrityError("INSERT", {}, DriverError("UNIQUE constraint failed")), StoreErrorKind.INVALID_ARGUMENT),
            (sa_exc.PendingRollbackError("rolled back"), StoreErrorKind.NO_ACTIVE_TRANSACTION),
            (sa_exc.NoResultFound("none"), StoreErrorKind.NOT_FOUND),
            (sa_exc.MultipleResultsFound("many"), StoreErrorKind.AMBIGUOUS_RESULT),
            (orm_exc.StaleDataError("stale"), StoreErrorKind.CONCURRENCY_CONFLICT),
            (sa_exc.TimeoutError("pool"), StoreErrorKind.TIMEOUT),
            (operational("canceling statement", "57014"), StoreErrorKind.TIMEOUT),
            (operational("could not obtain lock", "55P03"), StoreErrorKind.TIMEOUT),
            (operational("deadlock detected", "40P01"), StoreErrorKind.LOCK_CONFLICT),
            (operational("could not serialize access", "40001"), StoreErrorKind.CONCURRENCY_CONFLICT),
            (operational("database is locked"), StoreErrorKind.LOCK_CONFLICT),
            (operational("connection refused"), StoreErrorKind.STORE_FAILURE),
            (sa_exc.InvalidRequestError("whatever"), StoreErrorKind.STORE_FAILURE),
            (NoActiveTransactionError(), StoreErrorKind.NO_ACTIVE_TRANSACTION),
        ],
    )
    def test_kind(self, exc, kind):
        assert classify_error(exc) is kind

    def test_non_store_error_is_unrecognised(self):
        """SQLAlchemy 예외가 아니면 None."""
        assert classify_error(ValueError("nope")) is None


class TestStoreErrors:
    """store_errors 컨텍스트 관리자 테스트."""

    MESSAGES = OperationMessages(
        default="Generic failure.",
        by_kind={StoreErrorKind.NOT_FOUND: "Thing {thing_id} not found."},
    )

    def test_relabels_with_message_and_chains(self, caplog):
        original = sa_exc.NoResultFound("No row was found")
        with pytest.raises(RecordNotFoundError) as exc_info:
            with store_errors(self.MESSAGES, thing_id=5):
                raise original

        assert str(exc_info.value) == "Thing 5 not found."
        assert exc_info.value.__cause__ is original
        records = error_records(caplog)
        assert len(records) == 1
        assert "[not_found]" in records[0].getMessage()

    def test_exception_type_message_wins_over_kind(self):
        """예외 타입별 메시지가 분류 메시지보다 우선."""
        messages = OperationMessages(
            default="Generic failure.",
            by_kind={StoreErrorKind.INVALID_ARGUMENT: "Bad input."},
            by_error={sa_exc.IntegrityError: "Already there."},
        )
        with pytest.raises(InvalidArgumentError, match="Already there."):
            with store_errors(messages):
                raise sa_exc.IntegrityError("INSERT", {}, DriverError("duplicate key"))

        with pytest.raises(InvalidArgumentError, match="Bad input."):
            with store_errors(messages):
                raise sa_exc.ArgumentError("bad column")

    def test_unlisted_kind_uses_default(self):
        with pytest.raises(StoreTimeoutError, match="Generic failure."):
            with store_errors(self.MESSAGES):
                raise sa_exc.TimeoutError("QueuePool limit reached")

    def test_unrecognised_errors_propagate_untouched(self, caplog):
        """알 수 없는 예외는 변환하지 않고 로그도 남기지 않음."""
        with pytest.raises(KeyError):
            with store_errors(self.MESSAGES):
                raise KeyError("x")

        assert error_records(caplog) == []


def _sprint() -> Sprint:
    return Sprint(sprint_id=0, module_id=1, project_id=1)


# (작업 이름, 호출, 주입할 예외, 기대 예외 클래스)
OPERATIONS = [
    ("get_backlogs", lambda db: repo.get_backlogs(db), operational("statement timeout", "57014"), StoreTimeoutError),
    ("get_sprint_details", lambda db: repo.get_sprint_details(db, 42), sa_exc.NoResultFound("none"), RecordNotFoundError),
    ("get_tasks", lambda db: repo.get_tasks(db, 7), sa_exc.MultipleResultsFound("many"), AmbiguousResultError),
    ("get_all_sprints", lambda db: repo.get_all_sprints(db), operational("connection reset"), StoreFailureError),
    ("store_sprint", lambda db: repo.store_sprint(db, _sprint()),
     sa_exc.IntegrityError("INSERT", {}, DriverError("duplicate key")), InvalidArgumentError),
    ("get_all_tasks_by_sprint_id", lambda db: repo.get_all_tasks_by_sprint_id(db, 3),
     operational("deadlock detected", "40P01"), LockConflictError),
    ("get_sprint_modules_by_project_id", lambda db: repo.get_sprint_modules_by_project_id(db, 2),
     sa_exc.TimeoutError("pool"), StoreTimeoutError),
    ("get_functional_units_by_mod_id", lambda db: repo.get_functional_units_by_mod_id(db, 1, 2),
     operational("disk I/O error"), StoreFailureError),
    ("store_task", lambda db: repo.store_task(db, Task(task_id=5, module_id=1, task_name="t")),
     orm_exc.StaleDataError("stale"), ConcurrencyConflictError),
    ("get_all_resources", lambda db: repo.get_all_resources(db), sa_exc.ArgumentError("bad"), InvalidArgumentError),
    ("store_sprint_resource", lambda db: repo.store_sprint_resource(db, SprintResource(sprint_id=1, user_id=1)),
     sa_exc.PendingRollbackError("inactive"), NoActiveTransactionError),
    ("store_sprint_tasks", lambda db: repo.store_sprint_tasks(db, SprintTasks(sprint_id=1, task_id=1)),
     operational("database is locked"), LockConflictError),
    ("get_sprint_by_proj_id", lambda db: repo.get_sprint_by_proj_id(db, 2), operational("boom"), StoreFailureError),
    ("update_functional_status", lambda db: repo.update_functional_status(db, 9),
     operational("could not serialize access", "40001"), ConcurrencyConflictError),
]


class TestOperationFailures:
    """모든 작업이 같은 분류로 재발생하고 오류 로그를 한 번만 남기는지 검증."""

    @pytest.mark.parametrize(
        ("name", "call", "failure", "expected"),
        OPERATIONS,
        ids=[op[0] for op in OPERATIONS],
    )
    async def test_same_category_and_one_log(self, name, call, failure, expected, caplog):
        with pytest.raises(expected) as exc_info:
            await call(stub_session(failure))

        err: DataAccessError = exc_info.value
        assert err.kind is classify_error(failure)
        assert err.__cause__ is failure
        assert str(failure) not in str(err)
        assert len(error_records(caplog)) == 1

    async def test_non_store_failure_is_not_caught(self, caplog):
        """SQLAlchemy 외 예외는 원래 메시지 그대로 전파."""
        with pytest.raises(RuntimeError, match="driver exploded"):
            await repo.get_all_sprints(stub_session(RuntimeError("driver exploded")))

        assert error_records(caplog) == []

    async def test_duplicate_sprint_message(self):
        """중복 스프린트는 전용 메시지로 보고."""
        failure = sa_exc.IntegrityError("INSERT", {}, DriverError("duplicate key value violates unique constraint"))

        with pytest.raises(InvalidArgumentError) as exc_info:
            await repo.store_sprint(stub_session(failure), _sprint())

        assert str(exc_info.value) == "Sprint already exists in the database."

    async def test_invalid_sprint_message_for_other_argument_errors(self):
        with pytest.raises(InvalidArgumentError, match="Invalid sprint data. Please provide valid data."):
            await repo.store_sprint(stub_session(RuntimeError("unused")), "not a sprint")
