"""스프린트 레포지토리 (스프린트 계획 관련 DB 쿼리 담당).

Sprint Repository, handling every database query needed for sprint planning:
backlog and sprint listings, task and module lookups, functional units,
resources, and the sprint/task/resource writes.

Each operation runs inside the caller's session and transaction, logs one
INFO line on success and, on failure, one ERROR line before raising the
matching DataAccessError subclass (see repositories.base.store_errors).
"""

import logging
from typing import Sequence

from sqlalchemy import Select, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.models.project import FUNCTIONAL_UNIT_TASK_STATUS, FunctionalUnit, Module
from sprintboard.models.sprint import Sprint, SprintResource, SprintTasks
from sprintboard.models.task import Task
from sprintboard.models.user import User
from sprintboard.repositories.base import (
    BaseRepository,
    OperationMessages,
    require_identifier,
    require_transaction,
    store_errors,
)
from sprintboard.schemas.module import ModuleDTO
from sprintboard.schemas.user import UserDto
from sprintboard.utils.exceptions import StoreErrorKind as Kind

logger = logging.getLogger(__name__)

_TIMEOUT_MESSAGE = "The execution of the query has exceeded the specified timeout."

# 작업별 오류 메시지 (Error messages per operation)
BACKLOG_MESSAGES = OperationMessages(
    default="An error occurred while retrieving data from the database.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid request. Please provide a valid query parameter.",
        Kind.AMBIGUOUS_RESULT: "Internal error. Please try again later.",
        Kind.TIMEOUT: _TIMEOUT_MESSAGE,
    },
)
SPRINT_DETAILS_MESSAGES = OperationMessages(
    default="An error occurred while fetching the sprint details for sprint ID: {sprint_id!r}.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid sprint ID: {sprint_id!r}. Please provide a valid ID.",
        Kind.NOT_FOUND: "Sprint not found for the given ID: {sprint_id!r}.",
        Kind.NO_ACTIVE_TRANSACTION: "Transaction is required to fetch the sprint details for sprint ID: {sprint_id!r}.",
        Kind.TIMEOUT: "Fetching sprint details for sprint ID {sprint_id!r} took longer than expected. Please try again later.",
        Kind.LOCK_CONFLICT: "Unable to fetch sprint details for sprint ID {sprint_id!r} due to a lock conflict.",
    },
)
TASKS_MESSAGES = OperationMessages(
    default="An error occurred while fetching tasks. Please try again later.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid module ID. Please provide a valid ID.",
        Kind.NOT_FOUND: "Module not found for the given ID.",
        Kind.NO_ACTIVE_TRANSACTION: "Unable to fetch tasks. Please try again later.",
        Kind.TIMEOUT: "Fetching tasks took longer than expected. Please try again later.",
        Kind.AMBIGUOUS_RESULT: "Multiple tasks found for the specified module ID. Please contact support for assistance.",
    },
)
ALL_SPRINTS_MESSAGES = OperationMessages(
    default="An error occurred while fetching sprints.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid query. Please provide a valid query.",
        Kind.NO_ACTIVE_TRANSACTION: "Transaction is required to perform the query operation.",
        Kind.TIMEOUT: _TIMEOUT_MESSAGE,
        Kind.NOT_FOUND: "No sprints found.",
        Kind.AMBIGUOUS_RESULT: "Multiple sprints found. Please contact support for assistance.",
    },
)
STORE_SPRINT_MESSAGES = OperationMessages(
    default="An error occurred while storing the sprint.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid sprint data. Please provide valid data.",
        Kind.NO_ACTIVE_TRANSACTION: "Transaction is required to perform the store operation.",
    },
    by_error={IntegrityError: "Sprint already exists in the database."},
)
SPRINT_TASKS_MESSAGES = OperationMessages(
    default="An error occurred while fetching tasks for the sprint.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid sprint ID. Please provide a valid ID.",
        Kind.NO_ACTIVE_TRANSACTION: "Transaction is required to perform the query operation.",
        Kind.TIMEOUT: _TIMEOUT_MESSAGE,
        Kind.NOT_FOUND: "No tasks found for the specified sprint ID.",
        Kind.AMBIGUOUS_RESULT: "Multiple tasks found for the specified sprint ID.",
    },
)
SPRINT_MODULES_MESSAGES = OperationMessages(
    default="An error occurred while retrieving sprint modules.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid project ID. Please provide a valid ID.",
        Kind.TIMEOUT: _TIMEOUT_MESSAGE,
        Kind.NOT_FOUND: "No sprint modules found for the specified project ID.",
    },
)
FUNCTIONAL_UNITS_MESSAGES = OperationMessages(
    default="An error occurred while retrieving functional units.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid module or project ID. Please provide valid IDs.",
        Kind.TIMEOUT: _TIMEOUT_MESSAGE,
    },
)
STORE_TASK_MESSAGES = OperationMessages(
    default="An error occurred while storing the task. Please try again later.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid task. Please provide a valid task.",
        Kind.NO_ACTIVE_TRANSACTION: "Failed to store the task. Transaction is required.",
    },
)
RESOURCES_MESSAGES = OperationMessages(
    default="An error occurred while retrieving resources. Please try again later.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid query. Please provide a valid query.",
    },
)
STORE_SPRINT_RESOURCE_MESSAGES = OperationMessages(
    default="An error occurred while storing the sprint resource. Please try again later.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid sprint resource. Please provide a valid sprint resource.",
        Kind.NO_ACTIVE_TRANSACTION: "Transaction is required to store the sprint resource.",
    },
)
STORE_SPRINT_TASKS_MESSAGES = OperationMessages(
    default="An error occurred while storing the sprint task. Please try again later.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid sprint task. Please provide a valid sprint task.",
        Kind.NO_ACTIVE_TRANSACTION: "Transaction is required to store the sprint task.",
    },
)
SPRINTS_BY_PROJECT_MESSAGES = OperationMessages(
    default="An error occurred while retrieving sprints by project ID.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid project ID. Please provide a valid ID.",
    },
)
FUNCTIONAL_STATUS_MESSAGES = OperationMessages(
    default="An error occurred while updating the functional status.",
    by_kind={
        Kind.INVALID_ARGUMENT: "Invalid functional unit. Please provide a valid functional unit ID.",
        Kind.NO_ACTIVE_TRANSACTION: "Transaction is required to update the functional status.",
        Kind.TIMEOUT: "The query execution has exceeded the specified timeout.",
        Kind.LOCK_CONFLICT: "Pessimistic lock acquisition failed.",
        Kind.CONCURRENCY_CONFLICT: "Optimistic lock acquisition failed.",
        Kind.NOT_FOUND: "No result found for the provided functional unit ID.",
    },
)


class SprintRepository(BaseRepository[Sprint]):
    """스프린트 레포지토리.

    Sprint repository exposing one method per query or command used by
    sprint planning. Methods take the session first and never commit.

    Extends:
        BaseRepository[Sprint]
    """

    def __init__(self) -> None:
        super().__init__(Sprint, id_attr="sprint_id")

    # === 스프린트 조회 (Sprint queries) ===

    async def get_backlogs(self, db: AsyncSession) -> Sequence[Sprint]:
        """백로그 스프린트를 조회합니다.

        Retrieve sprints whose module still has at least one task without a
        completion timestamp.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)

        Returns:
            Sequence[Sprint]: 백로그 스프린트 목록 (Backlog sprints, possibly empty)
        """
        with store_errors(BACKLOG_MESSAGES, logger):
            open_task = (
                select(Task.task_id)
                .where(
                    Task.module_id == Sprint.module_id,
                    Task.task_completed_datetime.is_(None),
                )
                .exists()
            )
            query: Select = select(Sprint).where(open_task)
            sprints: Sequence[Sprint] = await self.fetch_all(db, query)

        logger.info("Successfully retrieved backlog sprints")
        return sprints

    async def get_sprint_details(self, db: AsyncSession, sprint_id: int) -> Sprint:
        """ID로 스프린트를 조회합니다.

        Retrieve a single sprint by ID.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            sprint_id: 스프린트 ID (Sprint identifier)

        Returns:
            Sprint: 조회된 스프린트 (Found sprint)

        Raises:
            RecordNotFoundError: 스프린트가 없을 때, 메시지에 ID 포함
                                 (When no sprint has this ID; the message echoes it)
        """
        with store_errors(SPRINT_DETAILS_MESSAGES, logger, sprint_id=sprint_id):
            require_identifier(sprint_id, "sprint ID")
            sprint: Sprint = await self.get_by_id(db, sprint_id)

        logger.info("Successfully retrieved sprint details for sprint ID: %s", sprint_id)
        return sprint

    async def get_all_sprints(self, db: AsyncSession) -> Sequence[Sprint]:
        """모든 스프린트를 조회합니다 (Retrieve every sprint)."""
        with store_errors(ALL_SPRINTS_MESSAGES, logger):
            sprints: Sequence[Sprint] = await self.get_all(db)

        logger.info("Successfully retrieved all sprints.")
        return sprints

    async def get_sprint_by_proj_id(self, db: AsyncSession, project_id: int) -> Sequence[Sprint]:
        """프로젝트의 스프린트를 조회합니다 (Retrieve the sprints of a project)."""
        with store_errors(SPRINTS_BY_PROJECT_MESSAGES, logger):
            require_identifier(project_id, "project ID")
            sprints: Sequence[Sprint] = await self.get_all(db, filters={"project_id": project_id})

        logger.info("Retrieved sprints by project ID successfully.")
        return sprints

    async def get_all_tasks_by_sprint_id(self, db: AsyncSession, sprint_id: int) -> Sequence[SprintTasks]:
        """스프린트에 연결된 업무 행을 조회합니다.

        Retrieve the sprint/task link rows of a sprint.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            sprint_id: 스프린트 ID (Sprint identifier)

        Returns:
            Sequence[SprintTasks]: 연결 행 목록 (Link rows, possibly empty)
        """
        with store_errors(SPRINT_TASKS_MESSAGES, logger):
            require_identifier(sprint_id, "sprint ID")
            links: Sequence[SprintTasks] = await self.get_all(db, filters={"sprint_id": sprint_id}, model=SprintTasks)

        logger.info("Successfully retrieved all tasks for sprint ID: %s", sprint_id)
        return links

    # === 업무 / 모듈 / 기능 단위 조회 (Task, module and functional unit queries) ===

    async def get_tasks(self, db: AsyncSession, module_id: int) -> Sequence[Task]:
        """모듈의 업무를 조회합니다.

        Retrieve all tasks of a module. A module without tasks yields an
        empty list, not an error.
        """
        with store_errors(TASKS_MESSAGES, logger):
            require_identifier(module_id, "module ID")
            tasks: Sequence[Task] = await self.get_all(db, filters={"module_id": module_id}, model=Task)

        logger.info("Successfully retrieved tasks for module ID: %s", module_id)
        return tasks

    async def get_sprint_modules_by_project_id(self, db: AsyncSession, project_id: int) -> list[ModuleDTO]:
        """아직 스프린트가 없는 프로젝트 모듈을 조회합니다.

        Retrieve the modules of a project that no sprint references yet,
        projected to ModuleDTO.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            project_id: 프로젝트 ID (Project identifier)

        Returns:
            list[ModuleDTO]: 모듈 투영 목록 (Module projections, possibly empty)
        """
        with store_errors(SPRINT_MODULES_MESSAGES, logger):
            require_identifier(project_id, "project ID")
            planned = select(Sprint.module_id).where(Sprint.module_id.is_not(None))
            query: Select = select(Module).where(
                Module.project_id == project_id,
                Module.module_id.not_in(planned),
            )
            modules: Sequence[Module] = await self.fetch_all(db, query)

        for module in modules:
            logger.info("Retrieved module: %r", module)

        module_dtos: list[ModuleDTO] = [ModuleDTO.from_entity(m) for m in modules]

        if module_dtos:
            logger.info("First unplanned module: %r (module_id=%s)", modules[0], module_dtos[0].module_id)
        else:
            logger.info("No unplanned modules found for project ID: %s", project_id)
        return module_dtos

    async def get_functional_units_by_mod_id(
        self,
        db: AsyncSession,
        module_id: int,
        project_id: int,
    ) -> Sequence[FunctionalUnit]:
        """모듈/프로젝트의 미배정 기능 단위를 조회합니다.

        Retrieve the open functional units (fun_status IS NULL) of a
        module within a project.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            module_id: 모듈 ID (Module identifier)
            project_id: 프로젝트 ID (Project identifier)

        Returns:
            Sequence[FunctionalUnit]: 미배정 기능 단위 목록 (Open functional units)
        """
        with store_errors(FUNCTIONAL_UNITS_MESSAGES, logger):
            require_identifier(module_id, "module ID")
            require_identifier(project_id, "project ID")
            query: Select = select(FunctionalUnit).where(
                FunctionalUnit.module_id == module_id,
                FunctionalUnit.project_id == project_id,
                FunctionalUnit.fun_status.is_(None),
            )
            units: Sequence[FunctionalUnit] = await self.fetch_all(db, query)

        for unit in units:
            logger.info("Retrieved functional unit: %r", unit)
        logger.info(
            "Retrieved %d open functional units for module ID %s, project ID %s.",
            len(units),
            module_id,
            project_id,
        )
        return units

    async def get_all_resources(self, db: AsyncSession) -> list[UserDto]:
        """모든 사용자를 투입 가능 인력으로 조회합니다 (Retrieve every user as a UserDto)."""
        with store_errors(RESOURCES_MESSAGES, logger):
            users: Sequence[User] = await self.fetch_all(db, select(User))

        user_dtos: list[UserDto] = [UserDto.from_entity(u) for u in users]
        logger.info("Retrieved %d resources.", len(user_dtos))
        return user_dtos

    # === 쓰기 작업 (Writes) ===

    async def store_sprint(self, db: AsyncSession, sprint: Sprint) -> Sprint:
        """스프린트를 추가하거나 병합합니다.

        Insert the sprint when sprint_id is 0 or None, otherwise merge it
        over the stored row.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            sprint: 저장할 스프린트 (Sprint to store)

        Returns:
            Sprint: 저장된 스프린트, 생성된 ID 포함 (Stored sprint with its identifier)
        """
        with store_errors(STORE_SPRINT_MESSAGES, logger):
            stored: Sprint = await self.upsert(db, sprint)

        logger.info("Stored sprint in the database: %r", stored)
        return stored

    async def store_task(self, db: AsyncSession, task: Task) -> Task:
        """업무를 추가하거나 병합합니다 (Insert or merge a task, same rule as store_sprint)."""
        is_new: bool = isinstance(task, Task) and not task.task_id
        with store_errors(STORE_TASK_MESSAGES, logger):
            stored: Task = await self.upsert(db, task, model=Task, id_attr="task_id")

        logger.info("%s task: %r", "Stored new" if is_new else "Updated", stored)
        return stored

    async def store_sprint_resource(self, db: AsyncSession, resource: SprintResource) -> None:
        """스프린트 투입 인력을 추가합니다 (Insert a sprint resource; no update branch)."""
        with store_errors(STORE_SPRINT_RESOURCE_MESSAGES, logger):
            await self.insert(db, resource, model=SprintResource)

        logger.info("Sprint resource stored successfully.")

    async def store_sprint_tasks(self, db: AsyncSession, sprint_task: SprintTasks) -> None:
        """스프린트-업무 연결을 추가합니다 (Insert a sprint/task link; no update branch)."""
        with store_errors(STORE_SPRINT_TASKS_MESSAGES, logger):
            await self.insert(db, sprint_task, model=SprintTasks)

        logger.info("Sprint task stored successfully.")

    async def update_functional_status(self, db: AsyncSession, funit_id: int) -> None:
        """기능 단위 상태를 업무로 변경합니다.

        Set fun_status to FUNCTIONAL_UNIT_TASK_STATUS for every row with the
        given functional unit ID, with a single UPDATE statement. The
        transition is one way; no operation resets the status.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            funit_id: 기능 단위 ID (Functional unit identifier)
        """
        with store_errors(FUNCTIONAL_STATUS_MESSAGES, logger):
            require_identifier(funit_id, "functional unit ID")
            require_transaction(db)
            stmt = (
                update(FunctionalUnit)
                .where(FunctionalUnit.funit_id == funit_id)
                .values(fun_status=FUNCTIONAL_UNIT_TASK_STATUS)
                .execution_options(synchronize_session="fetch")
            )
            result = await db.execute(stmt)

        logger.info("Functional status updated successfully (%d row(s)).", result.rowcount)


# 싱글턴 인스턴스 (Singleton instance)
sprint_repository: SprintRepository = SprintRepository()
