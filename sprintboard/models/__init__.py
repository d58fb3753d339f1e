"""SQLAlchemy ORM 모델 패키지 (모든 도메인 모델의 중앙 임포트 지점).

SQLAlchemy ORM models package, the central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for schema creation and
foreign key resolution.

Modules:
    project: 프로젝트, 모듈, 기능 단위 (Project, Module, FunctionalUnit)
    sprint: 스프린트, 스프린트-업무, 투입 인력 (Sprint, SprintTasks, SprintResource)
    task: 업무 (Task)
    user: 사용자 (User)
"""

from sprintboard.models.project import Project, Module, FunctionalUnit, FUNCTIONAL_UNIT_TASK_STATUS
from sprintboard.models.sprint import Sprint, SprintTasks, SprintResource
from sprintboard.models.task import Task
from sprintboard.models.user import User

__all__ = [
    "Project", "Module", "FunctionalUnit", "FUNCTIONAL_UNIT_TASK_STATUS",
    "Sprint", "SprintTasks", "SprintResource",
    "Task",
    "User",
]
