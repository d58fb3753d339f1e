"""스프린트 관련 SQLAlchemy ORM 모델 정의.

Sprint SQLAlchemy ORM model definitions.

Tables:
    - sprints: 스프린트 (Sprints planned per module)
    - sprint_tasks: 스프린트-업무 연결 (Sprint/task association rows)
    - sprint_resources: 스프린트 투입 인력 (Users assigned to a sprint)
"""

from datetime import date

from sqlalchemy import String, Date, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from sprintboard.database import Base


class Sprint(Base):
    """스프린트 모델.

    Sprint model. sprint_id 0 or None marks an unsaved sprint.

    Attributes:
        sprint_id: 스프린트 ID (Sprint identifier, generated on insert)
        module_id: 대상 모듈 FK (Module the sprint is planned for)
        project_id: 소속 프로젝트 FK (Parent project foreign key)
        sprint_start_date: 시작일 (Start date, optional)
        sprint_end_date: 종료일 (End date, optional)
        sprint_lead: 리드 사용자 FK (Lead user, optional)
    """

    __tablename__ = "sprints"

    sprint_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    module_id: Mapped[int] = mapped_column(Integer, ForeignKey("modules.module_id"), nullable=False)
    project_id: Mapped[int] = mapped_column(Integer, ForeignKey("projects.project_id"), nullable=False)
    sprint_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    sprint_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    sprint_lead: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.user_id"), nullable=True)

    def __repr__(self) -> str:
        return (
            f"Sprint(sprint_id={self.sprint_id!r}, module_id={self.module_id!r}, "
            f"project_id={self.project_id!r})"
        )


class SprintTasks(Base):
    """스프린트-업무 연결 모델 (복합 키).

    Association row linking a task to a sprint, keyed by (sprint_id, task_id).
    """

    __tablename__ = "sprint_tasks"

    sprint_id: Mapped[int] = mapped_column(Integer, ForeignKey("sprints.sprint_id"), primary_key=True)
    task_id: Mapped[int] = mapped_column(Integer, ForeignKey("tasks.task_id"), primary_key=True)
    sprint_task_status: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"SprintTasks(sprint_id={self.sprint_id!r}, task_id={self.task_id!r})"


class SprintResource(Base):
    """스프린트 투입 인력 모델.

    Sprint resource model, keyed by (sprint_id, user_id).
    """

    __tablename__ = "sprint_resources"

    sprint_id: Mapped[int] = mapped_column(Integer, ForeignKey("sprints.sprint_id"), primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.user_id"), primary_key=True)
    resource_role: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"SprintResource(sprint_id={self.sprint_id!r}, user_id={self.user_id!r})"
