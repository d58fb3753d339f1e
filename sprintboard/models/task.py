"""업무 관련 SQLAlchemy ORM 모델 정의.

Task SQLAlchemy ORM model definition.

Tables:
    - tasks: 모듈 단위 업무 (Tasks belonging to a module)
"""

from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from sprintboard.database import Base


class Task(Base):
    """업무 모델.

    Task model. A task without task_completed_datetime is part of the
    backlog of every sprint planned for its module.

    Attributes:
        task_id: 업무 ID (Task identifier, generated on insert)
        module_id: 소속 모듈 FK (Parent module foreign key)
        task_name: 업무 이름 (Task name)
        task_description: 업무 설명 (Description, optional)
        assigned_to: 담당자 FK (Assigned user, optional)
        task_created_datetime: 생성 일시 UTC (Creation timestamp)
        task_completed_datetime: 완료 일시, NULL이면 미완료 (Completion timestamp; NULL means open)
    """

    __tablename__ = "tasks"

    task_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    module_id: Mapped[int] = mapped_column(Integer, ForeignKey("modules.module_id"), nullable=False)
    task_name: Mapped[str] = mapped_column(String(200), nullable=False)
    task_description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    assigned_to: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.user_id"), nullable=True)
    task_created_datetime: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 완료 일시 (NULL = backlog)
    task_completed_datetime: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return (
            f"Task(task_id={self.task_id!r}, module_id={self.module_id!r}, "
            f"task_name={self.task_name!r})"
        )
