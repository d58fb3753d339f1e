"""프로젝트 구조 관련 SQLAlchemy ORM 모델 정의.

Project structure SQLAlchemy ORM model definitions.
A project is split into modules, and each module into functional units
that are later turned into tasks.

Tables:
    - projects: 프로젝트 (Projects)
    - modules: 프로젝트 모듈 (Modules within a project)
    - functional_units: 모듈별 기능 단위 (Functional units within a module)
"""

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from sprintboard.database import Base

# 기능 단위가 업무로 전환되었을 때의 상태 값 (Status written once a functional unit becomes a task)
FUNCTIONAL_UNIT_TASK_STATUS: str = "Task"


class Project(Base):
    """프로젝트 모델.

    Project model, the root of the module/sprint hierarchy.

    Attributes:
        project_id: 프로젝트 ID (Project identifier)
        project_name: 프로젝트 이름 (Project name)
    """

    __tablename__ = "projects"

    project_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_name: Mapped[str] = mapped_column(String(200), nullable=False)

    def __repr__(self) -> str:
        return f"Project(project_id={self.project_id!r}, project_name={self.project_name!r})"


class Module(Base):
    """모듈 모델 (프로젝트 하위 작업 영역).

    Module model. Sprints are planned per module, and tasks belong to a module.

    Attributes:
        module_id: 모듈 ID (Module identifier)
        project_id: 소속 프로젝트 FK (Parent project foreign key)
        module_name: 모듈 이름 (Module name)
        module_description: 모듈 설명 (Module description, optional)
    """

    __tablename__ = "modules"

    module_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, ForeignKey("projects.project_id"), nullable=False)
    module_name: Mapped[str] = mapped_column(String(200), nullable=False)
    module_description: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    def __repr__(self) -> str:
        return (
            f"Module(module_id={self.module_id!r}, project_id={self.project_id!r}, "
            f"module_name={self.module_name!r})"
        )


class FunctionalUnit(Base):
    """기능 단위 모델.

    Functional unit model, keyed by (funit_id, module_id).
    fun_status is NULL while the unit is open and is set to
    FUNCTIONAL_UNIT_TASK_STATUS once it has been turned into a task.

    Attributes:
        funit_id: 기능 단위 ID (Functional unit identifier)
        module_id: 소속 모듈 FK (Parent module foreign key)
        project_id: 소속 프로젝트 FK (Parent project foreign key)
        funit_name: 기능 단위 이름 (Functional unit name)
        funit_description: 설명 (Description, optional)
        fun_status: 상태, NULL이면 미배정 (Status; NULL means open)
    """

    __tablename__ = "functional_units"

    funit_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    module_id: Mapped[int] = mapped_column(Integer, ForeignKey("modules.module_id"), primary_key=True)
    project_id: Mapped[int] = mapped_column(Integer, ForeignKey("projects.project_id"), nullable=False)
    funit_name: Mapped[str] = mapped_column(String(200), nullable=False)
    funit_description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    fun_status: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return (
            f"FunctionalUnit(funit_id={self.funit_id!r}, module_id={self.module_id!r}, "
            f"project_id={self.project_id!r}, fun_status={self.fun_status!r})"
        )
