"""모듈 투영 스키마.

Module projection schema.
"""

from pydantic import BaseModel, ConfigDict

from sprintboard.models.project import Module


class ModuleDTO(BaseModel):
    """모듈 응답 스키마.

    Module projection returned by the sprint repository.

    Attributes:
        module_id: 모듈 ID (Module identifier)
        module_name: 모듈 이름 (Module name)
        module_description: 모듈 설명 (Module description)
        project_id: 소속 프로젝트 ID (Parent project identifier)
    """

    model_config = ConfigDict(from_attributes=True)

    module_id: int
    module_name: str
    module_description: str | None = None
    project_id: int

    @classmethod
    def from_entity(cls, module: Module) -> "ModuleDTO":
        """ORM 모듈 엔티티로부터 DTO를 생성합니다 (Build the DTO from a Module entity)."""
        return cls.model_validate(module)
