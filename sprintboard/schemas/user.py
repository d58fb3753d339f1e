"""사용자 투영 스키마.

User projection schema. Credentials and audit columns are never exposed.
"""

from pydantic import BaseModel, ConfigDict

from sprintboard.models.user import User


class UserDto(BaseModel):
    """사용자 응답 스키마.

    User projection returned by the resource listing.

    Attributes:
        user_id: 사용자 ID (User identifier)
        display_name: 표시 이름 (Display name)
        email: 이메일 (Email address, optional)
        user_role: 직무 (Job role, optional)
    """

    model_config = ConfigDict(from_attributes=True)

    user_id: int
    display_name: str
    email: str | None = None
    user_role: str | None = None

    @classmethod
    def from_entity(cls, user: User) -> "UserDto":
        """ORM 사용자 엔티티로부터 DTO를 생성합니다 (Build the DTO from a User entity)."""
        return cls.model_validate(user)
