"""Pydantic 스키마 패키지 (데이터 접근 계층 밖으로 나가는 투영 모델).

Pydantic schema package holding the projections returned across the
data-access boundary instead of raw ORM entities.
"""

from sprintboard.schemas.module import ModuleDTO
from sprintboard.schemas.user import UserDto

__all__ = ["ModuleDTO", "UserDto"]
