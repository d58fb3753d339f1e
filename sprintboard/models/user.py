"""사용자 관련 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.
Users are the resources that can be assigned to sprints and tasks.

Tables:
    - users: 사용자 계정 (User accounts)
"""

from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from sprintboard.database import Base


class User(Base):
    """사용자 모델 (스프린트 투입 가능한 인력).

    User model. Only a subset of these columns crosses the data-access
    boundary, through UserDto.

    Attributes:
        user_id: 사용자 ID (User identifier)
        display_name: 표시 이름 (Display name)
        email: 이메일 (Email address, optional)
        user_role: 직무 (Job role, e.g. "developer", "tester")
        password_hash: 해시된 비밀번호 (Hashed password, never projected)
        is_active: 활성 상태 (Active status)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 (User identifier, auto-generated)
    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_role: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # 비밀번호 해시 (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"User(user_id={self.user_id!r}, display_name={self.display_name!r})"
