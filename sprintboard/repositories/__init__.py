"""레포지토리 패키지 (데이터베이스 쿼리 계층).

Repository package, the database query layer.
Each repository extends BaseRepository and wraps its queries in
store_errors so callers only ever see DataAccessError subclasses.
"""

from sprintboard.repositories.sprint_repository import SprintRepository, sprint_repository

__all__ = ["SprintRepository", "sprint_repository"]
