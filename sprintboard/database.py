"""데이터베이스 엔진, 세션, 작업 단위(Unit of Work) 설정 모듈.

Database engine and session configuration module.
Sets up the async SQLAlchemy engine, session factory, and ORM base class,
plus the unit-of-work context manager that owns transaction boundaries
for callers of the repositories.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from sprintboard.config import settings


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """연결 URL로 비동기 엔진을 생성합니다.

    Create an async engine for the given URL.
    Pool sizing and asyncpg connect args are only applied to drivers that
    accept them, so the same factory serves PostgreSQL and SQLite.

    Args:
        database_url: SQLAlchemy 비동기 연결 URL (Async SQLAlchemy connection URL)
        echo: SQL 로그 출력 여부 (Whether to echo emitted SQL)

    Returns:
        AsyncEngine: 생성된 엔진 (The created engine)
    """
    url = make_url(database_url)
    options: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}

    if url.get_backend_name() != "sqlite":
        options["pool_size"] = settings.DB_POOL_SIZE
        options["max_overflow"] = settings.DB_MAX_OVERFLOW

    if url.get_driver_name() == "asyncpg":
        # 트랜잭션 모드 풀러에서 prepared statement 캐시 비활성화
        # (Disable prepared statement caches for transaction-mode poolers)
        options["connect_args"] = {"statement_cache_size": 0}

    return create_async_engine(url, **options)


# 비동기 데이터베이스 엔진 (Async database engine)
engine: AsyncEngine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# 비동기 세션 팩토리 (Async session factory)
# expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능 (Allows attribute access after commit)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스.

    Declarative base class for all ORM models.
    """

    pass


@asynccontextmanager
async def unit_of_work(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """트랜잭션이 시작된 세션을 제공하는 작업 단위.

    Yield a session with an active transaction.
    The transaction commits when the block exits normally and rolls back
    when it raises; the session is closed either way.

    Args:
        session_factory: 사용할 세션 팩토리, None이면 기본 팩토리
                         (Session factory to use; defaults to the module factory)

    Yields:
        AsyncSession: 트랜잭션이 활성화된 세션 (Session inside an active transaction)
    """
    factory = session_factory or async_session
    async with factory() as session:
        async with session.begin():
            yield session


async def create_schema(bind: AsyncEngine | None = None) -> None:
    """등록된 모든 모델의 테이블을 생성합니다.

    Create tables for every registered model on the given engine.
    """
    import sprintboard.models  # noqa: F401 (register all models with metadata)

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
