"""테스트 인프라 (인메모리 SQLite DB, 세션, 도메인 데이터 픽스처).

Test infrastructure: in-memory SQLite database, session, and domain data fixtures.
Each test gets its own engine, so schema and data never leak between tests.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from sprintboard.database import create_schema, unit_of_work  # noqa: E402
from sprintboard.models import FunctionalUnit, Module, Project, Sprint, Task, User  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# 엔진, 세션 (Engine and sessions)
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 스키마를 생성합니다."""
    eng = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    await create_schema(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """트랜잭션이 시작된 세션을 제공합니다 (Session inside an active transaction)."""
    async with unit_of_work(session_factory) as session:
        yield session


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def project(db: AsyncSession) -> Project:
    """테스트 프로젝트를 생성합니다."""
    p = Project(project_name="Loan Origination")
    db.add(p)
    await db.flush()
    await db.refresh(p)
    return p


@pytest_asyncio.fixture
async def other_project(db: AsyncSession) -> Project:
    p = Project(project_name="Collections")
    db.add(p)
    await db.flush()
    await db.refresh(p)
    return p


@pytest_asyncio.fixture
async def module(db: AsyncSession, project: Project) -> Module:
    """테스트 모듈을 생성합니다."""
    m = Module(project_id=project.project_id, module_name="Customer Onboarding", module_description="KYC flow")
    db.add(m)
    await db.flush()
    await db.refresh(m)
    return m


@pytest_asyncio.fixture
async def second_module(db: AsyncSession, project: Project) -> Module:
    m = Module(project_id=project.project_id, module_name="Disbursement")
    db.add(m)
    await db.flush()
    await db.refresh(m)
    return m


@pytest_asyncio.fixture
async def sprint(db: AsyncSession, project: Project, module: Module) -> Sprint:
    """테스트 모듈에 계획된 스프린트를 생성합니다."""
    s = Sprint(module_id=module.module_id, project_id=project.project_id)
    db.add(s)
    await db.flush()
    await db.refresh(s)
    return s


@pytest_asyncio.fixture
async def open_task(db: AsyncSession, module: Module) -> Task:
    """완료되지 않은 업무를 생성합니다."""
    t = Task(module_id=module.module_id, task_name="Collect documents")
    db.add(t)
    await db.flush()
    await db.refresh(t)
    return t


@pytest_asyncio.fixture
async def users(db: AsyncSession) -> list[User]:
    """테스트 사용자 두 명을 생성합니다."""
    result = []
    for name, role in [("Asha Rao", "developer"), ("Ravi Kumar", "tester")]:
        u = User(display_name=name, email=f"{name.split()[0].lower()}@example.com", user_role=role, password_hash="x")
        db.add(u)
        await db.flush()
        await db.refresh(u)
        result.append(u)
    return result


@pytest_asyncio.fixture
async def functional_units(db: AsyncSession, project: Project, module: Module) -> list[FunctionalUnit]:
    """미배정 기능 단위 두 개와 배정된 기능 단위 한 개를 생성합니다."""
    rows = [
        FunctionalUnit(funit_id=9, module_id=module.module_id, project_id=project.project_id, funit_name="Upload ID"),
        FunctionalUnit(funit_id=10, module_id=module.module_id, project_id=project.project_id, funit_name="Verify PAN"),
        FunctionalUnit(
            funit_id=11,
            module_id=module.module_id,
            project_id=project.project_id,
            funit_name="Credit check",
            fun_status="Task",
        ),
    ]
    db.add_all(rows)
    await db.flush()
    return rows
