# tests/conftest.py

import os
from typing import AsyncGenerator, Awaitable, Callable

# 앱 모듈이 설정을 읽기 전에 테스트용 데이터베이스 URL을 지정합니다.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# app.main을 임포트하여 FastAPI 앱 인스턴스에 접근합니다. (변경 알림 리스너도 이때 등록됨)
from app.main import app as main_app
from app.core import dependencies as deps
from app.core.change_log import ChangeLog, bind_change_log
from app.core.database import get_session, enable_sqlite_foreign_keys

# --- 모든 모델 임포트 ---
#  SQLModel.metadata.create_all()이 모든 테이블을 인식하려면 모든 모델이 한 번 이상 임포트되어야 합니다.
from app.domains.models import *    # noqa: F401, F403

from app.domains.plant import models as plant_models
from app.domains.fms import models as fms_models
from app.domains.hrm import models as hrm_models
from app.domains.shared.models import ResourceStatus


# --- 테스트용 데이터베이스 설정 ---
# 테스트 함수마다 새 인메모리 SQLite 데이터베이스를 사용합니다.
# StaticPool로 하나의 연결을 공유해야 인메모리 스키마가 유지됩니다.
TEST_DATABASE_URL = "sqlite+aiosqlite://"


# --- 데이터베이스 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    테스트 함수마다 스키마를 새로 만들고, 테스트가 끝나면 엔진을 정리합니다.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,             # 테스트 시 SQL 쿼리 출력하지 않음
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트 함수에서 사용할 비동기 데이터베이스 세션을 제공합니다."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture(scope="function")
def change_log() -> ChangeLog:
    """테스트마다 비어 있는 변경 알림 로그"""
    return ChangeLog(capacity=50)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession, change_log: ChangeLog) -> AsyncGenerator[AsyncClient, None]:
    """
    테스트 세션과 테스트용 변경 알림 로그를 주입한 AsyncClient를 반환합니다.
    """
    bind_change_log(db_session, change_log)
    original_change_log = main_app.state.change_log
    main_app.state.change_log = change_log

    async def override_get_session():
        yield db_session

    original_overrides = main_app.dependency_overrides.copy()
    try:
        main_app.dependency_overrides.update({
            get_session: override_get_session,
            deps.get_db_session: override_get_session,
        })
        transport = ASGITransport(app=main_app)
        async with AsyncClient(transport=transport, base_url="http://test") as async_client:
            yield async_client
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)
        main_app.state.change_log = original_change_log


# --- 자원 픽스처 ---
# 역할: 테스트 데이터베이스에 자원 레코드를 만들고 모델 객체를 반환합니다.
@pytest_asyncio.fixture(scope="function")
async def test_factory(db_session: AsyncSession) -> plant_models.Factory:
    """테스트용 공장을 생성합니다."""
    factory = plant_models.Factory(code="F-01", name="테스트 공장", location="창원")
    db_session.add(factory)
    await db_session.commit()
    await db_session.refresh(factory)
    return factory


@pytest_asyncio.fixture(scope="function")
async def test_production_line(db_session: AsyncSession, test_factory: plant_models.Factory) -> plant_models.ProductionLine:
    """테스트용 생산라인을 생성합니다."""
    line = plant_models.ProductionLine(factory_id=test_factory.id, code="L-01", name="조립 1라인")
    db_session.add(line)
    await db_session.commit()
    await db_session.refresh(line)
    return line


@pytest_asyncio.fixture(scope="function")
async def test_production_line_b(db_session: AsyncSession, test_factory: plant_models.Factory) -> plant_models.ProductionLine:
    """두 번째 테스트용 생산라인을 생성합니다."""
    line = plant_models.ProductionLine(factory_id=test_factory.id, code="L-02", name="조립 2라인")
    db_session.add(line)
    await db_session.commit()
    await db_session.refresh(line)
    return line


@pytest_asyncio.fixture(scope="function")
async def test_station(db_session: AsyncSession) -> plant_models.Station:
    """바인딩되지 않은 테스트용 스테이션을 생성합니다."""
    station = plant_models.Station(code="S-01", name="용접 스테이션")
    db_session.add(station)
    await db_session.commit()
    await db_session.refresh(station)
    return station


@pytest.fixture(scope="function")
def device_factory(db_session: AsyncSession) -> Callable[..., Awaitable[fms_models.Device]]:
    """설비 레코드를 생성하는 팩토리 (정비 기록 없이 행만 생성)"""
    async def _create_device(code: str, name: str = "테스트 설비", **kwargs) -> fms_models.Device:
        device = fms_models.Device(code=code, name=name, **kwargs)
        db_session.add(device)
        await db_session.commit()
        await db_session.refresh(device)
        return device
    return _create_device


@pytest_asyncio.fixture(scope="function")
async def test_device(device_factory) -> fms_models.Device:
    """가용 상태의 테스트용 설비"""
    return await device_factory("D-01", name="프레스 1호기")


@pytest_asyncio.fixture(scope="function")
async def bound_device(device_factory, test_station: plant_models.Station) -> fms_models.Device:
    """스테이션에 바인딩된(점유) 테스트용 설비"""
    return await device_factory(
        "D-BOUND", name="용접 로봇", station_id=test_station.id, status=ResourceStatus.OCCUPIED.value
    )


@pytest.fixture(scope="function")
def staff_factory(db_session: AsyncSession) -> Callable[..., Awaitable[hrm_models.Staff]]:
    """작업자 레코드를 생성하는 팩토리"""
    async def _create_staff(code: str, name: str = "테스트 작업자", **kwargs) -> hrm_models.Staff:
        staff = hrm_models.Staff(code=code, name=name, **kwargs)
        db_session.add(staff)
        await db_session.commit()
        await db_session.refresh(staff)
        return staff
    return _create_staff


@pytest_asyncio.fixture(scope="function")
async def test_team(db_session: AsyncSession) -> hrm_models.Team:
    """바인딩되지 않은 테스트용 작업반"""
    team = hrm_models.Team(code="T-01", name="1반")
    db_session.add(team)
    await db_session.commit()
    await db_session.refresh(team)
    return team
