# app/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 관리 (get_db_session).
- 앱 수명 주기가 소유한 변경 알림 로그 접근 (get_change_log).
- 요청 세션에 묶인 엔진 서비스 생성 (get_binding_service, get_calendar_service).
"""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.change_log import ChangeLog, bind_change_log
# 실제 데이터베이스 세션 제너레이터 임포트
from app.core.database import get_session as get_main_app_session
from app.domains.cal.services import CalendarResolutionService
from app.services.binding_service import ResourceBindingService


def get_change_log(request: Request) -> ChangeLog:
    """app.state에 보관된 변경 알림 로그를 반환합니다."""
    return request.app.state.change_log


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    app.core.database.get_session을 래핑하고, 세션에 변경 알림 로그를 연결합니다.
    """
    async for session in get_main_app_session():
        bind_change_log(session, get_change_log(request))
        yield session


# =============================================================================
# 엔진 서비스 의존성
# =============================================================================
def get_binding_service(db: AsyncSession = Depends(get_db_session)) -> ResourceBindingService:
    """요청 세션에 묶인 자원 바인딩 엔진을 생성합니다."""
    return ResourceBindingService(db)


def get_calendar_service(db: AsyncSession = Depends(get_db_session)) -> CalendarResolutionService:
    """요청 세션에 묶인 작업 달력 판정 엔진을 생성합니다."""
    return CalendarResolutionService(db)
