# app/main.py

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from arq import cron
from arq.connections import RedisSettings
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# 핵심 설정 및 데이터베이스 모듈 임포트
from app.core.config import settings
from app.core.database import engine, create_db_and_tables
from app.core.change_log import ChangeLog, install_change_log_listeners
from app.core import dependencies as deps
from app.core.results import ErrorKind

from app import API_PREFIX

# 태스크 모듈 임포트
from app.core import tasks as core_tasks

# 도메인 라우터 임포트
from app.domains.shared.routers import router as shared_router
from app.domains.plant.routers import router as plant_router
from app.domains.fms.routers import router as fms_router
from app.domains.hrm.routers import router as hrm_router
from app.domains.cal.routers import router as cal_router


logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG_MODE else settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# 커밋된 변경을 변경 알림 로그로 전달하는 세션 이벤트 리스너 (프로세스당 한 번)
install_change_log_listeners()

# ARQ 워커가 실행할 태스크 함수 목록
worker_functions = [
    core_tasks.health_check_database_task,
    core_tasks.audit_resource_consistency_task,
]


# ARQ 워커 설정 클래스 (실행: arq app.main.ArqWorkerSettings)
class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = worker_functions
    cron_jobs = [
        # 매일 자정 데이터베이스 헬스 체크
        cron(core_tasks.health_check_database_task, hour=0, minute=0, timeout=300, keep_result=600),
        # 매일 새벽 1시 자원 일관성 점검
        cron(core_tasks.audit_resource_consistency_task, hour=1, minute=0, timeout=1800, keep_result=3600),
    ]


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 수명 주기 이벤트(데이터베이스)를 처리합니다.
    """
    logger.info("FastAPI 애플리케이션 시작 중... (환경: %s)", settings.APP_ENV)
    if settings.DB_AUTO_CREATE:
        await create_db_and_tables()

    yield  # 애플리케이션 실행

    logger.info("FastAPI 애플리케이션 종료 중...")
    await engine.dispose()
    logger.info("데이터베이스 연결 풀 종료 완료.")


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",       # Swagger UI (Interactive API documentation)
    redoc_url="/redoc",     # ReDoc (Alternative API documentation)
    lifespan=lifespan
)

# 변경 알림 로그는 앱 인스턴스가 소유합니다. (재시작 시 비워짐)
app.state.change_log = ChangeLog(capacity=settings.CHANGE_LOG_CAPACITY)


# -- CORS (Cross-Origin Resource Sharing) 미들웨어 설정 --
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -- 요청 유효성 검사 오류 --
# 엔진 오류와 같은 {"code", "message"} 형식으로 응답합니다.
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": {
                "code": ErrorKind.VALIDATION_ERROR.value,
                "message": "Request validation failed",
                "errors": jsonable_encoder(exc.errors()),
            }
        },
    )


# -- 도메인 라우터 포함 --
app.include_router(shared_router, prefix=f"{API_PREFIX}/shared", tags=["Shared (시스템 공용정보 관리)"])
app.include_router(plant_router, prefix=f"{API_PREFIX}/plant", tags=["Plant Structure (공장 구조 관리)"])
app.include_router(fms_router, prefix=f"{API_PREFIX}/fms", tags=["Facility Management (설비 관리)"])
app.include_router(hrm_router, prefix=f"{API_PREFIX}/hrm", tags=["Human Resources (작업반/작업자 관리)"])
app.include_router(cal_router, prefix=f"{API_PREFIX}/cal", tags=["Work Calendar (작업 달력 관리)"])


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    """
    FRP API의 루트 엔드포인트입니다.
    API의 시작점을 알리고 문서 링크를 제공합니다.
    """
    return {"message": "Welcome to FRP API. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(deps.get_db_session)):
    """
    애플리케이션의 헬스 체크 엔드포인트입니다.
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        result = await session.exec(select(1))
        if result.first():
            return {"status": "ok", "database_connection": "successful"}
    except Exception as e:
        logger.exception("헬스 체크 중 데이터베이스 오류")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        )
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Database health check failed: No result from test query"
    )


# -- Uvicorn 서버 직접 실행 (개발용) --
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG_MODE, log_level="info")
