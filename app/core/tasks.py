# app/core/tasks.py

"""
ARQ 워커가 실행하는 백그라운드 태스크 모듈입니다.

- health_check_database_task: 데이터베이스 연결 확인
- audit_resource_consistency_task: 바인딩/상태 대응과 정비 기록 유일성 점검 (읽기 전용)
"""

from datetime import datetime
import logging

from sqlmodel import select

from app.core.database import get_async_session_context
from app.services.binding_service import ResourceBindingService

logger = logging.getLogger(__name__)


async def health_check_database_task(ctx):
    """
    ARQ 워커에 의해 실행될 주기적인 데이터베이스 헬스 체크 태스크.
    데이터베이스 연결 상태를 확인하고 로그를 남깁니다.
    """
    logger.info("[%s] ARQ 태스크: 데이터베이스 헬스 체크 실행", datetime.now())

    try:
        async with get_async_session_context() as db:
            result = await db.execute(select(1))
            if result.scalar_one_or_none() == 1:
                logger.info("데이터베이스 헬스 체크: 성공적으로 연결되었습니다.")
                return {"status": "success", "message": "Database connection successful."}
            error_msg = "Database health check failed: No result from test query."
            logger.error("데이터베이스 헬스 체크: 실패 - %s", error_msg)
            return {"status": "failed", "message": error_msg}
    except Exception as e:
        logger.exception("데이터베이스 헬스 체크: 실패")
        return {"status": "failed", "message": f"데이터베이스 연결 오류: {e}"}


async def audit_resource_consistency_task(ctx):
    """
    모든 자원의 바인딩/상태 대응과 설비별 진행 중 정비 기록 수를 점검합니다.
    데이터를 수정하지 않으며, 위반 항목을 로그로 남기고 요약을 반환합니다.
    """
    logger.info("[%s] ARQ 태스크: 자원 일관성 점검 시작", datetime.now())

    async with get_async_session_context() as db:
        findings = await ResourceBindingService(db).find_binding_inconsistencies()

    for category, items in findings.items():
        for item in items:
            logger.warning("일관성 위반 (%s): %s", category, item)

    summary = {
        "status": "clean" if not any(findings.values()) else "violations_found",
        "binding_violations": len(findings["binding"]),
        "maintenance_violations": len(findings["maintenance"]),
        "findings": findings,
    }
    logger.info(
        "자원 일관성 점검 완료: 바인딩 위반 %d건, 정비 기록 위반 %d건",
        summary["binding_violations"], summary["maintenance_violations"],
    )
    return summary
