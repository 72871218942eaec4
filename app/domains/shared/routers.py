# app/domains/shared/routers.py

"""
'shared' 도메인의 API 엔드포인트를 정의하는 모듈입니다.

- 대시보드 위젯이 사용하는 변경 알림 로그 조회
- 자원 종류와 무관한 직접 상태 변경 (확인 필요 흐름 포함)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.core import dependencies as deps
from app.core.change_log import ChangeLog
from app.core.results import resolve_result
from app.services.binding_service import ResourceBindingService

from . import schemas as shared_schemas
from .models import ResourceKind


router = APIRouter(
    tags=["Shared (시스템 공용정보 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 변경 알림 로그 엔드포인트
# =============================================================================
@router.get("/notifications", response_model=List[shared_schemas.ChangeLogEntryResponse], summary="최근 변경 알림 조회")
async def read_notifications(
    limit: Optional[int] = Query(None, ge=1, description="반환할 최대 항목 수"),
    change_log: ChangeLog = Depends(deps.get_change_log),
):
    """
    커밋된 변경 작업의 요약을 최신순으로 조회합니다.
    로그는 프로세스 메모리에만 보관되며 재시작 시 비워집니다.
    """
    return change_log.entries(limit=limit)


# =============================================================================
# 2. 직접 상태 변경 엔드포인트
# =============================================================================
@router.patch("/resources/{resource_kind}/{resource_id}/status", summary="자원 상태 직접 변경")
async def change_resource_status(
    resource_kind: ResourceKind,
    resource_id: int,
    status_change: shared_schemas.StatusChangeRequest,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """
    - `2`(점유)는 직접 지정할 수 없으며 바인딩(bind)으로만 진입합니다. (공장/생산라인 제외)
    - 바인딩된 자원을 `0`(가용)으로 바꾸면 428 confirm_required 응답이 반환됩니다.
    - 공장과 생산라인은 세 상태를 모두 직접 지정할 수 있습니다.
    """
    return resolve_result(
        await service.set_status(resource_kind, resource_id, status_change.status, status_change.force_unbind)
    )
