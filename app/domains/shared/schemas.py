# app/domains/shared/schemas.py

"""
'shared' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.

여러 도메인의 라우터가 함께 사용하는 요청/응답 모델을 포함합니다.
"""

from typing import List

from pydantic import BaseModel, Field

from .models import ResourceStatus


# =============================================================================
# 1. 일괄 바인딩 요청
# =============================================================================
class BindRequest(BaseModel):
    """
    하나의 슬롯(스테이션/생산라인/작업반)에 여러 자원을 바인딩하는 요청입니다.
    모두 성공하거나 모두 실패합니다.
    """
    resource_ids: List[int] = Field(..., min_length=1, description="바인딩할 자원 ID 목록")


# =============================================================================
# 2. 변경 알림 로그 항목
# =============================================================================
class ChangeLogEntryResponse(BaseModel):
    id: int = Field(..., description="항목 일련번호")
    time: str = Field(..., description="기록 시각 (HH:MM:SS)")
    recorded_at: str = Field(..., description="기록 일시 (ISO 8601)")
    action: str = Field(..., description="작업 종류 (create, update, delete, *_many)")
    resource_kind: str = Field(..., description="자원 종류 (모델 이름)")
    details: str = Field(..., description="대상 이름/제목/코드 또는 'ID: x'")


# =============================================================================
# 3. 직접 상태 변경 요청
# =============================================================================
class StatusChangeRequest(BaseModel):
    """
    자원의 상태를 직접 변경합니다.
    바인딩된 자원을 가용(0)으로 바꾸려면 force_unbind=true가 필요합니다.
    """
    status: ResourceStatus = Field(..., description="변경할 상태 (0: 가용, 1: 불가, 2: 점유)")
    force_unbind: bool = Field(False, description="바인딩 해제 확인 여부")
