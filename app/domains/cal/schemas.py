# app/domains/cal/schemas.py

"""
'cal' 도메인 (작업 달력)의 Pydantic 스키마를 정의하는 모듈입니다.
"""

from typing import Optional, List
import datetime as dt

from sqlmodel import SQLModel
from pydantic import Field

from .models import CalendarEventType, CalendarSource


# =============================================================================
# 1. 달력 이벤트
# =============================================================================
class CalendarEventResponse(SQLModel):
    id: int
    date: dt.date
    type: CalendarEventType
    note: Optional[str] = None
    production_line_id: Optional[int] = None

    class Config:
        from_attributes = True


class CalendarRangeSet(SQLModel):
    """
    시작일~종료일(포함) 범위의 재정의를 일괄 설정합니다.
    같은 범위/범위 대상(공통 또는 생산라인)의 기존 이벤트는 삭제 후 다시 생성되며,
    type=DEFAULT는 삭제만 수행하여 기본 규칙(월~금 근무)으로 되돌립니다.
    """
    start_date: dt.date = Field(..., description="시작일")
    end_date: dt.date = Field(..., description="종료일 (포함)")
    type: CalendarEventType = Field(..., description="WORK, HOLIDAY, REST, DEFAULT")
    note: Optional[str] = Field(None, max_length=255, description="비고")
    production_line_id: Optional[int] = Field(None, description="생산라인 ID (없으면 전체 공통)")


class CalendarRangeSetResult(SQLModel):
    start_date: dt.date
    end_date: dt.date
    type: CalendarEventType
    production_line_id: Optional[int] = None
    deleted_count: int
    created_count: int


class CalendarRangeResponse(SQLModel):
    start_date: dt.date
    end_date: dt.date
    production_line_id: Optional[int] = None
    total: int
    events: List[CalendarEventResponse] = []


# =============================================================================
# 2. 근무일 판정
# =============================================================================
class WorkDayCheckResponse(SQLModel):
    date: dt.date
    is_work_day: bool = Field(..., description="근무일 여부")
    schedule_status: int = Field(..., description="0: 일정 배정 가능(근무), 1: 불가(휴무)")
    event_type: str = Field(..., description="적용된 이벤트 유형 (없으면 DEFAULT)")
    source: CalendarSource = Field(..., description="판정 근거 (production_line, global, default)")
    reason: str = Field(..., description="판정 사유")
    day_of_week: int = Field(..., description="ISO 요일 (1: 월요일 ... 7: 일요일)")
    production_line_id: Optional[int] = None
    production_line_name: Optional[str] = None
