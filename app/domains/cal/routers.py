# app/domains/cal/routers.py

"""
'cal' 도메인 (작업 달력)의 API 엔드포인트를 정의하는 모듈입니다.

- GET  /events : 기간 내 이벤트 조회 (생산라인 지정 시 공통 + 생산라인 이벤트)
- POST /events : 기간 일괄 설정 (WORK, HOLIDAY, REST, DEFAULT)
- DELETE /events : 단일 날짜 이벤트 삭제
- GET  /check  : 근무일 판정
"""

from typing import Optional
import datetime as dt

from fastapi import APIRouter, Depends, Query, Response, status

from app.core import dependencies as deps
from app.core.results import resolve_result

from . import schemas as cal_schemas
from .services import CalendarResolutionService


router = APIRouter(
    tags=["Work Calendar (작업 달력 관리)"],
    responses={404: {"description": "Not found"}},
)


@router.get("/events", response_model=cal_schemas.CalendarRangeResponse, summary="기간 내 달력 이벤트 조회")
async def read_calendar_events(
    start_date: dt.date = Query(..., description="시작일"),
    end_date: dt.date = Query(..., description="종료일 (포함)"),
    production_line_id: Optional[int] = Query(None, description="생산라인 ID (없으면 공통 이벤트만)"),
    service: CalendarResolutionService = Depends(deps.get_calendar_service),
):
    """생산라인을 지정하면 공통 이벤트와 해당 생산라인 이벤트를 날짜순으로 함께 반환합니다."""
    return resolve_result(await service.get_range(start_date, end_date, production_line_id))


@router.post("/events", response_model=cal_schemas.CalendarRangeSetResult, summary="기간 일괄 설정")
async def set_calendar_range(
    range_set: cal_schemas.CalendarRangeSet,
    service: CalendarResolutionService = Depends(deps.get_calendar_service),
):
    """
    기간 내 같은 범위 대상의 기존 이벤트를 삭제하고 날짜마다 새 이벤트를 생성합니다.
    - `type=DEFAULT`: 삭제만 수행하여 기본 규칙(월~금 근무)으로 되돌립니다.
    """
    return resolve_result(await service.set_range(range_set))


@router.delete("/events", status_code=status.HTTP_204_NO_CONTENT, summary="달력 이벤트 삭제")
async def delete_calendar_event(
    date: dt.date = Query(..., description="대상 날짜"),
    production_line_id: Optional[int] = Query(None, description="생산라인 ID (없으면 공통 이벤트)"),
    service: CalendarResolutionService = Depends(deps.get_calendar_service),
):
    resolve_result(await service.delete_event(date, production_line_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/check", response_model=cal_schemas.WorkDayCheckResponse, summary="근무일 판정")
async def check_work_day(
    date: dt.date = Query(..., description="판정할 날짜"),
    production_line_id: Optional[int] = Query(None, description="생산라인 ID"),
    service: CalendarResolutionService = Depends(deps.get_calendar_service),
):
    """
    재정의 우선순위(생산라인 > 공통 > 기본 규칙)로 근무일 여부를 판정합니다.
    - `source`: production_line, global, default
    - `schedule_status`: 0(근무, 일정 배정 가능), 1(휴무)
    """
    return resolve_result(await service.resolve_work_day(date, production_line_id))
