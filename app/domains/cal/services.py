# app/domains/cal/services.py

"""
작업 달력 판정 엔진(Calendar Resolution Engine) 모듈입니다.

- resolve_work_day: 날짜(+생산라인)의 근무일 여부를 재정의 우선순위로 판정합니다.
  생산라인 재정의 > 전체 공통 재정의 > 기본 규칙(월~금 근무, 토/일 휴무)
- set_range: 기간 내 해당 범위 대상의 이벤트를 모두 삭제한 뒤 날짜별로 다시 생성합니다.
  (DEFAULT는 삭제만 수행) 하나의 트랜잭션으로 처리됩니다.
- get_range: 공통 이벤트와 (지정 시) 생산라인 이벤트를 함께 조회합니다.
- delete_event: 단일 날짜/범위 대상의 이벤트를 삭제합니다.
"""

from datetime import timedelta
from typing import Optional
import datetime as dt
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.results import Err, ErrorKind, Ok, Result, not_found
from app.domains.plant import crud as plant_crud
from app.domains.plant import models as plant_models
from . import crud as cal_crud
from . import models as cal_models
from . import schemas as cal_schemas

logger = logging.getLogger(__name__)

SCHEDULE_STATUS_WORK = 0
SCHEDULE_STATUS_REST = 1


def default_is_work_day(target_date: dt.date) -> bool:
    """기본 규칙: 월~금 근무."""
    return target_date.isoweekday() <= 5


class CalendarResolutionService:
    """작업 달력 판정 엔진. 요청마다 세션을 주입받아 생성합니다."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_production_line(self, production_line_id: Optional[int]) -> Optional[plant_models.ProductionLine]:
        if production_line_id is None:
            return None
        return await plant_crud.production_line.get(self.db, production_line_id)

    def _validate_range(self, start_date: dt.date, end_date: dt.date) -> Optional[Err]:
        if start_date > end_date:
            return Err(ErrorKind.VALIDATION_ERROR, "start_date must be on or before end_date")
        days = (end_date - start_date).days + 1
        if days > settings.CALENDAR_MAX_RANGE_DAYS:
            return Err(
                ErrorKind.VALIDATION_ERROR,
                f"Date range too long: {days} days (max {settings.CALENDAR_MAX_RANGE_DAYS})",
            )
        return None

    # =========================================================================
    # 근무일 판정
    # =========================================================================
    async def resolve_work_day(
        self, target_date: dt.date, production_line_id: Optional[int] = None
    ) -> Result[cal_schemas.WorkDayCheckResponse]:
        line = await self._get_production_line(production_line_id)
        if production_line_id is not None and line is None:
            return not_found("ProductionLine", production_line_id)

        event = None
        source = cal_models.CalendarSource.DEFAULT
        if line is not None:
            event = await cal_crud.calendar_event.get_for_date(
                self.db, target_date=target_date, production_line_id=line.id
            )
            if event is not None:
                source = cal_models.CalendarSource.PRODUCTION_LINE
        if event is None:
            event = await cal_crud.calendar_event.get_for_date(self.db, target_date=target_date)
            if event is not None:
                source = cal_models.CalendarSource.GLOBAL

        if event is not None:
            is_work_day = event.type == cal_models.CalendarEventType.WORK.value
            event_type = event.type
            reason = event.note or f"Configured as {event.type}"
        else:
            is_work_day = default_is_work_day(target_date)
            event_type = cal_models.CalendarEventType.DEFAULT.value
            reason = "Default weekday" if is_work_day else "Default weekend"

        return Ok(cal_schemas.WorkDayCheckResponse(
            date=target_date,
            is_work_day=is_work_day,
            schedule_status=SCHEDULE_STATUS_WORK if is_work_day else SCHEDULE_STATUS_REST,
            event_type=event_type,
            source=source,
            reason=reason,
            day_of_week=target_date.isoweekday(),
            production_line_id=line.id if line else None,
            production_line_name=line.name if line else None,
        ))

    # =========================================================================
    # 범위 설정 / 조회 / 삭제
    # =========================================================================
    async def set_range(self, range_in: cal_schemas.CalendarRangeSet) -> Result[cal_schemas.CalendarRangeSetResult]:
        """
        범위 대상의 기존 이벤트를 삭제한 뒤 날짜마다 한 건씩 새로 생성합니다.
        부분 범위를 다시 설정하면 기존 설정과 병합되지 않고 대체됩니다.
        """
        invalid = self._validate_range(range_in.start_date, range_in.end_date)
        if invalid is not None:
            return invalid
        if range_in.production_line_id is not None and await self._get_production_line(range_in.production_line_id) is None:
            return not_found("ProductionLine", range_in.production_line_id)

        existing = await cal_crud.calendar_event.get_in_scope(
            self.db,
            start_date=range_in.start_date,
            end_date=range_in.end_date,
            production_line_id=range_in.production_line_id,
        )
        created_count = 0
        try:
            for event in existing:
                await self.db.delete(event)
            # 같은 (날짜, 범위 대상)에 대한 삭제가 삽입보다 먼저 반영되어야 합니다.
            await self.db.flush()

            if range_in.type != cal_models.CalendarEventType.DEFAULT:
                current = range_in.start_date
                while current <= range_in.end_date:
                    self.db.add(cal_models.CalendarEvent(
                        date=current,
                        type=range_in.type.value,
                        note=range_in.note,
                        production_line_id=range_in.production_line_id,
                    ))
                    created_count += 1
                    current += timedelta(days=1)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning("Calendar range conflict (%s ~ %s)", range_in.start_date, range_in.end_date)
            return Err(ErrorKind.CONFLICT, "Calendar event already exists for the given date and scope")
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to set calendar range")
            return Err(ErrorKind.INTERNAL, "Failed to set calendar range")

        logger.info(
            "Calendar range set: %s ~ %s type=%s line=%s (deleted=%d, created=%d)",
            range_in.start_date, range_in.end_date, range_in.type.value,
            range_in.production_line_id, len(existing), created_count,
        )
        return Ok(cal_schemas.CalendarRangeSetResult(
            start_date=range_in.start_date,
            end_date=range_in.end_date,
            type=range_in.type,
            production_line_id=range_in.production_line_id,
            deleted_count=len(existing),
            created_count=created_count,
        ))

    async def get_range(
        self, start_date: dt.date, end_date: dt.date, production_line_id: Optional[int] = None
    ) -> Result[cal_schemas.CalendarRangeResponse]:
        invalid = self._validate_range(start_date, end_date)
        if invalid is not None:
            return invalid
        if production_line_id is not None and await self._get_production_line(production_line_id) is None:
            return not_found("ProductionLine", production_line_id)

        events = await cal_crud.calendar_event.get_range(
            self.db, start_date=start_date, end_date=end_date, production_line_id=production_line_id
        )
        return Ok(cal_schemas.CalendarRangeResponse(
            start_date=start_date,
            end_date=end_date,
            production_line_id=production_line_id,
            total=len(events),
            events=[cal_schemas.CalendarEventResponse.model_validate(event) for event in events],
        ))

    async def delete_event(self, target_date: dt.date, production_line_id: Optional[int] = None) -> Result[None]:
        if production_line_id is not None and await self._get_production_line(production_line_id) is None:
            return not_found("ProductionLine", production_line_id)

        event = await cal_crud.calendar_event.get_for_date(
            self.db, target_date=target_date, production_line_id=production_line_id
        )
        if event is None:
            return Err(ErrorKind.NOT_FOUND, f"No calendar event on {target_date.isoformat()}")

        await self.db.delete(event)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to delete calendar event")
            return Err(ErrorKind.INTERNAL, "Failed to delete calendar event")
        logger.info("Calendar event deleted: %s line=%s", target_date, production_line_id)
        return Ok(None)
