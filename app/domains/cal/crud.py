# app/domains/cal/crud.py

"""
'cal' 도메인 (작업 달력)의 조회 로직을 담당하는 모듈입니다.

범위 설정/삭제는 app.domains.cal.services.CalendarResolutionService가 단일 트랜잭션으로 수행합니다.
"""

from typing import List, Optional
import datetime as dt

from sqlalchemy import or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from . import models as cal_models


class CRUDCalendarEvent:
    model = cal_models.CalendarEvent

    def _scope(self, production_line_id: Optional[int]):
        """범위 대상 조건: None이면 공통 규칙, 값이 있으면 해당 생산라인 재정의."""
        if production_line_id is None:
            return self.model.production_line_id.is_(None)
        return self.model.production_line_id == production_line_id

    async def get_for_date(
        self, db: AsyncSession, *, target_date: dt.date, production_line_id: Optional[int] = None
    ) -> Optional[cal_models.CalendarEvent]:
        statement = select(self.model).where(
            self.model.date == target_date,
            self._scope(production_line_id),
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_in_scope(
        self,
        db: AsyncSession,
        *,
        start_date: dt.date,
        end_date: dt.date,
        production_line_id: Optional[int] = None,
    ) -> List[cal_models.CalendarEvent]:
        """하나의 범위 대상(공통 또는 특정 생산라인)에 속한 이벤트만 조회합니다."""
        statement = (
            select(self.model)
            .where(
                self.model.date >= start_date,
                self.model.date <= end_date,
                self._scope(production_line_id),
            )
            .order_by(self.model.date)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_range(
        self,
        db: AsyncSession,
        *,
        start_date: dt.date,
        end_date: dt.date,
        production_line_id: Optional[int] = None,
    ) -> List[cal_models.CalendarEvent]:
        """
        기간 내 이벤트를 조회합니다.
        생산라인을 지정하면 공통 이벤트와 해당 생산라인 이벤트를 함께 반환합니다.
        """
        scope = self._scope(None)
        if production_line_id is not None:
            scope = or_(scope, self.model.production_line_id == production_line_id)
        statement = (
            select(self.model)
            .where(self.model.date >= start_date, self.model.date <= end_date, scope)
            # 같은 날짜에서는 공통 규칙(NULL)이 먼저 옵니다.
            .order_by(self.model.date, self.model.production_line_id.is_not(None), self.model.production_line_id)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_by_production_line(
        self, db: AsyncSession, *, production_line_id: int
    ) -> List[cal_models.CalendarEvent]:
        statement = select(self.model).where(self.model.production_line_id == production_line_id)
        result = await db.execute(statement)
        return list(result.scalars().all())


calendar_event = CRUDCalendarEvent()
