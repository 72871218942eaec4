# app/domains/cal/models.py

"""
'cal' 도메인 (작업 달력)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- calendar_events: 날짜별 근무일 재정의. production_line_id가 NULL이면 전체 공통 규칙,
  값이 있으면 해당 생산라인 전용 재정의입니다. (날짜, 생산라인) 조합당 최대 1건.
"""

from typing import Optional
import datetime as dt
from datetime import datetime, UTC
from enum import Enum

from sqlalchemy import Index, UniqueConstraint, text
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel, Column


class CalendarEventType(str, Enum):
    """
    달력 이벤트 유형입니다.
    DEFAULT는 저장되지 않으며, 범위 설정 시 기존 재정의를 지워 기본 규칙으로 되돌리는 데 쓰입니다.
    """
    WORK = "WORK"
    HOLIDAY = "HOLIDAY"
    REST = "REST"
    DEFAULT = "DEFAULT"


class CalendarSource(str, Enum):
    """근무일 판정 근거"""
    PRODUCTION_LINE = "production_line"
    GLOBAL = "global"
    DEFAULT = "default"


# =============================================================================
# 1. calendar_events 테이블 모델
# =============================================================================
class CalendarEventBase(SQLModel):
    date: dt.date = Field(index=True, description="대상 날짜")
    type: str = Field(max_length=20, description="이벤트 유형 (WORK/HOLIDAY/REST)")
    note: Optional[str] = Field(default=None, max_length=255, description="비고 (판정 사유로 사용)")
    production_line_id: Optional[int] = Field(
        default=None, foreign_key="production_lines.id", index=True,
        description="생산라인 ID (NULL이면 전체 공통)"
    )


class CalendarEvent(CalendarEventBase, table=True):
    __tablename__ = "calendar_events"
    __table_args__ = (
        UniqueConstraint("date", "production_line_id", name="uq_calendar_events_date_line"),
        # NULL은 UNIQUE 비교에서 서로 다르게 취급되므로 공통 규칙은 부분 인덱스로 보장합니다.
        Index(
            "uq_calendar_events_global_date",
            "date",
            unique=True,
            sqlite_where=text("production_line_id IS NULL"),
            postgresql_where=text("production_line_id IS NULL"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
