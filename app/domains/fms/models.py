# app/domains/fms/models.py

"""
'fms' 도메인 (설비 관리)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- devices: 설비. 스테이션 또는 생산라인 중 한 곳에 바인딩될 수 있습니다.
- maintenance_records: 설비의 정지(정비) 이력. '사용 불가' 전환과 맞물려 자동으로 열리고 닫힙니다.
"""

from typing import Optional
from datetime import datetime, date, UTC
from enum import Enum, IntEnum

from sqlalchemy import Index, text
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel, Column

from app.domains.shared.models import ResourceStatus


class DeviceType(IntEnum):
    """설비 유형 코드 (0-5)"""
    PRODUCTION = 0      # 생산 설비
    INSPECTION = 1      # 검사 설비
    TRANSPORT = 2       # 운반 설비
    TOOLING = 3         # 치공구
    UTILITY = 4         # 유틸리티
    OTHER = 5           # 기타


class MaintenanceType(str, Enum):
    AUTO = "AUTO"       # 상태 전환에 의해 자동 생성
    MANUAL = "MANUAL"


class MaintenanceStatus(str, Enum):
    IN_PROGRESS = "in progress"
    COMPLETED = "completed"


# =============================================================================
# 1. devices 테이블 모델
# =============================================================================
class DeviceBase(SQLModel):
    code: str = Field(max_length=50, unique=True, description="설비 코드")
    name: str = Field(max_length=100, description="설비 이름")
    type: int = Field(default=DeviceType.PRODUCTION.value, description="설비 유형 (0-5)")
    model: Optional[str] = Field(default=None, max_length=100, description="모델명")
    serial_number: Optional[str] = Field(default=None, max_length=100, description="일련번호")
    purchase_date: Optional[date] = Field(default=None, description="구매일")
    status: int = Field(default=ResourceStatus.AVAILABLE.value, description="상태 (0: 가용, 1: 불가, 2: 점유)")
    # 바인딩: 스테이션 또는 생산라인 (동시에 둘 다 가질 수 없음)
    station_id: Optional[int] = Field(default=None, foreign_key="stations.id", index=True)
    production_line_id: Optional[int] = Field(default=None, foreign_key="production_lines.id", index=True)


class Device(DeviceBase, table=True):
    __tablename__ = "devices"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )


# =============================================================================
# 2. maintenance_records 테이블 모델
# =============================================================================
class MaintenanceRecordBase(SQLModel):
    device_id: int = Field(foreign_key="devices.id", index=True, description="설비 ID")
    type: str = Field(default=MaintenanceType.AUTO.value, max_length=20, description="기록 유형 (AUTO/MANUAL)")
    title: str = Field(max_length=200, description="제목")
    content: Optional[str] = Field(default=None, description="내용 (복구 시 완료 문구가 덧붙여짐)")
    status: str = Field(default=MaintenanceStatus.IN_PROGRESS.value, max_length=20, description="진행 상태")


class MaintenanceRecord(MaintenanceRecordBase, table=True):
    __tablename__ = "maintenance_records"
    # 설비당 진행 중인 기록은 최대 1건
    __table_args__ = (
        Index(
            "uq_maintenance_records_open_per_device",
            "device_id",
            unique=True,
            sqlite_where=text("status = 'in progress'"),
            postgresql_where=text("status = 'in progress'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    start_time: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=True),
        description="정지 시작 시각"
    )
    end_time: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=True),
        description="복구 시각"
    )
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
