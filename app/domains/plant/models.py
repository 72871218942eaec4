# app/domains/plant/models.py

"""
'plant' 도메인 (공장 구조)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- factories: 공장
- production_lines: 공장에 속한 생산라인 (설비/작업반/스테이션이 바인딩되는 슬롯)
- stations: 공정 스테이션. 생산라인에 바인딩되며, 설비/작업반이 바인딩되는 슬롯
"""

from typing import Optional
from datetime import datetime, UTC

from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel, Column

from app.domains.shared.models import ResourceStatus


# =============================================================================
# 1. factories 테이블 모델
# =============================================================================
class FactoryBase(SQLModel):
    code: Optional[str] = Field(default=None, max_length=50, unique=True, description="공장 코드")
    name: str = Field(max_length=100, description="공장 이름")
    location: Optional[str] = Field(default=None, max_length=255, description="소재지")
    description: Optional[str] = Field(default=None, description="설명")
    # 공장 상태는 바인딩과 무관하게 직접 지정합니다. (OCCUPIED = 가동 중)
    status: int = Field(default=ResourceStatus.AVAILABLE.value, description="상태 (0: 가용, 1: 불가, 2: 가동 중)")


class Factory(FactoryBase, table=True):
    __tablename__ = "factories"

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
# 2. production_lines 테이블 모델
# =============================================================================
class ProductionLineBase(SQLModel):
    factory_id: int = Field(foreign_key="factories.id", index=True, description="소속 공장 ID")
    code: str = Field(max_length=50, unique=True, description="생산라인 코드")
    name: str = Field(max_length=100, description="생산라인 이름")
    type: Optional[str] = Field(default=None, max_length=50, description="생산라인 유형")
    capacity: int = Field(default=100, ge=0, description="생산 능력")
    # 생산라인은 슬롯 소유자이므로 상태를 직접 지정합니다.
    status: int = Field(default=ResourceStatus.AVAILABLE.value, description="상태 (0: 가용, 1: 불가, 2: 점유)")


class ProductionLine(ProductionLineBase, table=True):
    __tablename__ = "production_lines"

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
# 3. stations 테이블 모델
# =============================================================================
class StationBase(SQLModel):
    code: str = Field(max_length=50, unique=True, description="스테이션 코드")
    name: str = Field(max_length=100, description="스테이션 이름")
    type: Optional[str] = Field(default=None, max_length=50, description="스테이션 유형")
    description: Optional[str] = Field(default=None, description="설명")
    status: int = Field(default=ResourceStatus.AVAILABLE.value, description="상태 (0: 가용, 1: 불가, 2: 점유)")
    # 바인딩: 생산라인 (생성 시에는 선택)
    production_line_id: Optional[int] = Field(default=None, foreign_key="production_lines.id", index=True)


class Station(StationBase, table=True):
    __tablename__ = "stations"

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
