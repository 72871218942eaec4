# app/domains/models/__init__.py

"""
이 파일은 모든 도메인의 SQLModel 모델들을 한 곳에서 중앙 관리하여,
다른 모듈에서 쉽게 임포트할 수 있도록 하는 역할을 합니다.
SQLModel.metadata가 모든 테이블을 인식하도록 보장합니다.
"""

# shared (ResourceStatus, ResourceKind)
from app.domains.shared.models import ResourceStatus, ResourceKind

# plant (Factory, ProductionLine, Station)
from app.domains.plant.models import Factory, ProductionLine, Station

# fms (Device, MaintenanceRecord)
from app.domains.fms.models import Device, DeviceType, MaintenanceRecord, MaintenanceStatus, MaintenanceType

# hrm (Team, Staff)
from app.domains.hrm.models import Team, Staff, ShiftType

# cal (CalendarEvent)
from app.domains.cal.models import CalendarEvent, CalendarEventType, CalendarSource


#  `from app.domains.models import *` 구문으로 임포트될 모델 목록 정의
__all__ = [
    # shared
    "ResourceStatus", "ResourceKind",
    # plant
    "Factory", "ProductionLine", "Station",
    # fms
    "Device", "DeviceType", "MaintenanceRecord", "MaintenanceStatus", "MaintenanceType",
    # hrm
    "Team", "Staff", "ShiftType",
    # cal
    "CalendarEvent", "CalendarEventType", "CalendarSource",
]
