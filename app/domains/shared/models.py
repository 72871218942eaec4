# app/domains/shared/models.py

"""
여러 도메인이 공통으로 사용하는 자원 상태/종류 정의 모듈입니다.

이 모듈은 테이블을 정의하지 않습니다. 각 도메인의 테이블은 status 컬럼을 정수로 저장하고,
코드에서는 아래 Enum으로 의미를 명확히 합니다.
"""

from enum import IntEnum, Enum


# =============================================================================
# 1. 자원 상태 (3상태)
# =============================================================================
class ResourceStatus(IntEnum):
    """
    자원의 3상태 코드입니다. DB에는 정수 값으로 저장됩니다.
    - AVAILABLE: 바인딩 없음, 사용 가능
    - UNAVAILABLE: 수동으로 운용 중지 (정비, 고장 등). 바인딩 여부와 무관
    - OCCUPIED: 상위 슬롯(스테이션/생산라인/작업반)에 바인딩되어 점유 중
    """
    AVAILABLE = 0
    UNAVAILABLE = 1
    OCCUPIED = 2


# =============================================================================
# 2. 자원 종류
# =============================================================================
class ResourceKind(str, Enum):
    DEVICE = "Device"
    STATION = "Station"
    TEAM = "Team"
    STAFF = "Staff"
    PRODUCTION_LINE = "ProductionLine"
    FACTORY = "Factory"
