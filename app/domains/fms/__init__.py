# app/domains/fms/__init__.py

"""
FastAPI 애플리케이션의 'fms' 도메인 패키지입니다.

'fms' 도메인은 설비(Device)와 설비 정비 기록(MaintenanceRecord)을 관리합니다.
설비는 스테이션 또는 생산라인에 바인딩되며, '사용 불가' 상태 동안 정비 기록이 열려 있습니다.

주요 서브모듈:
- `models.py`: 설비/정비 기록 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청 및 응답 유효성 검사를 위한 Pydantic 모델.
- `crud.py`: 설비/정비 기록 조회 로직.
- `routers.py`: 설비 API 엔드포인트 정의.
"""

__title__ = "FRP FMS Domain"
__description__ = "Manages devices and their maintenance (downtime) records."
__version__ = "0.1.0"
__all__ = []
