# app/domains/hrm/__init__.py

"""
FastAPI 애플리케이션의 'hrm' 도메인 패키지입니다.

'hrm' 도메인은 작업반(Team)과 작업자(Staff)를 관리합니다.
작업반은 스테이션 또는 생산라인에, 작업자는 작업반에 바인딩됩니다.

주요 서브모듈:
- `models.py`: 작업반/작업자 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청 및 응답 유효성 검사를 위한 Pydantic 모델.
- `crud.py`: 작업반/작업자 조회 로직.
- `routers.py`: 작업반/작업자 API 엔드포인트 정의.
"""

__title__ = "FRP HRM Domain"
__description__ = "Manages teams and staff members."
__version__ = "0.1.0"
__all__ = []
