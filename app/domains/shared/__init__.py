# app/domains/shared/__init__.py

"""
FastAPI 애플리케이션의 'shared' 도메인 패키지입니다.

'shared' 도메인은 여러 도메인이 공통으로 사용하는 정의와 엔드포인트를 담습니다.

주요 서브모듈:
- `models.py`: 자원 상태(ResourceStatus)와 자원 종류(ResourceKind) Enum.
- `schemas.py`: 일괄 바인딩 요청, 변경 알림 항목 등 공용 Pydantic 모델.
- `routers.py`: 변경 알림 로그 조회 엔드포인트.
"""

__title__ = "FRP Shared Domain"
__description__ = "Shared resource status definitions and the change notification feed."
__version__ = "0.1.0"
__all__ = []
