# app/services/__init__.py

"""
FastAPI 애플리케이션의 서비스 계층 패키지입니다.

CRUD 조회는 각 도메인의 `crud.py`가 담당하고, `services` 계층은 여러 도메인의 행을
하나의 트랜잭션으로 함께 변경하는 엔진 작업을 담당합니다.

- `binding_service.py`: 자원 바인딩 상태 기계 (설비/스테이션/작업반/작업자의 바인딩과 3상태 일관성).
- `maintenance_service.py`: 설비 '사용 불가' 전환에 맞춘 정비 기록 열기/닫기.
"""

# 패키지 메타데이터 (선택 사항)
__title__ = "FRP Services"
__description__ = "Resource binding and maintenance lifecycle engine for the FRP FastAPI application."
__version__ = "0.1.0"
__all__ = []
