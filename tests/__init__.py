# tests/__init__.py

"""
FastAPI 애플리케이션의 테스트 스위트 패키지입니다.

주요 하위 디렉토리:
- `domains/`: 각 비즈니스 도메인(shared, plant, fms, hrm, cal)의 API 통합 테스트.
- `services/`: 자원 바인딩 엔진과 정비 기록 서브 엔진을 직접 호출하는 테스트.
- `core/`: 결과 타입, 변경 알림 로그, 백그라운드 태스크 단위 테스트.
- `conftest.py`: 데이터베이스 세션, 테스트 클라이언트, 자원 픽스처를 정의합니다.
"""

# 패키지 메타데이터 (선택 사항)
__title__ = "FRP API Tests"
__description__ = "Test suite for FRP FastAPI application."
__version__ = "0.1.0" # 테스트 스위트의 내부 버전
__all__ = [] # 이 패키지에서 'from tests import *' 시 내보낼 이름 목록.
