# tests/domains/__init__.py

"""
FastAPI 애플리케이션의 도메인별 테스트 스위트 패키지입니다.

- `test_shared_n.py`: 변경 알림 로그와 직접 상태 변경.
- `test_plant_n.py`: 공장, 생산라인, 스테이션과 일괄 바인딩.
- `test_fms_n.py`: 설비와 정비 기록.
- `test_hrm_n.py`: 작업반, 작업자와 구성원 변경.
- `test_cal_n.py`: 작업 달력 재정의와 근무일 판정.
"""

# 패키지 메타데이터 (선택 사항)
__title__ = "FRP Domain Tests"
__description__ = "Categorized tests for each business domain in FRP FastAPI application."
__version__ = "0.1.0" # 도메인 테스트 패키지의 내부 버전
__all__ = [] # 이 패키지에서 'from tests.domains import *' 시 내보낼 이름 목록.
