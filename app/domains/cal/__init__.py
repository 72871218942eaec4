# app/domains/cal/__init__.py

"""
FastAPI 애플리케이션의 'cal' 도메인 패키지입니다.

'cal' 도메인은 날짜별 근무일 재정의(CalendarEvent)와 근무일 판정 엔진을 담당합니다.

주요 서브모듈:
- `models.py`: calendar_events 테이블과 이벤트 유형 Enum.
- `schemas.py`: 범위 설정/조회, 근무일 판정 응답 모델.
- `crud.py`: 날짜/기간별 이벤트 조회.
- `services.py`: 근무일 판정 및 범위 설정 엔진 (CalendarResolutionService).
- `routers.py`: 달력 API 엔드포인트 정의.
"""

__title__ = "FRP Calendar Domain"
__description__ = "Work calendar overrides and work-day resolution."
__version__ = "0.1.0"
__all__ = []
