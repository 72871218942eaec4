# app/__init__.py

"""
FRP(Factory Resource Planning) FastAPI 애플리케이션의 메인 패키지입니다.

이 패키지는 공장 생산 자원(공장, 생산라인, 공정 스테이션, 설비, 작업반, 작업자)과
작업 달력을 관리하는 백엔드로 구성됩니다.
- main.py: FastAPI 애플리케이션 진입점
- core: 설정, 데이터베이스 연결, 공통 CRUD, 결과 타입, 변경 알림 로그
- domains: 비즈니스 도메인별 모델/스키마/CRUD/라우터
- services: 여러 도메인에 걸친 자원 바인딩 상태 머신과 정비 이력 서브 엔진
"""

APP_NAME = "FRP FastAPI API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Factory resource planning backend: resource binding and work calendar engine."
__license__ = "MIT"
__all__ = []
