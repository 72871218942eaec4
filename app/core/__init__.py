# app/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

주요 서브모듈은 다음과 같습니다:

- `config.py`: 애플리케이션의 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 데이터베이스 연결, 세션 관리 (SQLModel 및 AsyncSQLAlchemy).
- `crud_base.py`: 도메인 CRUD 클래스가 상속하는 공통 CRUD 기반 클래스.
- `results.py`: 엔진 연산 결과 타입 (Ok / ConfirmRequired / Err)과 HTTP 변환.
- `change_log.py`: 커밋된 변경을 기록하는 변경 알림 링 버퍼.
- `dependencies.py`: FastAPI의 의존성 주입 시스템에서 사용될 공통 의존성 함수들.
- `tasks.py`: ARQ 워커가 실행하는 백그라운드 태스크.
"""

# 패키지 메타데이터 (선택 사항)
__title__ = "FRP Core"
__description__ = "Core components for FRP FastAPI application."
__version__ = "0.1.0"  # core 패키지의 버전
__all__ = []  # 'from app.core import *' 시 내보낼 이름 목록. 일반적으로 비워둡니다.
