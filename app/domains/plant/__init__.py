# app/domains/plant/__init__.py

"""
FastAPI 애플리케이션의 'plant' 도메인 패키지입니다.

'plant' 도메인은 공장(Factory), 생산라인(ProductionLine), 공정 스테이션(Station)으로
이루어진 공장 구조 데이터를 관리합니다. 생산라인과 스테이션은 설비/작업반이
바인딩되는 슬롯 역할을 합니다.

주요 서브모듈:
- `models.py`: 공장 구조 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청 및 응답 유효성 검사를 위한 Pydantic 모델.
- `crud.py`: 공장/생산라인/스테이션 조회 및 단순 생성/수정 로직.
- `routers.py`: 공장 구조 API 엔드포인트 정의.
"""

__title__ = "FRP Plant Domain"
__description__ = "Manages factories, production lines and stations."
__version__ = "0.1.0"
__all__ = []
