# app/core/results.py

"""
자원 바인딩 엔진의 연산 결과를 표현하는 타입 모듈입니다.

엔진의 모든 쓰기 연산은 예외 대신 아래 세 가지 중 하나를 반환합니다.
- Ok: 성공. 저장된 자원(또는 자원 목록)을 담습니다.
- ConfirmRequired: 실패가 아닌 '확인 필요' 분기점. 바인딩된 슬롯 이름을 담아
  호출자가 사용자에게 다시 묻고 force_unbind=true로 재요청하도록 합니다.
- Err: 오류 종류(ErrorKind)와 메시지, 일괄 작업의 항목별 실패 목록을 담습니다.

HTTP 경계(라우터)에서는 resolve_result()로 응답 또는 HTTPException으로 변환합니다.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, TypeVar, Union

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL"


CONFIRM_REQUIRED_CODE = "CONFIRM_REQUIRED"

ERROR_STATUS_CODES: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class ConfirmRequired:
    slot_kind: str
    slot_name: str
    message: str


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str
    failures: List[Dict[str, Any]] = field(default_factory=list)


Result = Union[Ok[T], ConfirmRequired, Err]


def not_found(resource_kind: str, resource_id: Any) -> Err:
    return Err(ErrorKind.NOT_FOUND, f"{resource_kind} {resource_id} not found")


def error_detail(err: Err) -> Dict[str, Any]:
    detail: Dict[str, Any] = {"code": err.kind.value, "message": err.message}
    if err.failures:
        detail["failures"] = err.failures
    return detail


def confirm_required_body(confirm: ConfirmRequired) -> Dict[str, Any]:
    return {
        "status": "confirm_required",
        "code": CONFIRM_REQUIRED_CODE,
        "slot_kind": confirm.slot_kind,
        "slot_name": confirm.slot_name,
        "message": confirm.message,
    }


def resolve_result(result: "Result[Any]") -> Any:
    """
    엔진 결과를 HTTP 응답으로 변환합니다.
    - Ok: 값을 그대로 반환 (라우터의 response_model로 직렬화)
    - ConfirmRequired: 428 JSONResponse
    - Err: HTTPException 발생
    """
    if isinstance(result, Ok):
        return result.value
    if isinstance(result, ConfirmRequired):
        return JSONResponse(
            status_code=status.HTTP_428_PRECONDITION_REQUIRED,
            content=confirm_required_body(result),
        )
    raise HTTPException(status_code=ERROR_STATUS_CODES[result.kind], detail=error_detail(result))


def http_error(kind: ErrorKind, message: str) -> HTTPException:
    """일반 CRUD 경로에서 엔진과 같은 형식의 오류 응답을 만들 때 사용합니다."""
    return HTTPException(status_code=ERROR_STATUS_CODES[kind], detail=error_detail(Err(kind, message)))
