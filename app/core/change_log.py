# app/core/change_log.py

"""
변경 알림 로그(Change Notification Log) 모듈입니다.

커밋된 모든 변경을 관찰하여 최신순 감사 항목을 고정 용량의 링 버퍼에 남깁니다.
- ChangeLog: deque(maxlen=capacity) 기반의 링 버퍼. 가장 오래된 항목부터 밀려납니다.
- SQLAlchemy 세션 이벤트(after_flush / after_commit / after_rollback)로 변경을 수집하고,
  커밋이 성공한 경우에만 로그에 기록합니다. 롤백되면 수집분을 버립니다.
- 로그 인스턴스는 FastAPI 앱 수명 주기(app.state.change_log)가 소유하며,
  요청 세션에는 bind_change_log()로 연결됩니다. 연결되지 않은 세션은 관찰하지 않습니다.

로그 기록 실패는 변경 작업을 절대 중단시키지 않습니다. 경고 로그만 남깁니다.
"""

from collections import deque
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional, Tuple
import itertools
import logging
import threading

from sqlalchemy import event
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

CHANGE_LOG_INFO_KEY = "change_log"
PENDING_CHANGES_INFO_KEY = "pending_changes"

DETAIL_ATTRIBUTES = ("name", "title", "code")


class ChangeLog:
    """고정 용량, 최신순 조회의 변경 알림 링 버퍼."""

    def __init__(self, capacity: int = 50):
        if capacity < 1:
            raise ValueError("ChangeLog capacity must be at least 1")
        self.capacity = capacity
        self._entries: Deque[Dict[str, Any]] = deque(maxlen=capacity)
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def record(self, action: str, resource_kind: str, details: str) -> Dict[str, Any]:
        now = datetime.now()
        entry = {
            "id": next(self._ids),
            "time": now.strftime("%H:%M:%S"),
            "recorded_at": now.isoformat(timespec="seconds"),
            "action": action,
            "resource_kind": resource_kind,
            "details": details,
        }
        with self._lock:
            self._entries.append(entry)
        return entry

    def entries(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """최신 항목이 먼저 오도록 반환합니다."""
        with self._lock:
            items = list(reversed(self._entries))
        if limit is not None:
            return items[:limit]
        return items

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def describe(obj: Any) -> str:
    """알림 상세 문구: name, title, code 순으로 값이 있는 첫 속성, 없으면 'ID: x'."""
    for attribute in DETAIL_ATTRIBUTES:
        value = getattr(obj, attribute, None)
        if value:
            return str(value)
    return f"ID: {getattr(obj, 'id', None)}"


def bind_change_log(session: Any, change_log: ChangeLog) -> None:
    """세션(동기/비동기)에 변경 알림 로그를 연결합니다."""
    target = getattr(session, "sync_session", session)
    target.info[CHANGE_LOG_INFO_KEY] = change_log


# =============================================================================
# 세션 이벤트 리스너
# =============================================================================
def _collect_flushed_changes(session: Session, flush_context: Any) -> None:
    if session.info.get(CHANGE_LOG_INFO_KEY) is None:
        return
    try:
        # after_flush 시점에도 new/dirty/deleted는 플러시 이전 상태를 유지합니다.
        groups: Dict[Tuple[str, str], List[str]] = {}
        changed = (
            ("create", list(session.new)),
            ("update", [obj for obj in session.dirty if session.is_modified(obj)]),
            ("delete", list(session.deleted)),
        )
        for action, objects in changed:
            for obj in objects:
                groups.setdefault((action, type(obj).__name__), []).append(describe(obj))

        pending = session.info.setdefault(PENDING_CHANGES_INFO_KEY, [])
        for (action, resource_kind), details in groups.items():
            if len(details) == 1:
                pending.append((action, resource_kind, details[0]))
            else:
                pending.append((f"{action}_many", resource_kind, f"{len(details)} records"))
    except Exception:
        logger.warning("Failed to collect flushed changes for the change log", exc_info=True)


def _publish_committed_changes(session: Session) -> None:
    pending = session.info.pop(PENDING_CHANGES_INFO_KEY, None)
    change_log = session.info.get(CHANGE_LOG_INFO_KEY)
    if not pending or change_log is None:
        return
    for action, resource_kind, details in pending:
        try:
            change_log.record(action, resource_kind, details)
        except Exception:
            logger.warning("Failed to record change log entry (%s %s)", action, resource_kind, exc_info=True)


def _discard_pending_changes(session: Session) -> None:
    session.info.pop(PENDING_CHANGES_INFO_KEY, None)


_LISTENERS = (
    ("after_flush", _collect_flushed_changes),
    ("after_commit", _publish_committed_changes),
    ("after_rollback", _discard_pending_changes),
)


def install_change_log_listeners() -> None:
    """모든 Session에 변경 수집 리스너를 한 번만 등록합니다."""
    for identifier, listener in _LISTENERS:
        if not event.contains(Session, identifier, listener):
            event.listen(Session, identifier, listener)
