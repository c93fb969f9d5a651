"""
Notification sink and toast surface used by the auto-reorder engine.
NotificationCenter keeps the in-app list (newest first); LogToaster turns
toasts into log records since the service has no UI of its own.
"""
import itertools
import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    INFO = 'info'
    SUCCESS = 'success'
    WARNING = 'warning'
    ERROR = 'error'


class NotificationCenter:
    def __init__(self, max_entries: int = 500):
        self.max_entries = max_entries
        self._entries: List[Dict[str, Any]] = []
        self._counter = itertools.count(1)

    def add(self, message: str, kind: NotificationKind = NotificationKind.INFO) -> Dict[str, Any]:
        entry = {
            'id': f'notif-{int(time.time() * 1000)}-{next(self._counter)}',
            'message': message,
            'type': NotificationKind(kind).value,
            'is_read': False,
            'timestamp': datetime.now(timezone.utc).isoformat(),
        }
        self._entries.insert(0, entry)
        del self._entries[self.max_entries:]
        return entry

    def entries(self) -> List[Dict[str, Any]]:
        return [dict(entry) for entry in self._entries]

    @property
    def unread_count(self) -> int:
        return sum(1 for entry in self._entries if not entry['is_read'])

    def mark_read(self, notification_id: str) -> Optional[Dict[str, Any]]:
        for entry in self._entries:
            if entry['id'] == notification_id:
                entry['is_read'] = True
                return dict(entry)
        return None

    def mark_all_read(self) -> None:
        for entry in self._entries:
            entry['is_read'] = True

    def clear(self) -> None:
        self._entries.clear()


_TOAST_LEVELS = {
    NotificationKind.INFO: logging.INFO,
    NotificationKind.SUCCESS: logging.INFO,
    NotificationKind.WARNING: logging.WARNING,
    NotificationKind.ERROR: logging.ERROR,
}


class LogToaster:
    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def __call__(self, message: str, kind: NotificationKind = NotificationKind.INFO) -> None:
        self.log.log(_TOAST_LEVELS[NotificationKind(kind)], '[toast:%s] %s', NotificationKind(kind).value, message)
