"""
Debounce guard for auto-reorder attempts.
Remembers when each item was last reordered so repeated evaluation ticks
inside the cooldown window do not place duplicate purchase orders.
"""
from datetime import datetime, timezone
from typing import Dict, MutableMapping, Optional

REORDER_DEBOUNCE_SECONDS = 24 * 60 * 60


class DebounceGuard:
    def __init__(
        self,
        attempts: Optional[MutableMapping[str, float]] = None,
        cooldown_seconds: float = REORDER_DEBOUNCE_SECONDS,
    ):
        # item id -> epoch seconds of the last attempt
        self._attempts = attempts if attempts is not None else {}
        self.cooldown_seconds = cooldown_seconds

    def should_skip(self, item_id: str, now: float) -> bool:
        last = self._attempts.get(item_id)
        if last is None:
            return False
        return now - last < self.cooldown_seconds

    def record_attempt(self, item_id: str, now: float) -> None:
        self._attempts[item_id] = now

    def last_attempt(self, item_id: str) -> Optional[float]:
        return self._attempts.get(item_id)

    def snapshot(self) -> Dict[str, str]:
        return {
            item_id: datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()
            for item_id, ts in self._attempts.items()
        }

    def clear(self) -> None:
        self._attempts.clear()

    def __len__(self) -> int:
        return len(self._attempts)
