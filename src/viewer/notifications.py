# ========================
# src/viewer/notifications.py
# ========================

"""
Notification Surface

Fire-and-forget user notifications. Each one is logged and kept in a bounded
history that the dashboard polls and shows as toasts.
"""

import itertools
import logging
import threading
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

SEVERITY_LEVELS = {
    'info': logging.INFO,
    'success': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}

@dataclass(frozen=True)
class Notification:
    id: int
    title: str
    message: str
    severity: str = 'info'
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

class NotificationCenter:
    """Thread-safe notification history; loads may notify from a worker thread."""

    def __init__(self, history: int = 50):
        self._items = deque(maxlen=history)
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def notify(self, title: str, message: str, severity: str = 'info') -> None:
        if severity not in SEVERITY_LEVELS:
            logger.debug(f"Unknown severity {severity!r}, using 'info'")
            severity = 'info'
        with self._lock:
            self._items.append(Notification(next(self._ids), title, message, severity))
        logger.log(SEVERITY_LEVELS[severity], f"{title}: {message}")

    def recent(self, since_id: int = 0) -> List[Notification]:
        """Notifications newer than `since_id`, oldest first."""
        with self._lock:
            return [item for item in self._items if item.id > since_id]
