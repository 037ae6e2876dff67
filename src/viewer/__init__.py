# ========================
# src/viewer/__init__.py
# ========================

"""
Viewer Shell Package

State, events and the session that connects the query engine to the UI.
"""

from .state import (
    FilterChanged,
    LoadFailed,
    LoadSucceeded,
    SortRequested,
    ViewerState,
    reduce,
)
from .notifications import Notification, NotificationCenter
from .session import ViewerSession

__all__ = [
    'FilterChanged',
    'LoadFailed',
    'LoadSucceeded',
    'SortRequested',
    'ViewerState',
    'reduce',
    'Notification',
    'NotificationCenter',
    'ViewerSession'
]
