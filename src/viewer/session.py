# ========================
# src/viewer/session.py
# ========================

"""
Viewer Session

Owns one viewer state, runs the startup load and forwards the rendering
layer's search and sort callbacks to the reducer.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from .notifications import NotificationCenter
from .state import FilterChanged, LoadFailed, LoadSucceeded, SortRequested, ViewerState, reduce
from ..pipeline import IngestError, LexiconPipeline, LoadError
from ..query import FilterSet
from ..utils.config import Config

logger = logging.getLogger(__name__)

class ViewerSession:
    """
    Stateful shell around the pure reducer. The canonical table is shared
    between forked sessions; filters and sort are per session.
    """

    def __init__(self, config: Optional[Config] = None,
                 notifier: Optional[NotificationCenter] = None,
                 state: Optional[ViewerState] = None):
        """
        Args:
            config (Config): Configuration object
            notifier (NotificationCenter): Where load failures are reported
            state (ViewerState): Initial state; defaults to "loading"
        """
        self.config = config or Config()
        self.notifier = notifier or NotificationCenter(self.config.NOTIFICATION_HISTORY)
        self._state = state or ViewerState()
        self.load_stats: Dict[str, Any] = {}

    @property
    def state(self) -> ViewerState:
        return self._state

    def dispatch(self, event: object) -> ViewerState:
        self._state = reduce(self._state, event)
        return self._state

    def load(self) -> ViewerState:
        """
        Run the one-time load. Failures become a visible "no data" state and
        a user notification; they are never raised.

        Returns:
            ViewerState: State after the load attempt
        """
        try:
            result = LexiconPipeline(config=self.config).run()
        except IngestError as e:
            logger.error(f"Lexicon load failed ({e.kind}): {e}")
            self.notifier.notify(e.title, e.message, 'error')
            return self.dispatch(LoadFailed(e.kind, e.message))
        except Exception as e:
            logger.error(f"Unexpected error while loading lexicon: {e}", exc_info=True)
            self.notifier.notify(LoadError.title, str(e), 'error')
            return self.dispatch(LoadFailed(LoadError.kind, str(e)))

        self.load_stats = result.stats
        return self.dispatch(LoadSucceeded(result.table))

    async def load_async(self) -> ViewerState:
        """Run `load` in the default executor so the event loop stays free."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.load)

    def search(self, filters: FilterSet) -> ViewerState:
        """`onSearch` callback: replace the filter set."""
        return self.dispatch(FilterChanged(dict(filters)))

    def sort(self, column: int) -> ViewerState:
        """`onSort` callback: apply the sort toggle to one column."""
        return self.dispatch(SortRequested(column))

    def fork(self) -> 'ViewerSession':
        """
        A new session over the same load outcome with no filters or sort.
        """
        if self._state.table is not None:
            state = reduce(ViewerState(), LoadSucceeded(self._state.table))
        else:
            state = self._state
        forked = ViewerSession(self.config, self.notifier, state)
        forked.load_stats = self.load_stats
        return forked
