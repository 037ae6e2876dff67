# ========================
# src/viewer/state.py
# ========================

"""
Viewer State

An immutable snapshot of what the viewer shows and a pure reducer that
derives the next snapshot from an event.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Collection, Dict, Mapping, Optional

from ..pipeline.models import Table
from ..query import FilterSet, SortDirective, ViewTable, is_sortable, next_sort_directive, render
from ..utils.config import SORTABLE_HEADERS

_NO_FILTERS: Mapping[int, str] = MappingProxyType({})

@dataclass(frozen=True)
class LoadSucceeded:
    table: Table

@dataclass(frozen=True)
class LoadFailed:
    kind: str
    message: str = ''

@dataclass(frozen=True)
class FilterChanged:
    filters: FilterSet

@dataclass(frozen=True)
class SortRequested:
    column: int

@dataclass(frozen=True)
class ViewerState:
    """Everything the rendering layer needs. Never mutated; replaced by `reduce`."""
    table: Optional[Table] = None
    filters: Mapping[int, str] = field(default_factory=lambda: _NO_FILTERS)
    sort: Optional[SortDirective] = None
    view: Optional[ViewTable] = None
    loading: bool = True
    error: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def loaded(self) -> bool:
        return self.table is not None

    def to_dict(self, sortable_headers: Collection[str] = SORTABLE_HEADERS) -> Dict[str, Any]:
        """JSON-ready snapshot for the rendering layer."""
        snapshot: Dict[str, Any] = {
            'loading': self.loading,
            'loaded': self.loaded,
            'error': {'kind': self.error, 'message': self.error_message} if self.error else None,
            'filters': {str(column): term for column, term in self.filters.items()},
        }
        if self.view is not None:
            snapshot.update(self.view.to_dict(self.sort))
            snapshot['sortable_columns'] = [
                i for i in range(len(self.view.headers))
                if is_sortable(self.view.headers, i, sortable_headers)
            ]
        else:
            snapshot.update({'headers': [], 'rows': [], 'row_count': 0, 'total_rows': 0,
                             'sort': None, 'sortable_columns': []})
        return snapshot

def reduce(state: ViewerState, event: object,
           sortable_headers: Collection[str] = SORTABLE_HEADERS) -> ViewerState:
    """
    Compute the next viewer state.

    Filter and sort events before a table is loaded are ignored. The view is
    always rebuilt from the canonical table so the active sort survives every
    filter change.

    Args:
        state (ViewerState): Current snapshot
        event: One of LoadSucceeded, LoadFailed, FilterChanged, SortRequested

    Returns:
        ViewerState: Next snapshot (the same object when nothing changes)
    """
    if isinstance(event, LoadSucceeded):
        return ViewerState(
            table=event.table,
            view=render(event.table, None, None, sortable_headers),
            loading=False,
        )

    if isinstance(event, LoadFailed):
        return ViewerState(loading=False, error=event.kind, error_message=event.message)

    if isinstance(event, FilterChanged):
        if state.table is None:
            return state
        filters = MappingProxyType({int(k): v for k, v in (event.filters or {}).items()})
        return replace(
            state,
            filters=filters,
            view=render(state.table, filters, state.sort, sortable_headers),
        )

    if isinstance(event, SortRequested):
        if state.table is None:
            return state
        directive = next_sort_directive(state.table.headers, state.sort, event.column, sortable_headers)
        if directive is state.sort:
            return state
        return replace(
            state,
            sort=directive,
            view=render(state.table, state.filters, directive, sortable_headers),
        )

    raise TypeError(f"Unknown viewer event: {event!r}")
