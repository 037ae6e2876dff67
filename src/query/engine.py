# ========================
# src/query/engine.py
# ========================

"""
Query Engine

Derives the displayed view from the canonical table, a filter set and an
optional sort directive. Every function here is pure and never raises on
cell content.
"""

import logging
from typing import Collection, Dict, Optional, Sequence

from .collation import collation_key
from .models import ASCENDING, DESCENDING, FilterSet, SortDirective, ViewTable
from ..pipeline.models import Row, Table
from ..utils.config import SORTABLE_HEADERS

logger = logging.getLogger(__name__)

def _cell(row: Row, column: int) -> str:
    if 0 <= column < len(row):
        return row[column] or ''
    return ''

def active_filters(filters: Optional[FilterSet]) -> Dict[int, str]:
    """Drop blank terms; what remains is AND-composed."""
    if not filters:
        return {}
    return {int(column): term for column, term in filters.items() if term and term.strip()}

def apply_filters(table: Table, filters: Optional[FilterSet]) -> ViewTable:
    """
    Keep the canonical rows whose cells contain every non-blank term,
    ignoring case.

    Args:
        table (Table): Canonical table, never a previous view
        filters (dict): Column index -> raw search term

    Returns:
        ViewTable: Matching rows in canonical order; possibly empty
    """
    constraints = [(column, term.casefold()) for column, term in active_filters(filters).items()]
    if not constraints:
        rows = table.rows
    else:
        rows = tuple(
            row for row in table.rows
            if all(term in _cell(row, column).casefold() for column, term in constraints)
        )
    logger.debug(f"Filters {constraints} matched {len(rows)}/{len(table.rows)} rows")
    return ViewTable(headers=table.headers, rows=tuple(rows), total_rows=len(table.rows))

def is_sortable(headers: Sequence[str], column: int,
                sortable_headers: Collection[str] = SORTABLE_HEADERS) -> bool:
    return 0 <= column < len(headers) and headers[column] in sortable_headers

def apply_sort(view: ViewTable, directive: Optional[SortDirective],
               sortable_headers: Collection[str] = SORTABLE_HEADERS) -> ViewTable:
    """
    Order a view by one column. Directives naming an ineligible column leave
    the view untouched. Descending is the exact reverse of ascending and both
    keep ties in their input order.
    """
    if directive is None or not is_sortable(view.headers, directive.column, sortable_headers):
        return view

    column = directive.column
    rows = sorted(view.rows, key=lambda row: collation_key(_cell(row, column)),
                  reverse=directive.descending)
    return ViewTable(headers=view.headers, rows=tuple(rows), total_rows=view.total_rows)

def render(table: Table, filters: Optional[FilterSet], directive: Optional[SortDirective],
           sortable_headers: Collection[str] = SORTABLE_HEADERS) -> ViewTable:
    """Filter the canonical table, then apply the active sort."""
    return apply_sort(apply_filters(table, filters), directive, sortable_headers)

def next_sort_directive(headers: Sequence[str], current: Optional[SortDirective], column: int,
                        sortable_headers: Collection[str] = SORTABLE_HEADERS) -> Optional[SortDirective]:
    """
    Sort toggle: the active ascending column flips to descending, anything
    else eligible becomes ascending. Ineligible columns keep `current`.
    """
    if not is_sortable(headers, column, sortable_headers):
        logger.debug(f"Ignoring sort request on column {column}")
        return current

    if current is not None and current.column == column and current.direction == ASCENDING:
        return SortDirective(column, DESCENDING)
    return SortDirective(column, ASCENDING)
