# ========================
# src/query/__init__.py
# ========================

"""
Query Engine Package

Filtering and sorting of the canonical table into the displayed view.
"""

from .models import ASCENDING, DESCENDING, FilterSet, SortDirective, ViewTable
from .collation import collation_key
from .engine import (
    active_filters,
    apply_filters,
    apply_sort,
    is_sortable,
    next_sort_directive,
    render,
)

__all__ = [
    'ASCENDING',
    'DESCENDING',
    'FilterSet',
    'SortDirective',
    'ViewTable',
    'collation_key',
    'active_filters',
    'apply_filters',
    'apply_sort',
    'is_sortable',
    'next_sort_directive',
    'render'
]
