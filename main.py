#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the Proto-Seediq Lexicon Viewer

Loads the lexicon once, applies optional `Header=term` searches given on the
command line and prints the matching rows.

Usage: python main.py [Header=term ...] [--sort Header]
"""

import sys
import logging
from typing import Dict, List, Optional, Tuple

from src.pipeline import LexiconPipeline
from src.utils import Config, setup_logging
from src.viewer import ViewerSession, ViewerState

def parse_arguments(argv: List[str]) -> Tuple[Dict[str, str], Optional[str]]:
    """Split arguments into header searches and an optional sort header."""
    searches = {}
    sort_header = None
    args = iter(argv)
    for arg in args:
        if arg == '--sort':
            sort_header = next(args, None)
        elif '=' in arg:
            header, term = arg.split('=', 1)
            searches[header] = term
        else:
            raise ValueError(f"Expected Header=term or --sort Header, got {arg!r}")
    return searches, sort_header

def main(argv: Optional[List[str]] = None):
    """Main execution function."""
    config = Config()
    setup_logging(
        log_level=config.LOG_LEVEL,
        log_file="viewer.log",
        log_dir=config.LOG_DIR
    )

    logger = logging.getLogger(__name__)
    logger.debug(str(config))

    invalid = [name for name, ok in config.validate_config().items() if not ok]
    if invalid:
        logger.error(f"Invalid configuration: {', '.join(invalid)}")
        return 1

    try:
        searches, sort_header = parse_arguments(sys.argv[1:] if argv is None else argv)
    except ValueError as e:
        logger.error(str(e))
        print(__doc__)
        return 2

    try:
        # Validate input before loading
        if not LexiconPipeline(config=config).validate_input():
            logger.error("Input validation failed. Exiting.")
            return 1

        session = ViewerSession(config)
        state = session.load()
        if not state.loaded:
            logger.error(f"No data available: {state.error_message}")
            return 1

        headers = state.table.headers
        unknown = [h for h in list(searches) + ([sort_header] if sort_header else []) if h not in headers]
        if unknown:
            logger.error(f"Unknown column(s): {', '.join(unknown)}. Available: {', '.join(headers)}")
            return 2

        if searches:
            state = session.search({headers.index(h): term for h, term in searches.items()})
        if sort_header:
            state = session.sort(headers.index(sort_header))

        _print_view(state)
        return 0

    except Exception as e:
        logger.error(f"Viewer execution failed: {e}", exc_info=True)
        return 1

def _print_view(state: ViewerState) -> None:
    """Print the current view as a plain text table."""
    view = state.view
    widths = [len(h) for h in view.headers]
    for row in view.rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

    def line(cells):
        return " | ".join(cell.ljust(width) for cell, width in zip(cells, widths))

    print("\n" + "=" * 70)
    print("PROTO-SEEDIQ DATABASE")
    print("=" * 70)
    summary = f"{len(view.rows):,} rows"
    if view.is_filtered:
        summary += f" (filtered from {view.total_rows:,})"
    if state.sort:
        summary += f", sorted by {view.headers[state.sort.column]} ({state.sort.direction})"
    print(summary)
    print(line(view.headers))
    print("-+-".join("-" * width for width in widths))
    for row in view.rows:
        print(line(row))
    if not view.rows:
        print("No rows match the search.")
    print("=" * 70)

if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
