# ========================
# src/pipeline/__init__.py
# ========================

"""
Ingestion Pipeline Package

This package turns the lexicon CSV into the canonical in-memory table:
- ingestion: Fetching and tokenizing the CSV resource
- cleaning: Column exclusion and cell text cleanup
- orchestrator: Load coordination and the `ingest` entry point
- errors: Load failures surfaced to the user
"""

from .models import Table
from .errors import IngestError, LoadError, ParseError, EmptyInputError
from .ingestion import CSVReader, tokenize
from .cleaning import DataCleaner, clean_text
from .orchestrator import LexiconPipeline, LoadResult, ingest

__all__ = [
    'Table',
    'IngestError',
    'LoadError',
    'ParseError',
    'EmptyInputError',
    'CSVReader',
    'tokenize',
    'DataCleaner',
    'clean_text',
    'LexiconPipeline',
    'LoadResult',
    'ingest'
]

__version__ = "1.0.0"
