# ========================
# src/pipeline/errors.py
# ========================

"""
Ingestion Errors

Failures that end a load attempt. None of them is fatal to the process.
"""

class IngestError(Exception):
    """Base class for load failures surfaced to the user."""

    kind = "ingest_error"
    title = "Load failed"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class LoadError(IngestError):
    """The CSV resource could not be fetched or read."""

    kind = "load_error"
    title = "Load failed"

class ParseError(IngestError):
    """The tokenizer reported at least one diagnostic."""

    kind = "parse_error"
    title = "CSV parse error"

    def __init__(self, message: str, row: int = 0):
        super().__init__(message)
        self.row = row

class EmptyInputError(IngestError):
    """The tokenizer succeeded but produced no rows at all."""

    kind = "empty_input"
    title = "File is empty"
