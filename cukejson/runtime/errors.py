"""
errors.py - Error taxonomy for messages-to-legacy-JSON conversion.

Fatal conditions raise a FormatterError subclass and abort the conversion
before anything is written. Per-record decode problems are not errors here:
they are collected as DecodeFailure entries (see runtime.types) and logged.

    FormatterError
    ├── MissingRootDocumentError   no usable gherkinDocument in the batch
    ├── MultipleDocumentsError     more than one gherkinDocument in the batch
    ├── SchemaViolationError       batch or report rejected by a JSON schema
    ├── SchemaLoadError            schema resource unreadable or not JSON
    └── BatchFormatError           input file is neither a JSON array nor NDJSON

I/O failures (unreadable input, unwritable output) propagate as OSError.
"""

from __future__ import annotations

from typing import List, Optional


class FormatterError(Exception):
    """Base class for fatal conversion errors."""


class MissingRootDocumentError(FormatterError):
    """Raised when the batch has no gherkinDocument, or it is structurally incomplete."""


class MultipleDocumentsError(FormatterError):
    """Raised when the batch carries more than one gherkinDocument."""

    def __init__(self, count: int, uris: Optional[List[str]] = None) -> None:
        self.count = count
        self.uris = uris or []
        detail = f" ({', '.join(self.uris)})" if self.uris else ""
        super().__init__(
            f"Expected exactly one gherkinDocument, found {count}{detail}; "
            "split the batch per feature before formatting"
        )


class SchemaViolationError(FormatterError):
    """Raised when JSON schema validation fails."""

    def __init__(self, errors: List[str], subject: str = "report") -> None:
        self.errors = errors
        self.subject = subject
        super().__init__(f"JSON schema validation failed for {subject}: {'; '.join(errors)}")


class SchemaLoadError(FormatterError):
    """Raised when a schema document cannot be read or parsed."""


class BatchFormatError(FormatterError):
    """Raised when the input file cannot be read as a batch of envelopes."""
