# cukejson package
# Converts Cucumber Messages batches into the legacy Cucumber JSON report format.
#
# Usage:
#     from cukejson import convert_file
#     convert_file("messages.ndjson", "cucumber.json")

from .runtime.errors import (
    BatchFormatError,
    FormatterError,
    MissingRootDocumentError,
    MultipleDocumentsError,
    SchemaLoadError,
    SchemaViolationError,
)
from .runtime.formatter import (
    convert_batch,
    convert_file,
    convert_file_async,
    format_report,
)
from .runtime.types import ConversionResult, DecodeFailure

__version__ = "1.0.0"

__all__ = [
    # Conversion
    "convert_batch",
    "convert_file",
    "convert_file_async",
    "format_report",
    "ConversionResult",
    "DecodeFailure",
    # Errors
    "FormatterError",
    "MissingRootDocumentError",
    "MultipleDocumentsError",
    "SchemaViolationError",
    "SchemaLoadError",
    "BatchFormatError",
]
