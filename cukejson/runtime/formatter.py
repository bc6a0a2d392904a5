"""
formatter.py - Convert a Cucumber Messages batch into a legacy Cucumber JSON report.

This is the single entry point for conversions. Each call builds its own
EnvelopeStore and ChainResolver; nothing is shared between calls.

Pipeline:
    1. Index the batch by envelope kind (undecodable records are skipped)
    2. Require exactly one gherkinDocument
    3. Assemble feature -> elements -> steps, resolving results and matches
    4. Validate the input batch against the messages schema (fatal on failure)
    5. Optionally validate the assembled report against the report schema
    6. (convert_file only) serialize and write the report

Any fatal error raises before step 6, so no output is written.

Usage:
    from cukejson.runtime.formatter import convert_batch, convert_file

    result = convert_batch(envelopes)
    report = result.to_list()

    convert_file("messages.ndjson", "cucumber.json")
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from cukejson.config.runtime_config import (
    get_input_schema,
    get_output_indent,
    get_output_schema,
    is_output_check_enabled,
)
from cukejson.runtime.assembler import DocumentAssembler
from cukejson.runtime.envelope_store import EnvelopeStore
from cukejson.runtime.errors import MissingRootDocumentError, MultipleDocumentsError
from cukejson.runtime.report_io import (
    read_batch,
    read_batch_async,
    serialize_report,
    write_output,
)
from cukejson.runtime.resolvers import ChainResolver
from cukejson.runtime.schema_validator import load_schema, validate_batch, validate_report
from cukejson.runtime.types import ConversionResult, EnvelopeKind, report_to_list

logger = logging.getLogger(__name__)

SchemaRef = Union[str, Path, Dict[str, Any]]


def _schema(ref: Optional[SchemaRef], default_ref: str) -> Dict[str, Any]:
    if isinstance(ref, dict):
        return ref
    return load_schema(ref if ref is not None else default_ref)


def _root_document(store: EnvelopeStore) -> Any:
    documents = store.by_kind(EnvelopeKind.GHERKIN_DOCUMENT)
    if not documents:
        raise MissingRootDocumentError("Batch contains no gherkinDocument envelope")
    if len(documents) > 1:
        uris = [
            str(d.payload.get("uri")) for d in documents
            if isinstance(d.payload, dict) and d.payload.get("uri")
        ]
        raise MultipleDocumentsError(len(documents), uris)

    decoded = store.decoded(EnvelopeKind.GHERKIN_DOCUMENT)
    if not decoded:
        failure = next(
            (f for f in store.decode_failures if f.kind == EnvelopeKind.GHERKIN_DOCUMENT.value),
            None,
        )
        detail = f": {failure.message}" if failure else ""
        raise MissingRootDocumentError(f"gherkinDocument is structurally incomplete{detail}")
    return decoded[0]


def convert_batch(
    records: Iterable[Any],
    *,
    input_schema: Optional[SchemaRef] = None,
    output_schema: Optional[SchemaRef] = None,
    check_output: Optional[bool] = None,
    log: Optional[logging.Logger] = None,
) -> ConversionResult:
    """Convert an in-memory batch of envelopes.

    Args:
        records: Envelopes as dicts or JSON strings, in batch order.
        input_schema: Schema dict, bundled name or path for the input batch.
            Defaults to the configured input schema.
        output_schema: Schema for the assembled report (used when checking output).
        check_output: Validate the assembled report too. Defaults to config.
        log: Logger receiving all diagnostics. Defaults to this module's logger.

    Returns:
        ConversionResult with the report and any skipped records.

    Raises:
        MissingRootDocumentError: No usable gherkinDocument.
        MultipleDocumentsError: More than one gherkinDocument.
        SchemaViolationError: Batch (or report) rejected by its schema.
        SchemaLoadError: A schema could not be loaded.
    """
    log = log or logger
    store = EnvelopeStore.from_records(records, log=log)
    document = _root_document(store)

    resolver = ChainResolver(store, log=log)
    report = DocumentAssembler(resolver, log=log).assemble(document)

    validate_batch(store.envelopes(), schema=_schema(input_schema, get_input_schema()), log=log)

    if check_output is None:
        check_output = is_output_check_enabled()
    if check_output:
        validate_report(
            report_to_list(report),
            schema=_schema(output_schema, get_output_schema()),
            log=log,
        )

    if store.decode_failures:
        log.warning("Skipped %d undecodable records", len(store.decode_failures))

    return ConversionResult(report=report, decode_failures=list(store.decode_failures))


def _serialize(result: ConversionResult, indent: Optional[int], log: logging.Logger) -> str:
    serialized = serialize_report(result.to_list(), indent=indent)
    log.debug("Parsed Cucumber JSON report: %s", serialized)
    return serialized


def convert_file(
    source: Union[str, Path],
    output: Union[str, Path],
    *,
    input_schema: Optional[SchemaRef] = None,
    output_schema: Optional[SchemaRef] = None,
    check_output: Optional[bool] = None,
    indent: Optional[int] = None,
    log: Optional[logging.Logger] = None,
) -> ConversionResult:
    """Convert a messages file and write the legacy report.

    Nothing is written if reading, conversion or validation fails.

    Raises:
        OSError: Input unreadable or output unwritable.
        BatchFormatError: Input file is not a batch of envelopes.
        FormatterError: Any fatal conversion error (see convert_batch).
    """
    log = log or logger
    log.info("Start formatting file '%s' into '%s'", source, output)

    batch = read_batch(source)
    schema = _schema(input_schema, get_input_schema())
    result = convert_batch(
        batch,
        input_schema=schema,
        output_schema=output_schema,
        check_output=check_output,
        log=log,
    )

    serialized = _serialize(result, indent if indent is not None else get_output_indent(), log)
    write_output(output, serialized)
    log.info("Wrote Cucumber JSON report to '%s'", output)
    return result


async def convert_file_async(
    source: Union[str, Path],
    output: Union[str, Path],
    *,
    input_schema: Optional[SchemaRef] = None,
    output_schema: Optional[SchemaRef] = None,
    check_output: Optional[bool] = None,
    indent: Optional[int] = None,
    log: Optional[logging.Logger] = None,
) -> ConversionResult:
    """Async variant of convert_file.

    The input batch and the input schema are loaded concurrently; the
    conversion itself is synchronous.
    """
    log = log or logger
    log.info("Start formatting file '%s' into '%s'", source, output)

    if isinstance(input_schema, dict):
        batch = await read_batch_async(source)
        schema = input_schema
    else:
        batch, schema = await asyncio.gather(
            read_batch_async(source),
            asyncio.to_thread(
                load_schema, input_schema if input_schema is not None else get_input_schema()
            ),
        )

    result = convert_batch(
        batch,
        input_schema=schema,
        output_schema=output_schema,
        check_output=check_output,
        log=log,
    )

    serialized = _serialize(result, indent if indent is not None else get_output_indent(), log)
    await asyncio.to_thread(write_output, output, serialized)
    log.info("Wrote Cucumber JSON report to '%s'", output)
    return result


def format_report(records: List[Any], **kwargs: Any) -> List[Dict[str, Any]]:
    """Convert a batch and return the report as plain JSON data."""
    return convert_batch(records, **kwargs).to_list()
