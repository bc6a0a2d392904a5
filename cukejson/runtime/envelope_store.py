"""
envelope_store.py - Index a batch of Cucumber Messages envelopes by kind.

An envelope is a JSON object with exactly one key naming its kind
(gherkinDocument, pickle, testCase, ...). The batch may mix already-parsed
objects with JSON-encoded strings; both are accepted.

The store keeps each kind's records in batch order so that later lookups can
apply last-match-wins tie-breaking. Records are decoded into their pydantic
models on demand; a record that fails to decode is logged, recorded as a
DecodeFailure and treated as absent. Nothing here raises for a bad record.

Usage:
    from cukejson.runtime.envelope_store import EnvelopeStore
    from cukejson.runtime.types import EnvelopeKind

    store = EnvelopeStore.from_records(batch)
    pickles = store.decoded(EnvelopeKind.PICKLE)
    if store.decode_failures:
        ...
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Type, Union

from pydantic import BaseModel, ValidationError

from cukejson.messages.models import (
    GherkinDocument,
    Pickle,
    StepDefinition,
    TestCase,
    TestStepFinished,
)
from cukejson.runtime.types import UNKNOWN_KIND, DecodeFailure, EnvelopeKind

logger = logging.getLogger(__name__)

KindLike = Union[EnvelopeKind, str]

MODEL_BY_KIND: Dict[EnvelopeKind, Type[BaseModel]] = {
    EnvelopeKind.GHERKIN_DOCUMENT: GherkinDocument,
    EnvelopeKind.PICKLE: Pickle,
    EnvelopeKind.TEST_CASE: TestCase,
    EnvelopeKind.TEST_STEP_FINISHED: TestStepFinished,
    EnvelopeKind.STEP_DEFINITION: StepDefinition,
}


@dataclass(frozen=True)
class RawEnvelope:
    """One classified record of the batch.

    Attributes:
        index: Position in the input batch.
        kind: The envelope's single top-level key.
        payload: The undecoded value under that key.
        raw: The record exactly as it appeared in the batch (str or dict).
    """

    index: int
    kind: str
    payload: Any
    raw: Any

    @property
    def envelope(self) -> Dict[str, Any]:
        return {self.kind: self.payload}


def _kind_value(kind: KindLike) -> str:
    return kind.value if isinstance(kind, EnvelopeKind) else str(kind)


class EnvelopeStore:
    """Per-kind, order-preserving index over one batch of envelopes."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger
        self._by_kind: Dict[str, List[RawEnvelope]] = {}
        self._order: List[RawEnvelope] = []
        self._decoded: Dict[str, List[Any]] = {}
        self.decode_failures: List[DecodeFailure] = []

    @classmethod
    def from_records(
        cls,
        records: Iterable[Any],
        log: Optional[logging.Logger] = None,
    ) -> "EnvelopeStore":
        store = cls(log=log)
        for index, record in enumerate(records):
            store.add(index, record)
        return store

    def add(self, index: int, record: Any) -> Optional[RawEnvelope]:
        """Classify one record and append it to its kind's sequence.

        Returns the stored RawEnvelope, or None if the record could not be
        classified (not JSON, or not a single-key object).
        """
        data = record
        if isinstance(record, (str, bytes, bytearray)):
            try:
                data = json.loads(record)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                self._fail(UNKNOWN_KIND, index, f"Invalid JSON: {e}")
                return None

        if not isinstance(data, dict) or len(data) != 1:
            self._fail(
                UNKNOWN_KIND,
                index,
                "Envelope must be a JSON object with exactly one key",
            )
            return None

        kind, payload = next(iter(data.items()))
        entry = RawEnvelope(index=index, kind=kind, payload=payload, raw=record)
        self._by_kind.setdefault(kind, []).append(entry)
        self._order.append(entry)
        return entry

    def by_kind(self, kind: KindLike) -> List[RawEnvelope]:
        """Raw records of one kind, in batch order."""
        return list(self._by_kind.get(_kind_value(kind), []))

    def count(self, kind: KindLike) -> int:
        return len(self._by_kind.get(_kind_value(kind), []))

    def kinds(self) -> List[str]:
        return sorted(self._by_kind)

    def envelopes(self) -> List[Dict[str, Any]]:
        """Every classified record as a parsed envelope, in batch order."""
        return [entry.envelope for entry in self._order]

    def decoded(self, kind: EnvelopeKind) -> List[Any]:
        """Decode every record of a core kind into its model, in batch order.

        Records that fail model validation are logged once, recorded in
        decode_failures and left out of the returned list.
        """
        key = _kind_value(kind)
        if key in self._decoded:
            return list(self._decoded[key])

        model = MODEL_BY_KIND[EnvelopeKind(key)]
        results: List[Any] = []
        for entry in self._by_kind.get(key, []):
            try:
                results.append(model.model_validate(entry.payload))
            except ValidationError as e:
                self._fail(key, entry.index, _summarize_validation_error(e))

        self._decoded[key] = results
        return list(results)

    def _fail(self, kind: str, index: int, message: str) -> None:
        self._log.warning("Skipping undecodable %s record at index %d: %s", kind, index, message)
        self.decode_failures.append(DecodeFailure(kind=kind, index=index, message=message))


def _summarize_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item.get("loc", ()))
        parts.append(f"{loc or '<root>'}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)
