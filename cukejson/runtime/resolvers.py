"""
resolvers.py - Identifier chain resolution across pickle, testCase,
testStepFinished and stepDefinition envelopes.

No envelope refers to a gherkin step directly. A step's result and its
matched step definition are reached through a chain of opaque identifiers:

    gherkin step.id
      -> pickle.steps[].astNodeIds[0]           (pickle step id)
      -> testStepFinished (via testStepId)      (result)
      -> testCase.testSteps[].pickleStepId
           -> stepDefinitionIds[0]              (step definition id)
           -> stepDefinition.id                 (source reference)

Each hop is an exact comparison against the one field that carries the
identifier. Identifiers are arbitrary strings and one may be a substring of
another, so text containment is never used.

Indexes are built once per resolver, in batch order. When several records
claim the same key the LAST one in the batch wins. This reproduces the legacy
formatter and means results are not invariant under reordering of the batch.

Unresolved hops are not errors: the result degrades to an empty status,
zero duration and no message, and the match to ":0".

Usage:
    from cukejson.runtime.resolvers import ChainResolver

    resolver = ChainResolver(store)
    result = resolver.resolve_result(step.id)
    match = resolver.resolve_binding(step.id)
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from cukejson.messages.models import SourceReference, TestStepResult
from cukejson.runtime.envelope_store import EnvelopeStore
from cukejson.runtime.types import EnvelopeKind, StepMatch, StepResult

logger = logging.getLogger(__name__)


def step_result_from_message(result: Optional[TestStepResult]) -> StepResult:
    """Convert a testStepResult into the legacy result shape.

    An absent duration is reported as 0; only whole seconds are kept.
    """
    if result is None:
        return StepResult()
    duration = result.duration.seconds if result.duration is not None else 0
    return StepResult(
        status=result.status,
        duration=duration,
        error_message=result.message,
    )


def step_match_from_reference(reference: Optional[SourceReference]) -> StepMatch:
    """Format a step definition's source reference as "<uri>:<line>"."""
    if reference is None:
        return StepMatch()
    uri = reference.uri or ""
    line = reference.location.line if reference.location is not None else 0
    return StepMatch(location=f"{uri}:{line}")


class ChainResolver:
    """Resolves gherkin step ids to results and step definition locations."""

    def __init__(self, store: EnvelopeStore, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger
        self._pickle_step_by_ast_node: Dict[str, str] = {}
        self._pickle_step_by_test_step: Dict[str, str] = {}
        self._definition_by_pickle_step: Dict[str, str] = {}
        self._result_by_pickle_step: Dict[str, TestStepResult] = {}
        self._reference_by_definition: Dict[str, SourceReference] = {}
        self._build_indexes(store)

    # -------------------------------------------------------------------------
    # Index construction
    # -------------------------------------------------------------------------

    def _build_indexes(self, store: EnvelopeStore) -> None:
        for pickle in store.decoded(EnvelopeKind.PICKLE):
            for step in pickle.steps:
                if step.ast_node_ids:
                    self._pickle_step_by_ast_node[step.ast_node_ids[0]] = step.id

        for test_case in store.decoded(EnvelopeKind.TEST_CASE):
            for test_step in test_case.test_steps:
                if not test_step.pickle_step_id:
                    # Hook steps carry no pickle step.
                    continue
                if test_step.id:
                    self._pickle_step_by_test_step[test_step.id] = test_step.pickle_step_id
                definition_ids = test_step.step_definition_ids
                self._definition_by_pickle_step[test_step.pickle_step_id] = (
                    definition_ids[0] if definition_ids else ""
                )

        for finished in store.decoded(EnvelopeKind.TEST_STEP_FINISHED):
            pickle_step_id = self._finished_pickle_step_id(
                finished.pickle_step_id, finished.test_step_id
            )
            if pickle_step_id:
                self._result_by_pickle_step[pickle_step_id] = finished.test_step_result

        for definition in store.decoded(EnvelopeKind.STEP_DEFINITION):
            self._reference_by_definition[definition.id] = definition.source_reference

        self._log.debug(
            "Indexed %d pickle steps, %d test steps, %d results, %d step definitions",
            len(self._pickle_step_by_ast_node),
            len(self._definition_by_pickle_step),
            len(self._result_by_pickle_step),
            len(self._reference_by_definition),
        )

    def _finished_pickle_step_id(
        self, pickle_step_id: Optional[str], test_step_id: Optional[str]
    ) -> str:
        if pickle_step_id:
            return pickle_step_id
        if not test_step_id:
            return ""
        return self._pickle_step_by_test_step.get(test_step_id, test_step_id)

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def resolve_pickle_step_id(self, step_id: str) -> str:
        """Return the pickle step generated from a gherkin step, or ""."""
        return self._pickle_step_by_ast_node.get(step_id, "")

    def resolve_step_definition_id(self, pickle_step_id: str) -> str:
        """Return the first step definition matched for a pickle step, or ""."""
        if not pickle_step_id:
            return ""
        return self._definition_by_pickle_step.get(pickle_step_id, "")

    def resolve_result(self, step_id: str) -> StepResult:
        """Resolve the execution result of a gherkin step."""
        pickle_step_id = self.resolve_pickle_step_id(step_id)
        if not pickle_step_id:
            self._log.debug("No pickle step for gherkin step %s", step_id)
            return StepResult()
        return step_result_from_message(self._result_by_pickle_step.get(pickle_step_id))

    def resolve_binding(self, step_id: str) -> StepMatch:
        """Resolve the source location of the step definition for a gherkin step."""
        definition_id = self.resolve_step_definition_id(self.resolve_pickle_step_id(step_id))
        if not definition_id:
            return StepMatch()
        return step_match_from_reference(self._reference_by_definition.get(definition_id))
