"""
types.py - Dataclasses for the legacy Cucumber JSON report and conversion bookkeeping.

The report tree mirrors the hierarchical format consumed by legacy reporting
tools: feature -> elements (scenarios/backgrounds) -> steps, with each step
carrying its execution result and the location of the step definition that
matched it.

Every node has a *_to_dict() function producing the exact key order the legacy
serializer emits. Keys whose value comes from an absent tag/comment list are
omitted rather than written as null.

Usage:
    from cukejson.runtime.types import (
        StepResult, StepMatch, StepNode, ScenarioNode, FeatureNode,
        feature_node_to_dict,
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# =============================================================================
# Envelope kinds
# =============================================================================


class EnvelopeKind(str, Enum):
    """Wire keys of the envelope kinds that take part in conversion."""

    GHERKIN_DOCUMENT = "gherkinDocument"
    PICKLE = "pickle"
    TEST_CASE = "testCase"
    TEST_STEP_FINISHED = "testStepFinished"
    STEP_DEFINITION = "stepDefinition"


UNKNOWN_KIND = "unknown"


@dataclass
class DecodeFailure:
    """A single record that could not be decoded and was treated as absent.

    Attributes:
        kind: Envelope kind, or "unknown" when the record could not be classified.
        index: Position of the record in the input batch.
        message: Description of the parse or model validation error.
    """

    kind: str
    index: int
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "index": self.index, "message": self.message}


# =============================================================================
# Report nodes
# =============================================================================


@dataclass(frozen=True)
class StepResult:
    """Execution outcome of one step.

    The unresolved form is empty status, zero duration and no message.
    Duration is in whole seconds and is 0 when the runner reported none.
    """

    status: str = ""
    duration: int = 0
    error_message: Optional[str] = None


@dataclass(frozen=True)
class StepMatch:
    """Source location ("<uri>:<line>") of the step definition that matched."""

    location: str = ":0"


def step_result_to_dict(result: StepResult) -> Dict[str, Any]:
    return {
        "status": result.status,
        "duration": result.duration,
        "error_message": result.error_message,
    }


def step_match_to_dict(match: StepMatch) -> Dict[str, Any]:
    return {"location": match.location}


@dataclass(frozen=True)
class StepNode:
    keyword: str
    line: int
    name: str
    result: StepResult = field(default_factory=StepResult)
    match: StepMatch = field(default_factory=StepMatch)


def step_node_to_dict(step: StepNode) -> Dict[str, Any]:
    return {
        "keyword": step.keyword,
        "line": step.line,
        "name": step.name,
        "result": step_result_to_dict(step.result),
        "match": step_match_to_dict(step.match),
    }


@dataclass(frozen=True)
class ScenarioNode:
    """A scenario (or background) element of a feature.

    Attributes:
        id: Composite "<feature name>;<scenario name>" key. Not globally
            unique: two scenarios with the same name in one feature share it.
        type: "scenario" or "background".
        tags: Flattened tag names, or None when the source had no tag list.
    """

    id: str
    keyword: str
    name: str
    description: str
    line: int
    steps: List[StepNode] = field(default_factory=list)
    tags: Optional[List[str]] = None
    type: str = "scenario"


def scenario_node_to_dict(scenario: ScenarioNode) -> Dict[str, Any]:
    result: Dict[str, Any] = {
        "description": scenario.description,
        "id": scenario.id,
        "keyword": scenario.keyword,
        "line": scenario.line,
        "name": scenario.name,
        "steps": [step_node_to_dict(s) for s in scenario.steps],
    }
    if scenario.tags is not None:
        result["tags"] = list(scenario.tags)
    result["type"] = scenario.type
    return result


@dataclass(frozen=True)
class FeatureNode:
    """Root node of the legacy report: one per conversion call."""

    id: str
    name: str
    keyword: str
    description: str
    line: int
    uri: Optional[str]
    elements: List[ScenarioNode] = field(default_factory=list)
    tags: Optional[List[str]] = None
    comments: Optional[List[Dict[str, Any]]] = None


def feature_node_to_dict(feature: FeatureNode) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    if feature.comments is not None:
        result["comments"] = [dict(c) for c in feature.comments]
    result.update(
        {
            "description": feature.description,
            "elements": [scenario_node_to_dict(e) for e in feature.elements],
            "id": feature.id,
            "keyword": feature.keyword,
            "line": feature.line,
            "name": feature.name,
            "uri": feature.uri,
        }
    )
    if feature.tags is not None:
        result["tags"] = list(feature.tags)
    return result


def report_to_list(report: List[FeatureNode]) -> List[Dict[str, Any]]:
    """Convert the assembled report into plain JSON-serializable data."""
    return [feature_node_to_dict(f) for f in report]


# =============================================================================
# Conversion result
# =============================================================================


@dataclass
class ConversionResult:
    """Outcome of one conversion call.

    Attributes:
        report: The assembled report (always exactly one FeatureNode).
        decode_failures: Records that were skipped because they did not decode.
    """

    report: List[FeatureNode]
    decode_failures: List[DecodeFailure] = field(default_factory=list)

    def to_list(self) -> List[Dict[str, Any]]:
        return report_to_list(self.report)

    @property
    def feature(self) -> FeatureNode:
        return self.report[0]
