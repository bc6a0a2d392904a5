"""
Pydantic models for the Cucumber Messages payloads the formatter consumes.

Only the fields the legacy report needs are modelled. Wire names are camelCase
and are mapped onto snake_case attributes by the alias generator; unknown
fields are ignored so newer protocol revisions still decode.

Usage:
    from cukejson.messages.models import GherkinDocument, Pickle

    document = GherkinDocument.model_validate(envelope["gherkinDocument"])
    for child in document.feature.children:
        ...
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MessageModel(BaseModel):
    """Base for all message payloads: camelCase on the wire, extras ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# gherkinDocument
# =============================================================================


class Location(MessageModel):
    line: int
    column: Optional[int] = None


class Tag(MessageModel):
    name: str
    location: Optional[Location] = None
    id: Optional[str] = None


class Comment(MessageModel):
    location: Location
    text: str


class Step(MessageModel):
    id: str
    keyword: str
    text: str
    location: Location
    keyword_type: Optional[str] = None


class Scenario(MessageModel):
    id: Optional[str] = None
    keyword: str
    name: str = ""
    description: str = ""
    location: Location
    tags: Optional[List[Tag]] = None
    steps: List[Step] = Field(default_factory=list)


class Background(MessageModel):
    id: Optional[str] = None
    keyword: str
    name: str = ""
    description: str = ""
    location: Location
    steps: List[Step] = Field(default_factory=list)


class RuleChild(MessageModel):
    background: Optional[Background] = None
    scenario: Optional[Scenario] = None


class Rule(MessageModel):
    id: Optional[str] = None
    keyword: str
    name: str = ""
    description: str = ""
    location: Location
    tags: Optional[List[Tag]] = None
    children: List[RuleChild] = Field(default_factory=list)


class FeatureChild(MessageModel):
    background: Optional[Background] = None
    scenario: Optional[Scenario] = None
    rule: Optional[Rule] = None


class Feature(MessageModel):
    keyword: str
    name: str
    description: str = ""
    language: Optional[str] = None
    location: Location
    tags: Optional[List[Tag]] = None
    children: List[FeatureChild] = Field(default_factory=list)


class GherkinDocument(MessageModel):
    uri: Optional[str] = None
    feature: Optional[Feature] = None
    comments: Optional[List[Comment]] = None


# =============================================================================
# pickle
# =============================================================================


class PickleStep(MessageModel):
    id: str
    ast_node_ids: List[str] = Field(default_factory=list)
    text: Optional[str] = None


class Pickle(MessageModel):
    id: str
    uri: Optional[str] = None
    name: Optional[str] = None
    ast_node_ids: List[str] = Field(default_factory=list)
    steps: List[PickleStep] = Field(default_factory=list)


# =============================================================================
# testCase
# =============================================================================


class TestStep(MessageModel):
    id: Optional[str] = None
    pickle_step_id: Optional[str] = None
    hook_id: Optional[str] = None
    step_definition_ids: List[str] = Field(default_factory=list)


class TestCase(MessageModel):
    id: Optional[str] = None
    pickle_id: Optional[str] = None
    test_steps: List[TestStep] = Field(default_factory=list)


# =============================================================================
# testStepFinished
# =============================================================================


class Duration(MessageModel):
    seconds: int = 0
    nanos: int = 0


class TestStepResult(MessageModel):
    status: str
    duration: Optional[Duration] = None
    message: Optional[str] = None


class TestStepFinished(MessageModel):
    test_step_result: TestStepResult
    test_step_id: Optional[str] = None
    test_case_started_id: Optional[str] = None
    # Not part of the published protocol; some emitters inline the pickle step id.
    pickle_step_id: Optional[str] = None


# =============================================================================
# stepDefinition
# =============================================================================


class SourceReference(MessageModel):
    uri: Optional[str] = None
    location: Optional[Location] = None


class StepDefinition(MessageModel):
    id: str
    source_reference: SourceReference
