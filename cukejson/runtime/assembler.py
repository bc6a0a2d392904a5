"""
assembler.py - Build the legacy report tree from a gherkinDocument.

The assembler walks feature -> children -> steps in document order and asks
the ChainResolver for each step's result and matched step definition. It
produces exactly one FeatureNode; the report is a one-element list of it.

Children are handled as follows:
    - scenario:   element of type "scenario"
    - background: element of type "background"
    - rule:       its own scenario/background children, flattened in place

Element ids are "<feature name>;<element name>". Two elements with the same
name in one feature get the same id; the legacy format accepts this.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from cukejson.messages.models import (
    Background,
    Feature,
    FeatureChild,
    GherkinDocument,
    Rule,
    Scenario,
    Step,
)
from cukejson.runtime.errors import MissingRootDocumentError
from cukejson.runtime.extractors import extract_comments, extract_tags
from cukejson.runtime.resolvers import ChainResolver
from cukejson.runtime.types import FeatureNode, ScenarioNode, StepNode

logger = logging.getLogger(__name__)

SCENARIO_TYPE = "scenario"
BACKGROUND_TYPE = "background"


class DocumentAssembler:
    """Assembles FeatureNode trees using a ChainResolver for step enrichment."""

    def __init__(self, resolver: ChainResolver, log: Optional[logging.Logger] = None) -> None:
        self._resolver = resolver
        self._log = log or logger

    def assemble(self, document: GherkinDocument) -> List[FeatureNode]:
        """Assemble the report for one gherkin document.

        Raises:
            MissingRootDocumentError: If the document has no feature.
        """
        feature = document.feature
        if feature is None:
            raise MissingRootDocumentError(
                f"gherkinDocument {document.uri or '<no uri>'} has no feature"
            )

        elements = list(self._elements(feature, feature.children))
        root = FeatureNode(
            id=feature.name,
            name=feature.name,
            keyword=feature.keyword,
            description=feature.description,
            line=feature.location.line,
            uri=document.uri,
            elements=elements,
            tags=extract_tags(feature.tags),
            comments=extract_comments(document.comments),
        )
        self._log.debug(
            "Assembled feature '%s' with %d elements", feature.name, len(elements)
        )
        return [root]

    def _elements(self, feature: Feature, children: Iterable[FeatureChild]) -> Iterable[ScenarioNode]:
        for child in children:
            if child.scenario is not None:
                yield self._scenario(feature, child.scenario)
            elif child.background is not None:
                yield self._background(feature, child.background)
            elif child.rule is not None:
                yield from self._rule_elements(feature, child.rule)
            else:
                self._log.debug("Skipping empty child of feature '%s'", feature.name)

    def _rule_elements(self, feature: Feature, rule: Rule) -> Iterable[ScenarioNode]:
        for child in rule.children:
            if child.scenario is not None:
                yield self._scenario(feature, child.scenario)
            elif child.background is not None:
                yield self._background(feature, child.background)
            else:
                self._log.debug("Skipping empty child of rule '%s'", rule.name)

    def _scenario(self, feature: Feature, scenario: Scenario) -> ScenarioNode:
        return ScenarioNode(
            id=f"{feature.name};{scenario.name}",
            keyword=scenario.keyword,
            name=scenario.name,
            description=scenario.description,
            line=scenario.location.line,
            steps=[self._step(s) for s in scenario.steps],
            tags=extract_tags(scenario.tags),
            type=SCENARIO_TYPE,
        )

    def _background(self, feature: Feature, background: Background) -> ScenarioNode:
        return ScenarioNode(
            id=f"{feature.name};{background.name}",
            keyword=background.keyword,
            name=background.name,
            description=background.description,
            line=background.location.line,
            steps=[self._step(s) for s in background.steps],
            tags=None,
            type=BACKGROUND_TYPE,
        )

    def _step(self, step: Step) -> StepNode:
        return StepNode(
            keyword=step.keyword,
            line=step.location.line,
            name=step.text,
            result=self._resolver.resolve_result(step.id),
            match=self._resolver.resolve_binding(step.id),
        )
