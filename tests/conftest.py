"""
Test fixtures and envelope builders for cukejson tests.

The builders produce Cucumber Messages envelopes in their wire shape
(camelCase keys, one key per envelope). Tests import them directly:

    from conftest import make_document, make_scenario, make_step
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

_tests_dir = Path(__file__).parent
_repo_root = _tests_dir.parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

from cukejson.config.runtime_config import reset_config
from cukejson.runtime.schema_validator import clear_schema_cache

# ============================================================================
# Envelope Builders
# ============================================================================


def make_step(step_id: str, text: str, keyword: str = "Given ", line: int = 4) -> Dict[str, Any]:
    return {
        "id": step_id,
        "keyword": keyword,
        "keywordType": "Context",
        "text": text,
        "location": {"line": line, "column": 5},
    }


def make_scenario(
    name: str,
    steps: List[Dict[str, Any]],
    line: int = 3,
    tags: Optional[List[str]] = None,
    keyword: str = "Scenario",
    description: str = "",
    scenario_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a feature child wrapping one scenario."""
    return {
        "scenario": {
            "id": scenario_id or f"scenario-{name}",
            "keyword": keyword,
            "name": name,
            "description": description,
            "location": {"line": line, "column": 3},
            "tags": [
                {"name": t, "location": {"line": line - 1, "column": 3}, "id": f"tag-{t}"}
                for t in (tags or [])
            ],
            "steps": steps,
            "examples": [],
        }
    }


def make_background(name: str, steps: List[Dict[str, Any]], line: int = 3) -> Dict[str, Any]:
    return {
        "background": {
            "id": f"background-{name}",
            "keyword": "Background",
            "name": name,
            "description": "",
            "location": {"line": line, "column": 3},
            "steps": steps,
        }
    }


def make_rule(name: str, children: List[Dict[str, Any]], line: int = 3) -> Dict[str, Any]:
    return {
        "rule": {
            "id": f"rule-{name}",
            "keyword": "Rule",
            "name": name,
            "description": "",
            "location": {"line": line, "column": 3},
            "tags": [],
            "children": children,
        }
    }


def make_document(
    feature_name: str,
    children: List[Dict[str, Any]],
    uri: str = "features/login.feature",
    tags: Optional[List[str]] = None,
    comments: Optional[List[Tuple[int, str]]] = None,
    description: str = "",
    line: int = 1,
) -> Dict[str, Any]:
    return {
        "gherkinDocument": {
            "uri": uri,
            "feature": {
                "keyword": "Feature",
                "name": feature_name,
                "description": description,
                "language": "en",
                "location": {"line": line, "column": 1},
                "tags": [{"name": t, "location": {"line": line, "column": 1}} for t in (tags or [])],
                "children": children,
            },
            "comments": [
                {"location": {"line": c_line, "column": 1}, "text": text}
                for c_line, text in (comments or [])
            ],
        }
    }


def make_pickle(pickle_id: str, steps: Sequence[Tuple[str, Sequence[str]]]) -> Dict[str, Any]:
    """Build a pickle; steps are (pickle step id, astNodeIds) pairs."""
    return {
        "pickle": {
            "id": pickle_id,
            "uri": "features/login.feature",
            "name": pickle_id,
            "language": "en",
            "astNodeIds": [],
            "tags": [],
            "steps": [
                {"id": step_id, "astNodeIds": list(ast_ids), "text": step_id, "type": "Action"}
                for step_id, ast_ids in steps
            ],
        }
    }


def make_test_case(
    case_id: str,
    pickle_id: str,
    steps: Sequence[Tuple[str, str, Sequence[str]]],
) -> Dict[str, Any]:
    """Build a testCase; steps are (test step id, pickle step id, step definition ids)."""
    return {
        "testCase": {
            "id": case_id,
            "pickleId": pickle_id,
            "testSteps": [
                {
                    "id": test_step_id,
                    "pickleStepId": pickle_step_id,
                    "stepDefinitionIds": list(definition_ids),
                    "stepMatchArgumentsLists": [],
                }
                for test_step_id, pickle_step_id, definition_ids in steps
            ],
        }
    }


def make_hook_step(test_step_id: str, hook_id: str) -> Dict[str, Any]:
    return {"id": test_step_id, "hookId": hook_id}


def make_test_step_finished(
    test_step_id: str,
    status: str,
    seconds: Optional[int] = None,
    message: Optional[str] = None,
    nanos: int = 0,
) -> Dict[str, Any]:
    result: Dict[str, Any] = {"status": status}
    if seconds is not None:
        result["duration"] = {"seconds": seconds, "nanos": nanos}
    if message is not None:
        result["message"] = message
    return {
        "testStepFinished": {
            "testCaseStartedId": "tcs-1",
            "testStepId": test_step_id,
            "testStepResult": result,
            "timestamp": {"seconds": 1700000000, "nanos": 0},
        }
    }


def make_step_definition(definition_id: str, uri: str, line: int) -> Dict[str, Any]:
    return {
        "stepDefinition": {
            "id": definition_id,
            "pattern": {"source": "I log in", "type": "CUCUMBER_EXPRESSION"},
            "sourceReference": {"uri": uri, "location": {"line": line}},
        }
    }


def make_login_batch() -> List[Dict[str, Any]]:
    """Feature "Login" / scenario "Valid login" / step "I log in", PASSED in 2s at steps.ts:10."""
    return [
        {"meta": {"protocolVersion": "24.0.0", "implementation": {"name": "cucumber-js"}}},
        make_document(
            "Login",
            [make_scenario("Valid login", [make_step("s1", "I log in", keyword="When ")], tags=["@smoke"])],
            tags=["@auth"],
            comments=[(1, "# language: en")],
        ),
        make_pickle("pk1", [("p1", ["s1"])]),
        make_step_definition("d1", "steps.ts", 10),
        make_test_case("tc1", "pk1", [("ts1", "p1", ["d1"])]),
        make_test_step_finished("ts1", "PASSED", seconds=2),
    ]


def as_strings(batch: List[Dict[str, Any]]) -> List[str]:
    """Encode every envelope as a JSON string, as some emitters do."""
    return [json.dumps(envelope) for envelope in batch]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def login_batch() -> List[Dict[str, Any]]:
    return make_login_batch()


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    """Clear config/schema caches and CUKEJSON_* overrides around every test."""
    for var in (
        "CUKEJSON_INPUT_SCHEMA",
        "CUKEJSON_OUTPUT_SCHEMA",
        "CUKEJSON_CHECK_OUTPUT",
        "CUKEJSON_OUTPUT_INDENT",
        "CUKEJSON_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    clear_schema_cache()
    yield
    reset_config()
    clear_schema_cache()


@pytest.fixture
def bdd_context() -> Dict[str, Any]:
    """Shared state for BDD steps: the batch being built and the CLI outcome."""
    return {
        "feature": None,
        "scenario": None,
        "steps": [],
        "drop_document": False,
        "exit_code": None,
        "output": None,
        "report": None,
    }


# ============================================================================
# Pytest Configuration for BDD
# ============================================================================


def pytest_configure(config):
    """Register markers generated from feature file tags."""
    config.addinivalue_line(
        "markers",
        "executable: mark test as executable (golden-path BDD scenarios)",
    )
