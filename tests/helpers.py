"""Test helper functions for rfml-sync tests.

This module provides builders for raw API records and spec-file text.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from rfsync.core.models import Step


# Deterministic identity for predictable testing
TEST_LOCAL_ID = "0190a6a2-3f55-7c1e-9b1e-5f0c2d8e4a11"


def step_element(action: str, response: str) -> Dict[str, Any]:
    """Build a raw API step element."""
    return {
        "type": "step",
        "redirection": True,
        "element": {"action": action, "response": response},
    }


def nested_element(*children: Dict[str, Any]) -> Dict[str, Any]:
    """Build a raw API nested-test element."""
    return {"type": "test", "element": {"id": 7, "elements": list(children)}}


def collect_steps(raw_elements: List[Dict[str, Any]]) -> List[Step]:
    """Return the steps of a raw element tree in document order."""
    steps: List[Step] = []
    for raw in raw_elements:
        body = raw["element"]
        if raw["type"] == "test":
            steps.extend(collect_steps(body["elements"]))
        else:
            steps.append(Step(action=body["action"], response=body["response"]))
    return steps


def remote_test_data(
    test_id: int = 42,
    title: str = "Log In!",
    description: str = "",
    elements: Optional[List[Dict[str, Any]]] = None,
    tags: Optional[List[str]] = None,
    browsers: Optional[List[Dict[str, str]]] = None,
    start_uri: str = "/login",
) -> Dict[str, Any]:
    """Build a raw API test record."""
    return {
        "id": test_id,
        "title": title,
        "start_uri": start_uri,
        "description": description,
        "tags": tags if tags is not None else ["auth"],
        "browsers": browsers if browsers is not None else [
            {"name": "chrome", "state": "enabled"},
            {"name": "firefox", "state": "disabled"},
        ],
        "elements": elements if elements is not None else [],
    }


def write_spec(folder: Path, name: str, text: str) -> Path:
    """Write a spec file under folder and return its path."""
    path = folder / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


VALID_SPEC = f"""#! {TEST_LOCAL_ID} (this is the ID, don't edit it)
# title: Log in
# start_uri: /login
# tags: auth, smoke
# browsers: chrome, firefox
#

Open the login page
Do you see a login form?

Log in as the test user
Are you on the dashboard?
"""
