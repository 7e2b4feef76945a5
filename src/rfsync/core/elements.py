"""Remote element tree and its flattening into spec-file lines.

The service represents a test body as a tree: `test` elements hold nested
elements, `step` elements hold an action and a response. A spec file
stores the same steps as a flat sequence of line pairs. Traversal is
depth-first, left to right, so step order is preserved across nesting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple, Union

from .errors import MalformedStepError, UnsupportedElementError
from .models import Step

__all__ = [
    "TestElement",
    "StepElement",
    "Element",
    "element_from_api",
    "flatten",
    "flatten_elements",
    "step_to_api",
]


@dataclass(frozen=True)
class TestElement:
    """A nested test: an ordered group of child elements."""

    children: Tuple["Element", ...] = field(default_factory=tuple)

    # Keep pytest from collecting this class.
    __test__ = False


@dataclass(frozen=True)
class StepElement:
    """A single action/response step."""

    action: str
    response: str


Element = Union[TestElement, StepElement]


def _single_line(text: str) -> bool:
    stripped = text.strip()
    return len(stripped.splitlines()) == 1 and not stripped.startswith("#")


def element_from_api(data: Dict[str, Any]) -> Element:
    """Convert one raw API element into the tagged variant.

    Args:
        data: Element dict, e.g. {"type": "step", "element": {...}}

    Returns:
        TestElement or StepElement

    Raises:
        UnsupportedElementError: If the element type is not test or step
    """
    element_type = data.get("type")
    body = data.get("element") or {}

    if element_type == "test":
        children = tuple(element_from_api(child) for child in body.get("elements") or [])
        return TestElement(children=children)
    if element_type == "step":
        return StepElement(
            action=body.get("action") or "",
            response=body.get("response") or "",
        )
    raise UnsupportedElementError(element_type)


def flatten(element: Element, index: int, debug: bool = False) -> Tuple[List[str], int]:
    """Render an element as spec-file lines.

    The running index is threaded through nested tests so numbering is
    continuous. A blank separator precedes every step except when the index
    is 0. The index advances by one for every node, tests included.

    Args:
        element: Element to render
        index: Running index before this element
        debug: Emit a `# step <n>` comment before each step

    Returns:
        (rendered lines, index after this element)

    Raises:
        UnsupportedElementError: If the element is neither a test nor a step
        MalformedStepError: If a step's text is empty, multi-line or starts
            with `#`
    """
    lines: List[str] = []

    if isinstance(element, TestElement):
        for child in element.children:
            child_lines, index = flatten(child, index, debug)
            lines.extend(child_lines)
    elif isinstance(element, StepElement):
        if not (_single_line(element.action) and _single_line(element.response)):
            raise MalformedStepError(element.action, element.response)
        if index != 0:
            lines.append("")
        if debug:
            lines.append(f"# step {index + 1}")
        lines.append(element.action)
        lines.append(element.response)
    else:
        raise UnsupportedElementError(type(element).__name__)

    return lines, index + 1


def flatten_elements(raw_elements: Iterable[Dict[str, Any]], debug: bool = False) -> List[str]:
    """Convert and render a remote test's top-level element list."""
    lines: List[str] = []
    index = 0
    for raw in raw_elements:
        element_lines, index = flatten(element_from_api(raw), index, debug)
        lines.extend(element_lines)
    return lines


def step_to_api(step: Step) -> Dict[str, Any]:
    """Build the flat upload element for a parsed step."""
    return {
        "type": "step",
        "redirection": True,
        "element": {
            "action": step.action,
            "response": step.response,
        },
    }
