"""Parser for RFML spec files.

File layout:

    #! 8c1f... (identity line)
    # title: Log in
    # start_uri: /login
    # tags: auth, smoke
    # browsers: chrome, firefox
    #
    Enter the username and password and press "Log in"
    Are you on the dashboard?

Lines starting with `#` are comments. Header comments (everything before
the first step) are kept as the test description and may carry the
metadata keys above. Other non-blank lines pair up into steps: an action
line immediately followed by its response line, which must be a question.

Errors are keyed by 1-based line number; key 0 holds file-level errors
such as a missing identity line.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .identity import decode
from .models import LocalTest, Step

__all__ = ["parse", "parse_file"]

_METADATA = re.compile(r"^(title|start_uri|tags|browsers)\s*:\s*(.*)$", re.IGNORECASE)

MISSING_ID = "missing test id (add a '#! <id>' line)"
MISSING_RESPONSE = "missing response line after action"
NOT_A_QUESTION = "response must be a question (contain a ?)"


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _apply_metadata(test: LocalTest, comment: str) -> None:
    """Pick a metadata value out of a header comment."""
    match = _METADATA.match(comment)
    if not match:
        return
    key, value = match.group(1).lower(), match.group(2).strip()
    if key == "title":
        test.title = value
    elif key == "start_uri":
        test.start_uri = value
    elif key == "tags":
        test.tags = _split_list(value)
    elif key == "browsers":
        test.browsers = _split_list(value)


def parse(text: str) -> LocalTest:
    """Parse spec-file contents.

    Args:
        text: Full file contents

    Returns:
        LocalTest; its errors mapping is empty when the file is valid
    """
    test = LocalTest()
    description: List[str] = []
    in_header = True
    pending: Optional[Tuple[int, str]] = None  # (line number, action)

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()

        if line.startswith("#"):
            if in_header:
                comment = line[1:].strip()
                _apply_metadata(test, comment)
                description.append(comment)
            continue

        if not line:
            if pending is not None:
                test.errors[pending[0]] = MISSING_RESPONSE
                pending = None
            continue

        in_header = False
        if pending is None:
            pending = (line_no, line)
            continue

        if "?" not in line:
            test.errors[line_no] = NOT_A_QUESTION
        else:
            test.steps.append(Step(action=pending[1], response=line))
        pending = None

    if pending is not None:
        test.errors[pending[0]] = MISSING_RESPONSE

    test.description = "\n".join(description).strip()
    # Read exactly as a remote description is read.
    test.id = decode(test.description)
    if test.id is None:
        test.errors[0] = MISSING_ID

    return test


def parse_file(path) -> LocalTest:
    """Read and parse a spec file."""
    with open(path, encoding="utf-8") as f:
        return parse(f.read())
