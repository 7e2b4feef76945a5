"""Identity marker codec.

A local spec file is linked to its remote test through a marker line,
`!<uuid>`, stored in the remote test's description. These functions read
that marker and build the comment header written at the top of an
exported file. Both operate on strings only.
"""

from __future__ import annotations

import re
from typing import List, Optional

from uuid6 import uuid7

from .models import RemoteTest

__all__ = ["clean_lines", "decode", "encode_header", "new_identity"]

MARKER = "!"

_TRAILING_HASHES = re.compile(r"#+$")


def new_identity() -> str:
    """Generate a fresh local test identity."""
    return str(uuid7())


def clean_lines(description: Optional[str]) -> List[str]:
    """Split a description into lines with trailing `#` runs and whitespace removed."""
    text = (description or "").strip()
    if not text:
        return []
    return [_TRAILING_HASHES.sub("", line).strip() for line in text.splitlines()]


def _marker_id(line: str) -> Optional[str]:
    """Return the id on a marker line, or None if the line is not one.

    Leading `#` characters are tolerated so a header pasted verbatim into a
    description still counts.
    """
    line = line.lstrip("#").lstrip()
    if not line.startswith(MARKER):
        return None
    tokens = line[len(MARKER):].split()
    return tokens[0] if tokens else ""


def decode(description: Optional[str]) -> Optional[str]:
    """Extract the local identity from a remote description.

    Args:
        description: Remote test description (may be None)

    Returns:
        The id from the first marker line, or None when there is no marker
        (the test was never exported, or its marker was removed).
    """
    for line in clean_lines(description):
        marker = _marker_id(line)
        if marker is not None:
            return marker or None
    return None


def encode_header(test: RemoteTest) -> str:
    """Build the comment header for an exported spec file.

    If the description already carries a marker its lines are passed
    through, each prefixed with `#`. Otherwise a new header is synthesized
    with a fresh identity and the test's metadata, followed by the original
    description lines.

    Args:
        test: Remote test being exported

    Returns:
        Header text without a trailing newline
    """
    lines = clean_lines(test.description)
    out = [f"#{line}" for line in lines]

    has_id = any(_marker_id(line) is not None for line in lines)
    if not has_id:
        out = [
            f"#{MARKER} {new_identity()}",
            f"# title: {test.title}",
            f"# start_uri: {test.start_uri}",
            f"# tags: {', '.join(test.tags)}",
            f"# browsers: {', '.join(test.enabled_browsers())}",
            "#",
            " ",
        ] + out

    return "\n".join(out)
