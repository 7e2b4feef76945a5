"""Data models for rfml-sync.

This module defines the dataclasses exchanged between the engine modules:
RemoteTest (a record from the test-management service), LocalTest (a parsed
spec file) and the Step pair they both reduce to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Browser:
    """A browser entry on a remote test.

    Attributes:
        name: Browser identifier used by the service (e.g. "chrome")
        state: "enabled" or "disabled"
    """

    name: str
    state: str = "enabled"

    @property
    def enabled(self) -> bool:
        return self.state == "enabled"


@dataclass(frozen=True)
class Step:
    """One action/response pair."""

    action: str
    response: str


@dataclass
class RemoteTest:
    """A test record as returned by the remote service.

    Summary listings omit elements; use RemoteClient.retrieve() to get the
    full element tree.

    Attributes:
        id: Numeric id assigned by the service
        title: Test title
        start_uri: Path the test starts from
        description: Free-text description, may hold the identity marker
        tags: Tag names
        browsers: Browser entries with their enabled state
        elements: Raw element tree as returned by the API
    """

    id: int
    title: str = ""
    start_uri: str = ""
    description: str = ""
    tags: List[str] = field(default_factory=list)
    browsers: List[Browser] = field(default_factory=list)
    elements: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RemoteTest":
        """Build a RemoteTest from an API response dict."""
        return cls(
            id=int(data["id"]),
            title=data.get("title") or "",
            start_uri=data.get("start_uri") or "",
            description=data.get("description") or "",
            tags=list(data.get("tags") or []),
            browsers=[
                Browser(name=b.get("name", ""), state=b.get("state", ""))
                for b in data.get("browsers") or []
            ],
            elements=list(data.get("elements") or []),
        )

    def enabled_browsers(self) -> List[str]:
        """Names of browsers whose state is enabled, in service order."""
        return [b.name for b in self.browsers if b.enabled]


@dataclass
class LocalTest:
    """A spec file after parsing.

    Attributes:
        id: Local identity (the UUID from the `#!` line), None if missing
        title: Title from the header, if any
        start_uri: Start URI from the header, if any
        tags: Tags from the header
        browsers: Browser names from the header
        description: Header comment text, marker and metadata included
        steps: Action/response pairs in file order
        errors: Mapping of 1-based line number to parse error message
    """

    id: Optional[str] = None
    title: Optional[str] = None
    start_uri: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    browsers: List[str] = field(default_factory=list)
    description: str = ""
    steps: List[Step] = field(default_factory=list)
    errors: Dict[int, str] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
