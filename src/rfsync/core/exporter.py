"""Export pipeline: remote tests to local spec files.

Each remote test becomes one spec file named after its id and title.
Re-exporting overwrites the same file. An unknown element type anywhere in
a test aborts the whole export.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from .batch import THREADS, process_batch
from .elements import flatten_elements
from .http_client import PAGE_SIZE, RemoteClient
from .identity import encode_header
from .models import RemoteTest
from .spec_files import SPEC_FOLDER, export_file_name, resolve_spec_path

logger = logging.getLogger(__name__)

__all__ = ["render_spec", "export_test", "export_tests"]


def render_spec(test: RemoteTest, debug: bool = False) -> str:
    """Render a full remote test as spec-file text."""
    lines = [encode_header(test)]
    lines.extend(flatten_elements(test.elements, debug))
    return "\n".join(lines) + "\n"


def export_test(
    client: RemoteClient,
    summary: RemoteTest,
    spec_folder: Union[str, Path] = SPEC_FOLDER,
    debug: bool = False,
) -> Path:
    """Fetch one remote test and write it to its spec file.

    The listing has no elements, so the full record is retrieved first.
    The file is truncated and rewritten only once the test has rendered,
    so a shrinking test leaves no stale trailing content.

    Args:
        client: Remote client
        summary: Test from the listing
        spec_folder: Spec-file root
        debug: Write `# step <n>` comments

    Returns:
        Path of the written file

    Raises:
        UnsupportedElementError: If the element tree has an unknown type
    """
    path = resolve_spec_path(export_file_name(summary.id, summary.title), spec_folder)
    test = client.retrieve(summary.id)
    text = render_spec(test, debug)

    with open(path, "w", encoding="utf-8") as f:
        f.write(text)

    logger.debug(f"Exported #{test.id} to {path}")
    return path


def export_tests(
    client: RemoteClient,
    spec_folder: Union[str, Path] = SPEC_FOLDER,
    debug: bool = False,
    threads: int = THREADS,
    show_progress: bool = True,
) -> int:
    """Export every remote test.

    Returns:
        Number of tests processed
    """
    tests = client.list_tests(page_size=PAGE_SIZE)
    logger.info(f"Exporting {len(tests)} tests...")
    return process_batch(
        tests,
        lambda summary: export_test(client, summary, spec_folder, debug),
        title="Rows",
        threads=threads,
        show_progress=show_progress,
    )
