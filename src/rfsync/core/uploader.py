"""Upload pipeline: local spec files to remote tests.

A local file is matched to a remote test through the identity marker in
the remote description. Matched tests are updated, unmatched ones created.
Any remote failure is fatal for the run.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .batch import THREADS, process_batch
from .elements import step_to_api
from .errors import RemoteError, UploadError
from .http_client import PAGE_SIZE, RemoteClient
from .identity import decode
from .models import LocalTest, RemoteTest
from .spec_files import SPEC_FOLDER
from .validation import validate

logger = logging.getLogger(__name__)

__all__ = [
    "SENTINEL_TAG",
    "build_correlation_map",
    "build_payload",
    "upload_test",
    "upload_tests",
]

SENTINEL_TAG = "ro"


def build_correlation_map(client: RemoteClient) -> Dict[str, int]:
    """Map local identities to remote ids using remote descriptions.

    Remote tests without a marker cannot match any local file and are left
    out.
    """
    correlation: Dict[str, int] = {}
    for test in client.list_tests(page_size=PAGE_SIZE):
        local_id = decode(test.description)
        if local_id is None:
            continue
        correlation[local_id] = test.id
    return correlation


def build_payload(test: LocalTest) -> Dict[str, Any]:
    """Build the remote payload for a parsed spec file."""
    payload: Dict[str, Any] = {
        "start_uri": test.start_uri or "/",
        "title": test.title,
        "description": test.description,
        "tags": list(dict.fromkeys([SENTINEL_TAG] + test.tags)),
        "elements": [step_to_api(step) for step in test.steps],
    }
    if test.browsers:
        payload["browsers"] = [
            {"state": "enabled", "name": name} for name in test.browsers
        ]
    return payload


def upload_test(
    client: RemoteClient,
    test: LocalTest,
    correlation: Dict[str, int],
    debug: bool = False,
) -> Optional[RemoteTest]:
    """Create or update the remote counterpart of one local test.

    Tests without steps are skipped.

    Args:
        client: Remote client
        test: Validated local test
        correlation: Local id to remote id map
        debug: Log progress for this test

    Returns:
        The remote record, or None if the test was skipped

    Raises:
        UploadError: If the remote call fails
    """
    if not test.steps:
        return None

    if debug:
        logger.debug(f"Starting: {test.id}")
        logger.debug(f"\t{test.start_uri or '/'}")

    payload = build_payload(test)
    remote_id = correlation.get(test.id) if test.id is not None else None

    try:
        if remote_id is not None:
            result = client.update(remote_id, payload)
            if debug:
                logger.info(f"\tUpdated {test.id} -- #{result.id}")
        else:
            result = client.create(payload)
            if debug:
                logger.info(f"\tCreated {test.id} -- #{result.id}")
    except RemoteError as e:
        logger.critical(f"Error: {test.id}: {e}")
        raise UploadError(test.id, e) from e

    return result


def upload_tests(
    client: RemoteClient,
    spec_folder: Union[str, Path] = SPEC_FOLDER,
    debug: bool = False,
    threads: int = THREADS,
    show_progress: bool = True,
) -> int:
    """Validate every spec file and push it to the remote service.

    Raises:
        ValidationFailedError: If any spec file fails to parse
        UploadError: On the first remote failure

    Returns:
        Number of tests processed (skipped empty tests included)
    """
    logger.info("Syncing tests")
    correlation = build_correlation_map(client)
    if debug:
        logger.debug(repr(correlation))

    tests = list(validate(spec_folder, debug=debug).values())

    logger.info("Uploading tests...")
    return process_batch(
        tests,
        lambda test: upload_test(client, test, correlation, debug),
        title="Rows",
        threads=threads,
        show_progress=show_progress,
    )
