"""Unit tests for the upload pipeline."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from rfsync.core.errors import RemoteError, UploadError, ValidationFailedError
from rfsync.core.models import LocalTest, RemoteTest, Step
from rfsync.core.uploader import (
    SENTINEL_TAG,
    build_correlation_map,
    build_payload,
    upload_test,
    upload_tests,
)
from tests.helpers import TEST_LOCAL_ID, VALID_SPEC, write_spec


@pytest.mark.unit
class TestBuildCorrelationMap:
    """Test mapping local identities to remote ids."""

    def test_maps_marked_tests(self, remote_client: MagicMock) -> None:
        remote_client.list_tests.return_value = [
            RemoteTest(id=99, description="! abc-123\ntitle: x"),
            RemoteTest(id=100, description="no marker here"),
            RemoteTest(id=101, description=""),
            RemoteTest(id=102, description="notes\n!def-456 extra"),
        ]
        assert build_correlation_map(remote_client) == {"abc-123": 99, "def-456": 102}


@pytest.mark.unit
class TestBuildPayload:
    """Test the remote payload for a local test."""

    def test_full_payload(self) -> None:
        test = LocalTest(
            id="abc-123",
            title="Log in",
            start_uri="/login",
            tags=["auth", SENTINEL_TAG, "auth"],
            browsers=["chrome", "firefox"],
            description="! abc-123\ntitle: Log in",
            steps=[Step("a1", "r1?"), Step("a2", "r2?")],
        )
        assert build_payload(test) == {
            "start_uri": "/login",
            "title": "Log in",
            "description": "! abc-123\ntitle: Log in",
            "tags": [SENTINEL_TAG, "auth"],
            "elements": [
                {"type": "step", "redirection": True, "element": {"action": "a1", "response": "r1?"}},
                {"type": "step", "redirection": True, "element": {"action": "a2", "response": "r2?"}},
            ],
            "browsers": [
                {"state": "enabled", "name": "chrome"},
                {"state": "enabled", "name": "firefox"},
            ],
        }

    def test_defaults(self) -> None:
        payload = build_payload(LocalTest(id="x", title="t", steps=[Step("a", "r?")]))
        assert payload["start_uri"] == "/"
        assert payload["tags"] == [SENTINEL_TAG]
        assert "browsers" not in payload


@pytest.mark.unit
class TestUploadTest:
    """Test dispatching one test."""

    def test_update_when_correlated(self, remote_client: MagicMock) -> None:
        test = LocalTest(id="abc-123", title="t", steps=[Step("a1", "r1?"), Step("a2", "r2?")])

        result = upload_test(remote_client, test, {"abc-123": 99})

        assert result.id == 99
        remote_client.create.assert_not_called()
        remote_client.update.assert_called_once()
        remote_id, payload = remote_client.update.call_args.args
        assert remote_id == 99
        assert [e["element"]["action"] for e in payload["elements"]] == ["a1", "a2"]
        assert all(e["type"] == "step" for e in payload["elements"])

    def test_create_when_not_correlated(self, remote_client: MagicMock) -> None:
        test = LocalTest(id="new-id", title="t", steps=[Step("a", "r?")])

        result = upload_test(remote_client, test, {"abc-123": 99})

        assert result.id == 1000
        remote_client.update.assert_not_called()
        remote_client.create.assert_called_once()

    def test_skip_empty(self, remote_client: MagicMock) -> None:
        test = LocalTest(id="abc-123", title="t", steps=[])

        assert upload_test(remote_client, test, {"abc-123": 99}) is None
        remote_client.create.assert_not_called()
        remote_client.update.assert_not_called()

    def test_remote_error_is_fatal(
        self, remote_client: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        remote_client.create.side_effect = RemoteError("HTTP 500: Error", status_code=500)
        test = LocalTest(id="new-id", title="t", steps=[Step("a", "r?")])

        with pytest.raises(UploadError) as exc_info:
            upload_test(remote_client, test, {})

        assert exc_info.value.local_id == "new-id"
        assert exc_info.value.exit_code == 2
        assert "new-id" in caplog.text
        assert "HTTP 500" in caplog.text


@pytest.mark.unit
class TestUploadTests:
    """Test the full upload pass."""

    def test_creates_and_updates(self, spec_folder: Path, remote_client: MagicMock) -> None:
        write_spec(spec_folder, "existing.rfml", VALID_SPEC)
        write_spec(spec_folder, "new.rfml", VALID_SPEC.replace(TEST_LOCAL_ID, "brand-new"))
        write_spec(spec_folder, "empty.rfml", "#! empty-id\n# title: Nothing yet\n")
        remote_client.list_tests.return_value = [
            RemoteTest(id=99, description=f"! {TEST_LOCAL_ID}"),
        ]

        count = upload_tests(remote_client, spec_folder, threads=4, show_progress=False)

        assert count == 3
        remote_client.update.assert_called_once()
        assert remote_client.update.call_args.args[0] == 99
        remote_client.create.assert_called_once()
        created = remote_client.create.call_args.args[0]
        assert created["title"] == "Log in"
        assert created["browsers"] == [
            {"state": "enabled", "name": "chrome"},
            {"state": "enabled", "name": "firefox"},
        ]

    def test_uploaded_description_correlates_next_pass(
        self, spec_folder: Path, remote_client: MagicMock
    ) -> None:
        """A created test is matched (and updated) on the following upload."""
        write_spec(spec_folder, "login.rfml", VALID_SPEC)
        upload_tests(remote_client, spec_folder, show_progress=False)
        description = remote_client.create.call_args.args[0]["description"]

        remote_client.reset_mock()
        remote_client.list_tests.return_value = [RemoteTest(id=1000, description=description)]
        upload_tests(remote_client, spec_folder, show_progress=False)

        remote_client.create.assert_not_called()
        assert remote_client.update.call_args.args[0] == 1000

    def test_validation_failure_blocks_upload(
        self, spec_folder: Path, remote_client: MagicMock
    ) -> None:
        write_spec(spec_folder, "good.rfml", VALID_SPEC)
        write_spec(spec_folder, "bad.rfml", "#! bad\n\nStep without response\n")

        with pytest.raises(ValidationFailedError):
            upload_tests(remote_client, spec_folder, show_progress=False)

        remote_client.create.assert_not_called()
        remote_client.update.assert_not_called()

    def test_remote_error_aborts_run(self, spec_folder: Path, remote_client: MagicMock) -> None:
        write_spec(spec_folder, "login.rfml", VALID_SPEC)
        remote_client.create.side_effect = RemoteError("HTTP 503: Unavailable", status_code=503)

        with pytest.raises(UploadError):
            upload_tests(remote_client, spec_folder, show_progress=False)
