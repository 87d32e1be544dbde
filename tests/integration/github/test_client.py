"""Integration tests for the Checks API client."""

from collections.abc import AsyncGenerator

import aiohttp
import pytest
from aioresponses import aioresponses as aioresponses_cls
from pydantic import SecretStr
from yarl import URL

from jest_annotate_action.errors import ApiError
from jest_annotate_action.github import ChecksClient, GitHubConfig
from jest_annotate_action.testing.factories import AnnotationFactory
from jest_annotate_action.testing.github.payloads import (
    check_run,
    check_runs_response,
    check_suite,
    check_suites_response,
)

API_BASE_URL = "http://github.test"
REPO_URL = f"{API_BASE_URL}/repos/test-owner/test-repo"


@pytest.fixture
def config() -> GitHubConfig:
    """Create test configuration."""
    return GitHubConfig(
        token=SecretStr("test-token"),
        owner="test-owner",
        repo="test-repo",
        api_base_url=API_BASE_URL,
    )


@pytest.fixture
async def client(
    config: GitHubConfig, aioresponses: aioresponses_cls
) -> AsyncGenerator[ChecksClient, None]:
    """Create client with managed session."""
    async with ChecksClient.from_config(config) as impl:
        yield impl


class TestListCheckRuns:
    """Tests for list_check_runs."""

    async def test_returns_check_runs(
        self, client: ChecksClient, aioresponses: aioresponses_cls
    ) -> None:
        """Parses the check runs of the first page."""
        aioresponses.get(
            f"{REPO_URL}/commits/abc123/check-runs",
            payload=check_runs_response(
                check_runs=[check_run(run_id=1, name="unit"), check_run(run_id=2)]
            ),
        )

        runs = await client.list_check_runs("abc123")

        assert [run.id for run in runs] == [1, 2]
        assert runs[0].name == "unit"
        assert runs[0].status == "in_progress"
        assert runs[0].head_sha == "abc123"

    async def test_passes_filters_as_query(
        self, client: ChecksClient, aioresponses: aioresponses_cls
    ) -> None:
        """Sends check name and status filters as query parameters."""
        url = f"{REPO_URL}/commits/abc123/check-runs?check_name=unit&status=in_progress"
        aioresponses.get(url, payload=check_runs_response())

        runs = await client.list_check_runs(
            "abc123", check_name="unit", status="in_progress"
        )

        assert runs == []
        aioresponses.assert_called_once()  # type: ignore[no-untyped-call]

    async def test_sends_token(
        self, client: ChecksClient, aioresponses: aioresponses_cls
    ) -> None:
        """Authenticates with the configured token."""
        url = f"{REPO_URL}/commits/abc123/check-runs"
        aioresponses.get(url, payload=check_runs_response())

        await client.list_check_runs("abc123")

        assert client.session.headers["Authorization"] == "Bearer test-token"

    async def test_raises_api_error_on_status(
        self, client: ChecksClient, aioresponses: aioresponses_cls
    ) -> None:
        """Raises ApiError with the status for non-200 answers."""
        aioresponses.get(
            f"{REPO_URL}/commits/abc123/check-runs", status=404, body="Not Found"
        )

        with pytest.raises(ApiError, match="404 Not Found") as exc_info:
            await client.list_check_runs("abc123")

        assert exc_info.value.status == 404

    async def test_raises_api_error_on_connection_failure(
        self, client: ChecksClient, aioresponses: aioresponses_cls
    ) -> None:
        """Wraps aiohttp errors into ApiError."""
        aioresponses.get(
            f"{REPO_URL}/commits/abc123/check-runs",
            exception=aiohttp.ClientConnectionError("connection refused"),
        )

        with pytest.raises(ApiError, match="connection refused"):
            await client.list_check_runs("abc123")

    async def test_raises_api_error_on_unexpected_body(
        self, client: ChecksClient, aioresponses: aioresponses_cls
    ) -> None:
        """Raises ApiError when the body is not a check runs listing."""
        aioresponses.get(
            f"{REPO_URL}/commits/abc123/check-runs", payload={"message": "?"}
        )

        with pytest.raises(ApiError, match="Unexpected check runs response"):
            await client.list_check_runs("abc123")

    async def test_raises_api_error_on_non_json_body(
        self, client: ChecksClient, aioresponses: aioresponses_cls
    ) -> None:
        """Raises ApiError when a 200 answer carries an HTML error page."""
        aioresponses.get(
            f"{REPO_URL}/commits/abc123/check-runs",
            body="<html>oops</html>",
            content_type="application/json",
        )

        with pytest.raises(ApiError, match="check-runs failed"):
            await client.list_check_runs("abc123")

    async def test_raises_api_error_on_timeout(
        self, client: ChecksClient, aioresponses: aioresponses_cls
    ) -> None:
        """Wraps request timeouts into ApiError."""
        aioresponses.get(
            f"{REPO_URL}/commits/abc123/check-runs", exception=TimeoutError()
        )

        with pytest.raises(ApiError):
            await client.list_check_runs("abc123")


class TestListCheckSuites:
    """Tests for list_check_suites."""

    async def test_returns_check_suites(
        self, client: ChecksClient, aioresponses: aioresponses_cls
    ) -> None:
        """Parses the check suites of the first page."""
        aioresponses.get(
            f"{REPO_URL}/commits/abc123/check-suites",
            payload=check_suites_response(
                check_suites=[check_suite(suite_id=7, status="queued")]
            ),
        )

        suites = await client.list_check_suites("abc123")

        assert len(suites) == 1
        assert suites[0].id == 7
        assert suites[0].status == "queued"


class TestUpdateCheckRun:
    """Tests for update_check_run."""

    async def test_sends_output_with_annotations(
        self, client: ChecksClient, aioresponses: aioresponses_cls
    ) -> None:
        """Patches the check run with name, sha and output."""
        url = f"{REPO_URL}/check-runs/42"
        aioresponses.patch(url, payload=check_run(run_id=42))
        annotations = AnnotationFactory.batch(2)

        await client.update_check_run(
            42,
            name="unit",
            head_sha="abc123",
            title="Result",
            summary="Tests: 1 failed",
            annotations=annotations,
        )

        request = aioresponses.requests[("PATCH", URL(url))][0]
        payload = request.kwargs["json"]
        assert payload["name"] == "unit"
        assert payload["head_sha"] == "abc123"
        assert payload["output"]["title"] == "Result"
        assert payload["output"]["summary"] == "Tests: 1 failed"
        assert payload["output"]["annotations"] == [
            a.model_dump() for a in annotations
        ]

    async def test_raises_api_error_on_rejection(
        self, client: ChecksClient, aioresponses: aioresponses_cls
    ) -> None:
        """Raises ApiError when the update is rejected."""
        aioresponses.patch(
            f"{REPO_URL}/check-runs/42", status=422, body="Validation Failed"
        )

        with pytest.raises(ApiError, match="422") as exc_info:
            await client.update_check_run(
                42,
                name="unit",
                head_sha="abc123",
                title="Result",
                summary="",
                annotations=[],
            )

        assert exc_info.value.status == 422
