"""Client for the GitHub Checks API."""

import logging
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from pydantic import ValidationError

from jest_annotate_action.annotations import Annotation
from jest_annotate_action.errors import ApiError
from jest_annotate_action.github.config import GitHubConfig
from jest_annotate_action.github.models import (
    CheckRun,
    CheckRunsResponse,
    CheckSuite,
    CheckSuitesResponse,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ChecksClient:
    """Thin wrapper over the three Checks API endpoints the action needs.

    Only the first page of list results is read.
    """

    config: GitHubConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: GitHubConfig
    ) -> AsyncGenerator["ChecksClient", None]:
        """Create client with managed session lifecycle."""
        headers = {
            "Authorization": f"Bearer {config.token.get_secret_value()}",
            "Accept": "application/vnd.github+json",
        }
        async with aiohttp.ClientSession(
            base_url=config.api_base_url,
            headers=headers,
        ) as session:
            yield cls(config=config, session=session)

    @property
    def repo_path(self) -> str:
        """API path prefix of the configured repository."""
        return f"/repos/{self.config.owner}/{self.config.repo}"

    async def list_check_runs(
        self,
        ref: str,
        *,
        check_name: str | None = None,
        status: str | None = None,
    ) -> Sequence[CheckRun]:
        """List check runs for a commit ref, optionally filtered server side."""
        params: dict[str, str] = {}
        if check_name is not None:
            params["check_name"] = check_name
        if status is not None:
            params["status"] = status

        data = await self._request(
            "GET", f"{self.repo_path}/commits/{ref}/check-runs", params=params
        )
        try:
            return CheckRunsResponse.model_validate(data).check_runs
        except ValidationError as e:
            raise ApiError(f"Unexpected check runs response: {e}") from e

    async def list_check_suites(self, ref: str) -> Sequence[CheckSuite]:
        """List check suites for a commit ref."""
        data = await self._request(
            "GET", f"{self.repo_path}/commits/{ref}/check-suites"
        )
        try:
            return CheckSuitesResponse.model_validate(data).check_suites
        except ValidationError as e:
            raise ApiError(f"Unexpected check suites response: {e}") from e

    async def update_check_run(
        self,
        check_run_id: int,
        *,
        name: str,
        head_sha: str,
        title: str,
        summary: str,
        annotations: Sequence[Annotation],
    ) -> None:
        """Update a check run's output with a batch of annotations."""
        payload = {
            "name": name,
            "head_sha": head_sha,
            "output": {
                "title": title,
                "summary": summary,
                "annotations": [a.model_dump() for a in annotations],
            },
        }
        await self._request(
            "PATCH", f"{self.repo_path}/check-runs/{check_run_id}", json=payload
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Mapping[str, Any] | None = None,
    ) -> Any:
        log.debug("%s %s params=%s", method, url, params)
        try:
            async with self.session.request(
                method, url, params=params, json=json
            ) as response:
                if response.status != 200:
                    text = await response.text()
                    raise ApiError(
                        f"{method} {url} failed: {response.status} {text}",
                        status=response.status,
                    )
                return await response.json()
        except (aiohttp.ClientError, ValueError, TimeoutError) as e:
            raise ApiError(f"{method} {url} failed: {e}") from e
