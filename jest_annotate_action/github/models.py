"""Pydantic models for GitHub Checks API responses."""

from collections.abc import Sequence
from typing import Literal, TypeAlias

from pydantic import BaseModel

CheckStatus: TypeAlias = Literal[
    "queued", "in_progress", "completed", "waiting", "requested", "pending"
]


class CheckRun(BaseModel):
    """A check run from the Checks API."""

    id: int
    name: str
    head_sha: str
    status: CheckStatus
    conclusion: str | None = None
    html_url: str | None = None


class CheckRunsResponse(BaseModel):
    """Response from list check runs for a ref API."""

    total_count: int
    check_runs: Sequence[CheckRun]


class CheckSuite(BaseModel):
    """A check suite from the Checks API."""

    id: int
    head_sha: str
    status: CheckStatus | None = None
    conclusion: str | None = None


class CheckSuitesResponse(BaseModel):
    """Response from list check suites for a ref API."""

    total_count: int
    check_suites: Sequence[CheckSuite]
