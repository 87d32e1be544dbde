"""Models for the Jest JSON report read from standard input."""

from collections.abc import Sequence
from typing import Any

from pydantic import Field, field_validator

from jest_annotate_action.models.base import JestModel


class Location(JestModel):
    """Source position of an assertion."""

    line: int = 0
    column: int = 0


class AssertionResult(JestModel):
    """Result of a single `it`/`test` block."""

    ancestor_titles: Sequence[str] = Field(default_factory=list)
    title: str = ""
    full_name: str = ""
    status: str
    location: Location | None = Field(
        default=None,
        description="Only present when Jest runs with --testLocationInResults",
    )
    failure_messages: Sequence[str] = Field(default_factory=list)

    @field_validator("ancestor_titles", "failure_messages", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class TestResult(JestModel):
    """Aggregate result of one test file (suite)."""

    __test__ = False

    file_path: str = Field(..., alias="name")
    status: str
    message: str = ""
    summary: str = ""
    assertion_results: Sequence[AssertionResult] = Field(default_factory=list)

    @field_validator("message", "summary", mode="before")
    @classmethod
    def _null_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("assertion_results", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class Report(JestModel):
    """Top level document produced by `jest --json`."""

    num_failed_tests: int = 0
    num_passed_tests: int = 0
    num_total_tests: int = 0
    num_failed_test_suites: int = 0
    num_passed_test_suites: int = 0
    num_total_test_suites: int = 0
    success: bool
    test_results: Sequence[TestResult] = Field(default_factory=list)
