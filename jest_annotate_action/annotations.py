"""Turn a Jest report into check run annotations and a summary."""

from collections.abc import Mapping, Sequence
from typing import Literal

from jest_annotate_action.models.base import Model
from jest_annotate_action.models.report import AssertionResult, Report

PASSED = "passed"
SUITE_ERROR_TITLE = "Test Suite Error"
MESSAGE_SEPARATOR = "\n\n"

# Known ambiguity: the "Test Suites" line reads the per-test counters and the
# "Tests" line reads the per-suite counters. Kept as-is until confirmed.
SUMMARY_COUNT_FIELDS: Mapping[str, tuple[str, str, str]] = {
    "Test Suites": ("num_failed_tests", "num_passed_tests", "num_total_tests"),
    "Tests": (
        "num_failed_test_suites",
        "num_passed_test_suites",
        "num_total_test_suites",
    ),
}


class Annotation(Model):
    """A single line annotation, shaped like the Checks API expects it."""

    path: str
    start_line: int
    end_line: int
    annotation_level: Literal["failure"] = "failure"
    title: str
    message: str


def relative_path(file_path: str, workspace: str) -> str:
    """Strip the workspace root from an absolute file path."""
    return file_path.removeprefix(workspace.rstrip("/") + "/")


def assertion_annotation(path: str, assertion: AssertionResult) -> Annotation:
    """Annotate a failed assertion at its source line."""
    line = assertion.location.line if assertion.location else 0
    # Jest omits locations unless --testLocationInResults is set
    line = max(line, 1)
    messages = assertion.failure_messages or [assertion.full_name]
    return Annotation(
        path=path,
        start_line=line,
        end_line=line,
        title=assertion.full_name,
        message=MESSAGE_SEPARATOR.join(messages),
    )


def build_annotations(report: Report, workspace: str) -> Sequence[Annotation]:
    """Build annotations for every failure in the report, in report order.

    Suites that failed without producing any assertion (syntax errors,
    failing imports) get a single annotation on their first line.
    """
    annotations: list[Annotation] = []
    for test_result in report.test_results:
        if test_result.status == PASSED:
            continue

        path = relative_path(test_result.file_path, workspace)

        if not test_result.assertion_results:
            annotations.append(
                Annotation(
                    path=path,
                    start_line=1,
                    end_line=1,
                    title=SUITE_ERROR_TITLE,
                    message=test_result.message,
                )
            )
            continue

        annotations.extend(
            assertion_annotation(path, assertion)
            for assertion in test_result.assertion_results
            if assertion.status != PASSED
        )

    return annotations


def build_summary(report: Report) -> str:
    """Two line summary of failed, passed and total counts."""
    return "\n".join(
        "{}: {} failed, {} passed, {} total".format(
            label, *(getattr(report, field) for field in fields)
        )
        for label, fields in SUMMARY_COUNT_FIELDS.items()
    )
