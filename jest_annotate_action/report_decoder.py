"""Decode the Jest JSON report from a text stream."""

import logging
from typing import TextIO

from pydantic import ValidationError

from jest_annotate_action.errors import DecodeError
from jest_annotate_action.models.report import Report

log = logging.getLogger(__name__)


def decode_report(stream: TextIO) -> Report:
    """Read the whole stream and validate it as a Jest report.

    Raises:
        DecodeError: If the payload is not UTF-8 JSON or not shaped like a report

    """
    try:
        report = Report.model_validate_json(stream.read())
    except (UnicodeDecodeError, ValidationError) as e:
        raise DecodeError(f"Invalid test report: {e}") from e

    log.debug(
        "Decoded report: success=%s, suites=%d, tests=%d",
        report.success,
        len(report.test_results),
        report.num_total_tests,
    )
    return report
