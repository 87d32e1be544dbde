"""CLI entry point for the Jest annotation action."""

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import TextIO

from jest_annotate_action.annotations import build_annotations, build_summary
from jest_annotate_action.check_name import resolve_check_name
from jest_annotate_action.check_run import find_check_run
from jest_annotate_action.config import ActionConfig
from jest_annotate_action.errors import AnnotatorError
from jest_annotate_action.github.client import ChecksClient
from jest_annotate_action.models.report import Report
from jest_annotate_action.publisher import BatchPublisher
from jest_annotate_action.report_decoder import decode_report

log = logging.getLogger("jest_annotate_action")


async def annotate(report: Report, config: ActionConfig) -> str:
    """Publish the failures of a report to the running check run.

    Returns the summary published with the annotations.
    """
    check_name = resolve_check_name(
        config.workflows_dir, config.workflow, config.action
    )

    async with ChecksClient.from_config(config.github_config()) as client:
        check_run = await find_check_run(client, config.sha, check_name)

        annotations = build_annotations(report, config.workspace)
        summary = build_summary(report)
        log.info("Built %d annotation(s)", len(annotations))

        publisher = BatchPublisher(client=client)
        await publisher.publish(
            check_run_id=check_run.id,
            check_name=check_name,
            head_sha=config.sha,
            summary=summary,
            annotations=annotations,
        )

    return summary


async def run(
    stream: TextIO,
    environ: Mapping[str, str],
    *,
    workflows_dir: Path | None = None,
    api_base_url: str | None = None,
) -> int:
    """Run the action and return exit code.

    Exits with 0 only when the report says the test run succeeded. A failed
    test run exits with 1 once its annotations are published.
    """
    try:
        report = decode_report(stream)
        if report.success:
            log.info("Test run succeeded, nothing to annotate")
            return 0

        config = ActionConfig.from_environ(
            environ, workflows_dir=workflows_dir, api_base_url=api_base_url
        )
        summary = await annotate(report, config)
    except AnnotatorError as e:
        log.error("%s", e)
        return 1

    log.error("%s", summary)
    return 1


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Annotate a GitHub check run with Jest failures read from stdin"
    )
    parser.add_argument(
        "--workflows-dir",
        type=Path,
        default=None,
        help="Directory of workflow files (default: .github/workflows)",
    )
    parser.add_argument(
        "--api-base-url",
        default=None,
        help="GitHub API base URL (default: $GITHUB_API_URL or api.github.com)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            sys.stdin,
            os.environ,
            workflows_dir=args.workflows_dir,
            api_base_url=args.api_base_url,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
