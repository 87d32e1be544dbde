"""Locate the check run of the running job."""

import logging

from jest_annotate_action.errors import NotFoundError
from jest_annotate_action.github.client import ChecksClient
from jest_annotate_action.github.models import CheckRun

log = logging.getLogger(__name__)


async def find_check_run(
    client: ChecksClient, head_sha: str, check_name: str
) -> CheckRun:
    """Find the in-progress check run named `check_name` for a commit.

    Check suites of the commit are listed for diagnostics only.

    Raises:
        NotFoundError: If no in-progress check run matches
        ApiError: If listing check runs or suites fails

    """
    check_runs = await client.list_check_runs(
        head_sha, check_name=check_name, status="in_progress"
    )
    for run in check_runs:
        log.debug(
            "Check run: id=%s name=%r status=%s head_sha=%s",
            run.id,
            run.name,
            run.status,
            run.head_sha,
        )

    for suite in await client.list_check_suites(head_sha):
        log.debug(
            "Check suite: id=%s status=%s conclusion=%s",
            suite.id,
            suite.status,
            suite.conclusion,
        )

    for run in check_runs:
        if (
            run.name == check_name
            and run.head_sha == head_sha
            and run.status == "in_progress"
        ):
            log.info("Found check run %s for %r", run.id, check_name)
            return run

    raise NotFoundError(f"Unable to find check run for action: {check_name}")
