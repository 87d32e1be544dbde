"""Resolve the name of the check run this action is executing in.

GitHub does not expose the job name to a running step, only the workflow
name (`GITHUB_WORKFLOW`) and a step identifier (`GITHUB_ACTION`, e.g.
`run2` for the second step without an `id`). The job is recovered by
scanning the workflow files for a job whose step at that position uses the
local action.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

import yaml
from pydantic import ValidationError

from jest_annotate_action.errors import NotFoundError, ParseError, ReadError
from jest_annotate_action.models.workflow import WorkflowDefinition

log = logging.getLogger(__name__)

STEP_TOKEN_PREFIX = "run"
LOCAL_ACTION_PREFIX = "./.github/action"
WORKFLOW_SUFFIXES = frozenset([".yml", ".yaml"])


def parse_step_index(token: str) -> int:
    """Convert a step token such as `run1` into a zero-based step index.

    Raises:
        ParseError: If the token lacks the prefix or carries no positive integer

    """
    if not token.startswith(STEP_TOKEN_PREFIX):
        raise ParseError(f"Invalid step token '{token}'")

    digits = token.removeprefix(STEP_TOKEN_PREFIX)
    if not digits.isdecimal():
        raise ParseError(f"Invalid step token '{token}'")

    index = int(digits)
    if index < 1:
        raise ParseError(f"Invalid step token '{token}': index must be positive")

    return index - 1


def list_workflow_files(directory: Path) -> Sequence[Path]:
    """List workflow files in a directory, sorted by file name.

    Raises:
        ReadError: If the directory cannot be listed

    """
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        raise ReadError(f"Cannot list workflow directory {directory}: {e}") from e

    return sorted(
        (
            entry
            for entry in entries
            if entry.suffix in WORKFLOW_SUFFIXES and entry.is_file()
        ),
        key=lambda entry: entry.name,
    )


def load_workflow(path: Path) -> WorkflowDefinition:
    """Load and validate a single workflow file.

    Raises:
        ReadError: If the file cannot be read
        ParseError: If the file is not valid YAML or not a workflow

    """
    try:
        content = path.read_text()
    except OSError as e:
        raise ReadError(f"Cannot read workflow file {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        raise ParseError(f"Empty workflow file: {path}")

    try:
        return WorkflowDefinition.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"Invalid workflow schema in {path}: {e}") from e


def find_check_name(
    workflow: WorkflowDefinition, step_index: int
) -> str | None:
    """Return the check name of the first job running the local action."""
    for job in workflow.sorted_jobs():
        if step_index >= len(job.steps):
            continue

        uses = job.steps[step_index].uses
        if uses is None:
            continue

        if uses.startswith(LOCAL_ACTION_PREFIX):
            return job.check_name

    return None


def resolve_check_name(
    workflows_dir: Path, workflow_name: str, action_token: str
) -> str:
    """Resolve the check name for the running step.

    Args:
        workflows_dir: Directory holding the workflow files
        workflow_name: Display name of the running workflow (GITHUB_WORKFLOW)
        action_token: Step identifier of the running step (GITHUB_ACTION)

    Returns:
        Name of the check run the step belongs to

    Raises:
        ParseError: If the token or a workflow file is malformed
        ReadError: If the workflow directory or a file cannot be read
        NotFoundError: If no job runs the local action at that step

    """
    step_index = parse_step_index(action_token)

    for path in list_workflow_files(workflows_dir):
        workflow = load_workflow(path)
        if workflow.name != workflow_name:
            log.debug("Skipping workflow %s (name=%r)", path.name, workflow.name)
            continue

        if (check_name := find_check_name(workflow, step_index)) is not None:
            log.info("Resolved check name %r from %s", check_name, path.name)
            return check_name

    raise NotFoundError(
        f"Could not find check name for workflow '{workflow_name}' "
        f"at step {step_index + 1}"
    )
