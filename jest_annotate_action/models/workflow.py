"""Models for GitHub Actions workflow files."""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import Field, model_validator

from jest_annotate_action.models.base import Model


class Step(Model):
    """A single step of a job. Only the action reference is of interest."""

    uses: str | None = None


class Job(Model):
    """A job declared under the `jobs` mapping of a workflow."""

    key: str = Field(..., description="Key the job is declared under")
    name: str | None = Field(default=None, description="Optional display name")
    steps: Sequence[Step] = Field(default_factory=list)

    @property
    def check_name(self) -> str:
        """Name GitHub gives the check run of this job."""
        return self.name or self.key


class WorkflowDefinition(Model):
    """A workflow file reduced to its name and jobs."""

    name: str = ""
    jobs: Mapping[str, Job] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _inject_job_keys(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        # YAML 1.1 loads the `on` trigger key as the boolean True
        data = {str(key): value for key, value in data.items()}
        jobs = data.get("jobs")
        if not isinstance(jobs, Mapping):
            return data
        data["jobs"] = {
            str(key): {**job, "key": str(key)} if isinstance(job, Mapping) else job
            for key, job in jobs.items()
        }
        return data

    def sorted_jobs(self) -> Sequence[Job]:
        """Jobs in lexicographic order of their keys."""
        return [self.jobs[key] for key in sorted(self.jobs)]
