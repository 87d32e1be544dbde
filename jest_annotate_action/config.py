"""Execution context of the action, read once from the environment."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import Field, SecretStr, ValidationError

from jest_annotate_action.errors import ConfigError
from jest_annotate_action.github.config import GitHubConfig
from jest_annotate_action.models.base import Model

ENVIRONMENT_FIELDS: Mapping[str, str] = {
    "token": "GITHUB_TOKEN",
    "sha": "GITHUB_SHA",
    "repository": "GITHUB_REPOSITORY",
    "workspace": "GITHUB_WORKSPACE",
    "workflow": "GITHUB_WORKFLOW",
    "action": "GITHUB_ACTION",
    "api_base_url": "GITHUB_API_URL",
}


class ActionConfig(Model):
    """Everything the action needs to know about the run it is part of."""

    token: SecretStr
    sha: str = Field(..., min_length=1)
    repository: str = Field(..., pattern=r"^[^/]+/[^/]+$")
    workspace: str
    workflow: str
    action: str
    workflows_dir: Path = Path(".github/workflows")
    api_base_url: str = "https://api.github.com"

    @property
    def owner(self) -> str:
        """Repository owner."""
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        """Repository name without owner."""
        return self.repository.split("/", 1)[1]

    @classmethod
    def from_environ(
        cls, environ: Mapping[str, str], **overrides: Any
    ) -> "ActionConfig":
        """Build the configuration from environment variables.

        Unset variables fall back to field defaults; `overrides` (e.g. from
        command line options) take precedence over the environment.

        Raises:
            ConfigError: If a required variable is missing or invalid

        """
        values: dict[str, Any] = {
            field: environ[variable]
            for field, variable in ENVIRONMENT_FIELDS.items()
            if variable in environ
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            invalid = sorted(
                ENVIRONMENT_FIELDS.get(str(error["loc"][0]), str(error["loc"][0]))
                for error in e.errors()
            )
            raise ConfigError(
                f"Invalid or missing configuration: {', '.join(invalid)}"
            ) from e

    def github_config(self) -> GitHubConfig:
        """Configuration for the Checks API client."""
        return GitHubConfig(
            token=self.token,
            owner=self.owner,
            repo=self.repo,
            api_base_url=self.api_base_url,
        )
