"""GitHub Checks API module."""

from jest_annotate_action.github.client import ChecksClient
from jest_annotate_action.github.config import GitHubConfig

__all__ = ["ChecksClient", "GitHubConfig"]
