"""Async clients for the upstream registry APIs."""

from .conan_center import ConanCenterApi
from .github import GitHubApi, parse_github_repo
from .http import RegistryHttpClient, raise_for_status

__all__ = [
    "ConanCenterApi",
    "GitHubApi",
    "RegistryHttpClient",
    "parse_github_repo",
    "raise_for_status",
]
