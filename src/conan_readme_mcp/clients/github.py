from __future__ import annotations

import base64
import binascii
import logging
import typing as t
from urllib.parse import urlparse

from conan_readme_mcp.errors import PackageReadmeError

from .http import RegistryHttpClient, raise_for_status

logger = logging.getLogger(__name__)


def parse_github_repo(url: str) -> t.Optional[t.Tuple[str, str]]:
    """Return ``(owner, repo)`` for a ``github.com`` URL, else ``None``."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if parsed.hostname != "github.com":
        return None
    parts = [p for p in parsed.path.split("/") if p]
    if len(parts) < 2:
        return None
    repo = parts[1][:-4] if parts[1].endswith(".git") else parts[1]
    if not repo:
        return None
    return parts[0], repo


class GitHubApi(RegistryHttpClient):
    service = "github"
    accept = "application/vnd.github.v3+json"

    def _repo_url(self, owner: str, repo: str) -> str:
        return f"{self._config.github_api_url.rstrip('/')}/repos/{owner}/{repo}"

    async def get_readme_content(self, repository_url: str) -> t.Optional[str]:
        """Fetch and decode a repository README. Every failure degrades to ``None``."""
        repo_info = parse_github_repo(repository_url)
        if repo_info is None:
            logger.debug("Invalid GitHub URL: %s", repository_url)
            return None
        owner, repo = repo_info
        url = f"{self._repo_url(owner, repo)}/readme"
        context = f"README for {owner}/{repo}"
        logger.debug("Fetching README from: %s", url)
        try:
            response = await self._request("GET", url, context)
            if response.status_code == 404:
                logger.debug("README not found for %s/%s", owner, repo)
                return None
            raise_for_status(response, context)
            data = response.json()
        except (PackageReadmeError, ValueError) as exc:
            logger.debug("Failed to fetch README from %s: %s", repository_url, exc)
            return None

        encoding = data.get("encoding") if isinstance(data, dict) else None
        if encoding != "base64":
            logger.warning("Unexpected encoding for README: %s", encoding)
            return None
        try:
            content = base64.b64decode(data.get("content", "")).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            logger.warning("Could not decode README for %s/%s: %s", owner, repo, exc)
            return None
        logger.debug("Fetched README content (%d chars) for %s/%s", len(content), owner, repo)
        return content

    async def repository_exists(self, repository_url: str) -> bool:
        repo_info = parse_github_repo(repository_url)
        if repo_info is None:
            return False
        try:
            response = await self._request("HEAD", self._repo_url(*repo_info), f"repository {repository_url}")
        except PackageReadmeError as exc:
            logger.debug("Failed to check repository existence for %s: %s", repository_url, exc)
            return False
        return response.is_success
