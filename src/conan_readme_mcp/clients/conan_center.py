from __future__ import annotations

import logging
import re
import typing as t
from urllib.parse import quote

from conan_readme_mcp.core.models import RecipeDetails, RecipeInfo, SearchResult
from conan_readme_mcp.errors import PackageNotFoundError, PackageReadmeError

from .http import RegistryHttpClient, raise_for_status

logger = logging.getLogger(__name__)

VERSION_DIR_PATTERN = re.compile(r"^\d+\.\d+")


def _version_key(version: str) -> t.Tuple[int, ...]:
    parts = []
    for piece in re.split(r"[.\-_+]", version):
        match = re.match(r"\d+", piece)
        if match is None:
            break
        parts.append(int(match.group()))
    return tuple(parts)


def latest_version(versions: t.Iterable[str]) -> str:
    candidates = [v for v in versions if VERSION_DIR_PATTERN.match(v)]
    if not candidates:
        return "unknown"
    return max(candidates, key=_version_key)


class ConanCenterApi(RegistryHttpClient):
    """Reads recipes from the conan-center-index repository via the GitHub contents API.

    The index stores one ``recipes/<name>/`` folder per package; version
    folders inside it carry no metadata, so description, license and author
    are placeholders.
    """

    service = "conan-center"

    @property
    def _base(self) -> str:
        return self._config.index_repo_api_url

    async def _list_dirs(self, url: str, context: str) -> t.List[str]:
        entries = await self._get_json(url, context)
        if not isinstance(entries, list):
            raise PackageReadmeError(f"Unexpected directory listing from {context}")
        return [e["name"] for e in entries if isinstance(e, dict) and e.get("type") == "dir" and "name" in e]

    async def search_packages(self, query: str, limit: int = 20) -> t.Tuple[t.List[SearchResult], int]:
        """Return recipes whose name contains ``query`` (case-insensitive), capped at ``limit``."""
        url = f"{self._base}/contents/recipes"
        logger.debug("Searching packages in Conan Center Index: %s", url)
        folders = await self._list_dirs(url, "Conan Center search")
        needle = query.lower()
        results = [
            SearchResult(
                name=name,
                version="unknown",
                description=f"Conan package for {name}",
                author="Conan Center",
                license="Unknown",
                homepage="",
            )
            for name in folders
            if needle in name.lower()
        ][:limit]
        logger.debug("Found %d packages for query: %s", len(results), query)
        return results, len(results)

    async def get_recipe_info(self, package_name: str) -> RecipeInfo:
        context = f"Conan Center recipe for {package_name}"
        url = f"{self._base}/contents/recipes/{quote(package_name, safe='')}"
        logger.debug("Fetching recipe info: %s", url)
        response = await self._request("GET", url, context)
        if response.status_code == 404:
            raise PackageNotFoundError(package_name)
        raise_for_status(response, context)
        try:
            entries = response.json()
        except ValueError as exc:
            raise PackageReadmeError(f"Invalid JSON from {context}") from exc
        if not isinstance(entries, list):
            raise PackageReadmeError(f"Unexpected directory listing from {context}")
        versions = [
            e["name"]
            for e in entries
            if isinstance(e, dict) and e.get("type") == "dir" and VERSION_DIR_PATTERN.match(e.get("name", ""))
        ]
        return RecipeInfo(
            name=package_name,
            latest_version=latest_version(versions),
            versions=sorted(versions, key=_version_key, reverse=True),
            description=f"Conan package for {package_name}",
        )

    async def get_recipe_details(self, package_name: str, version: str) -> t.Optional[RecipeDetails]:
        try:
            info = await self.get_recipe_info(package_name)
        except PackageReadmeError as exc:
            logger.debug("Failed to get recipe details for %s@%s: %s", package_name, version, exc)
            return None
        if version not in info.versions:
            return None
        # requires/options live in conanfile.py, which is not parsed
        return RecipeDetails(
            name=info.name,
            version=version,
            description=info.description,
            license=info.license,
            author=info.author,
            topics=list(info.topics),
            homepage=info.homepage or None,
        )

    async def get_available_versions(self, package_name: str) -> t.List[str]:
        info = await self.get_recipe_info(package_name)
        return sorted(info.versions)
