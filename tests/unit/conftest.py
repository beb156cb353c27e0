"""Shared fixtures and mocks for unit tests."""

from __future__ import annotations

import typing as t
from unittest.mock import AsyncMock

import pytest

from conan_readme_mcp.cache import MemoryCache
from conan_readme_mcp.core.models import RecipeDetails, RecipeInfo, SearchResult
from conan_readme_mcp.core.package_service import PackageService
from conan_readme_mcp.errors import PackageNotFoundError
from conan_readme_mcp.utils.config import ResilienceConfig


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Cache on a fake clock with the production defaults otherwise."""
    return MemoryCache(clock=clock)


@pytest.fixture
def zlib_recipe():
    return RecipeInfo(
        name="zlib",
        latest_version="1.3.1",
        versions=["1.3.1", "1.3", "1.2.13"],
        description="Conan package for zlib",
        homepage="https://github.com/madler/zlib",
    )


@pytest.fixture
def mock_conan_center(zlib_recipe):
    """Mock ConanCenterApi that knows only zlib."""
    api = AsyncMock()

    async def get_recipe_info(package_name: str) -> RecipeInfo:
        if package_name == "zlib":
            return zlib_recipe
        raise PackageNotFoundError(package_name)

    async def get_recipe_details(package_name: str, version: str) -> t.Optional[RecipeDetails]:
        if package_name != "zlib" or version not in zlib_recipe.versions:
            return None
        return RecipeDetails(name="zlib", version=version, requires=["minizip/1.3"], options={"shared": [True, False]})

    api.get_recipe_info = AsyncMock(side_effect=get_recipe_info)
    api.get_recipe_details = AsyncMock(side_effect=get_recipe_details)
    api.search_packages = AsyncMock(
        return_value=([SearchResult(name="zlib", version="unknown", description="Conan package for zlib")], 1)
    )
    api.aclose = AsyncMock(return_value=None)
    return api


@pytest.fixture
def zlib_readme():
    return (
        "# zlib\n\n"
        "A massively spiffy yet delicately unobtrusive compression library.\n\n"
        "## Build with CMake\n\n"
        "Link the imported target from your project:\n\n"
        "```cmake\n"
        "find_package(ZLIB REQUIRED)\n"
        "target_link_libraries(app ZLIB::ZLIB)\n"
        "```\n"
    )


@pytest.fixture
def mock_github(zlib_readme):
    api = AsyncMock()
    api.get_readme_content = AsyncMock(return_value=zlib_readme)
    api.aclose = AsyncMock(return_value=None)
    return api


@pytest.fixture
def no_retry_resilience():
    """Single attempt, no breaker: failures surface immediately."""
    return ResilienceConfig(circuit_breaker_enabled=False, retry_max_attempts=1, retry_base_delay_seconds=0.0)


@pytest.fixture
def service(cache, mock_conan_center, mock_github, no_retry_resilience):
    return PackageService(
        cache=cache,
        conan_center=mock_conan_center,
        github=mock_github,
        resilience=no_retry_resilience,
    )
