from __future__ import annotations

import logging
import typing as t

from conan_readme_mcp.cache import (
    MemoryCache,
    package_info_key,
    package_readme_key,
    recipe_details_key,
    search_key,
)
from conan_readme_mcp.clients import ConanCenterApi, GitHubApi
from conan_readme_mcp.errors import PackageNotFoundError, VersionNotFoundError
from conan_readme_mcp.monitoring.metrics import cache_lookups_total
from conan_readme_mcp.parsing import ReadmeParser
from conan_readme_mcp.utils.config import ResilienceConfig, TTLPolicy
from conan_readme_mcp.utils.resilience import CircuitBreaker, CircuitBreakerConfig, with_retries
from conan_readme_mcp.validation import (
    validate_boolean,
    validate_limit,
    validate_package_name,
    validate_search_query,
    validate_version,
)

from .models import (
    JSON,
    InstallationInfo,
    PackageBasicInfo,
    PackageInfoResponse,
    PackageReadmeResponse,
    RecipeInfo,
    RepositoryInfo,
    SearchPackagesResponse,
    UsageExample,
)

logger = logging.getLogger(__name__)

T = t.TypeVar("T")


def build_basic_readme(package_name: str, version: str, description: str) -> str:
    return f"""# {package_name}

{description}

## Installation

Add the following to your conanfile.txt:

```
[requires]
{package_name}/{version}@
```

Or use the command line:

```bash
conan install --requires={package_name}/{version}@
```

## CMake Integration

```cmake
find_package({package_name} REQUIRED)
target_link_libraries(your_target {package_name}::{package_name})
```

## Usage

Refer to the package documentation for detailed usage instructions.
"""


class PackageService:
    """Read-through cache in front of ConanCenter and GitHub.

    Each operation validates its arguments, answers from the cache when it
    can, and otherwise calls upstream through the circuit breaker and retry
    policy before storing the shaped result. Not-found packages come back as
    ``exists: False`` responses cached with the short negative TTL.
    """

    def __init__(
        self,
        cache: MemoryCache,
        conan_center: ConanCenterApi,
        github: GitHubApi,
        ttl: t.Optional[TTLPolicy] = None,
        readme_parser: t.Optional[ReadmeParser] = None,
        resilience: t.Optional[ResilienceConfig] = None,
        circuit_breaker: t.Optional[CircuitBreaker] = None,
    ) -> None:
        self._cache = cache
        self._conan_center = conan_center
        self._github = github
        self._ttl = ttl or TTLPolicy()
        self._parser = readme_parser or ReadmeParser()
        self._resilience = resilience or ResilienceConfig()
        if circuit_breaker is not None:
            self._breaker: t.Optional[CircuitBreaker] = circuit_breaker
        elif self._resilience.circuit_breaker_enabled:
            self._breaker = CircuitBreaker(
                CircuitBreakerConfig(
                    failure_threshold=self._resilience.failure_threshold,
                    reset_timeout_seconds=self._resilience.reset_timeout_seconds,
                ),
                name="conan-center",
            )
        else:
            self._breaker = None

    @property
    def cache(self) -> MemoryCache:
        return self._cache

    async def close(self) -> None:
        await self._conan_center.aclose()
        await self._github.aclose()

    async def _call_upstream(self, fn: t.Callable[[], t.Awaitable[T]], context: str) -> T:
        def retried() -> t.Awaitable[T]:
            return with_retries(
                fn,
                attempts=self._resilience.retry_max_attempts,
                base_delay=self._resilience.retry_base_delay_seconds,
                context=context,
            )

        if self._breaker is None:
            return await retried()
        return await self._breaker.run(retried)

    def _cached(self, namespace: str, key: str) -> t.Optional[JSON]:
        cached = self._cache.get(key)
        cache_lookups_total.inc(namespace=namespace, result="miss" if cached is None else "hit")
        return cached

    async def _fetch_recipe(self, package_name: str) -> t.Optional[RecipeInfo]:
        """Recipe info, or ``None`` when ConanCenter has no such package."""
        try:
            return await self._call_upstream(
                lambda: self._conan_center.get_recipe_info(package_name),
                context=f"recipe lookup for {package_name}",
            )
        except PackageNotFoundError:
            logger.debug("Package not found: %s", package_name)
            return None

    async def _fetch_details(self, package_name: str, version: str) -> t.Optional[JSON]:
        key = recipe_details_key(package_name, version)
        cached = self._cached("recipe_details", key)
        if cached is not None:
            return cached
        details = await self._conan_center.get_recipe_details(package_name, version)
        if details is None:
            return None
        data = details.to_dict()
        self._cache.set(key, data, self._ttl.package_info)
        return data

    async def get_package_info(
        self,
        package_name: t.Any,
        include_dependencies: t.Any = None,
        include_options: t.Any = None,
    ) -> JSON:
        name = validate_package_name(package_name)
        with_dependencies = validate_boolean(include_dependencies, "include_dependencies", True)
        with_options = validate_boolean(include_options, "include_options", False)

        key = package_info_key(name, "latest")
        cached = self._cached("package_info", key)
        if cached is not None:
            logger.debug("Using cached info for %s", name)
            return cached

        recipe = await self._fetch_recipe(name)
        if recipe is None:
            missing = PackageInfoResponse.missing(name).to_dict()
            self._cache.set(key, missing, self._ttl.negative)
            return missing

        dependencies = None
        options = None
        if with_dependencies or with_options:
            details = await self._fetch_details(name, recipe.latest_version)
            if details is not None:
                dependencies = details.get("requires") if with_dependencies else None
                options = details.get("options") if with_options else None

        result = PackageInfoResponse(
            package_name=name,
            latest_version=recipe.latest_version,
            description=recipe.description,
            author=recipe.author,
            license=recipe.license,
            topics=list(recipe.topics),
            exists=True,
            dependencies=dependencies,
            options=options,
            repository=RepositoryInfo(url=recipe.homepage) if recipe.homepage else None,
        ).to_dict()
        self._cache.set(key, result, self._ttl.package_info)
        logger.info("Successfully retrieved info for %s", name)
        return result

    async def get_package_readme(
        self,
        package_name: t.Any,
        version: t.Any = None,
        include_examples: t.Any = None,
    ) -> JSON:
        name = validate_package_name(package_name)
        requested_version = validate_version(version) or "latest"
        with_examples = validate_boolean(include_examples, "include_examples", True)

        key = package_readme_key(name, requested_version)
        cached = self._cached("package_readme", key)
        if cached is not None:
            logger.debug("Using cached README for %s@%s", name, requested_version)
            return cached

        recipe = await self._fetch_recipe(name)
        if recipe is None:
            missing = PackageReadmeResponse.missing(name, requested_version).to_dict()
            self._cache.set(key, missing, self._ttl.negative)
            return missing

        if requested_version == "latest":
            actual_version = recipe.latest_version
        elif requested_version in recipe.versions:
            actual_version = requested_version
        else:
            raise VersionNotFoundError(name, requested_version)

        readme_content = ""
        if recipe.homepage:
            readme_content = await self._github.get_readme_content(recipe.homepage) or ""
        if not readme_content:
            readme_content = build_basic_readme(name, actual_version, recipe.description)

        usage_examples: t.List[UsageExample] = []
        if with_examples:
            usage_examples = self._parser.parse_usage_examples(readme_content)

        result = PackageReadmeResponse(
            package_name=name,
            version=actual_version,
            description=recipe.description,
            readme_content=readme_content,
            usage_examples=usage_examples,
            installation=InstallationInfo.for_package(name, actual_version),
            basic_info=PackageBasicInfo(
                name=name,
                version=actual_version,
                description=recipe.description,
                license=recipe.license,
                author=recipe.author,
                topics=list(recipe.topics),
                homepage=recipe.homepage or None,
            ),
            exists=True,
            repository=RepositoryInfo(url=recipe.homepage) if recipe.homepage else None,
        ).to_dict()
        self._cache.set(key, result, self._ttl.package_readme)
        logger.info("Successfully retrieved README for %s@%s", name, actual_version)
        return result

    async def search_packages(self, query: t.Any, limit: t.Any = None) -> JSON:
        cleaned_query = validate_search_query(query)
        max_results = validate_limit(limit)

        key = search_key(cleaned_query, max_results)
        cached = self._cached("search", key)
        if cached is not None:
            logger.debug("Using cached search results for: %s", cleaned_query)
            return cached

        packages, total = await self._call_upstream(
            lambda: self._conan_center.search_packages(cleaned_query, max_results),
            context=f"search for {cleaned_query!r}",
        )
        result = SearchPackagesResponse(query=cleaned_query, total=total, packages=packages).to_dict()
        self._cache.set(key, result, self._ttl.search)
        logger.info('Found %d packages for query: "%s"', len(packages), cleaned_query)
        return result
