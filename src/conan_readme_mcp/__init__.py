"""conan_readme_mcp

An MCP server that answers package questions about ConanCenter recipes,
with an in-process TTL + LRU cache in front of the upstream APIs.
"""

__version__ = "0.1.0"

from .cache import MemoryCache
from .clients import ConanCenterApi, GitHubApi
from .core.models import (
    PackageInfoResponse,
    PackageReadmeResponse,
    SearchPackagesResponse,
    UsageExample,
)
from .core.package_service import PackageService
from .errors import (
    ErrorKind,
    NetworkError,
    PackageNotFoundError,
    PackageReadmeError,
    RateLimitError,
    ServiceUnavailableError,
    UpstreamError,
    ValidationError,
    VersionNotFoundError,
)
from .parsing import ReadmeParser
from .utils.config import ServerConfig

__all__ = [
    "MemoryCache",
    "PackageService",
    "ConanCenterApi",
    "GitHubApi",
    "ReadmeParser",
    "ServerConfig",
    "PackageInfoResponse",
    "PackageReadmeResponse",
    "SearchPackagesResponse",
    "UsageExample",
    "ErrorKind",
    "PackageReadmeError",
    "ValidationError",
    "PackageNotFoundError",
    "VersionNotFoundError",
    "RateLimitError",
    "ServiceUnavailableError",
    "NetworkError",
    "UpstreamError",
]
