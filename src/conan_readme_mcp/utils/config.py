from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from conan_readme_mcp import __version__


@dataclass
class CacheConfig:
    default_ttl_seconds: float = 3600.0
    max_size_bytes: int = 100 * 1024 * 1024
    cleanup_interval_seconds: float = 300.0


@dataclass
class TTLPolicy:
    """Per-result-type lifetimes. Negative results must stay shorter than positive ones."""

    package_info: float = 1800.0
    package_readme: float = 3600.0
    search: float = 900.0
    negative: float = 300.0


@dataclass
class HttpConfig:
    timeout_seconds: float = 10.0
    user_agent: str = f"conan-readme-mcp/{__version__}"
    github_api_url: str = "https://api.github.com"
    index_repo: str = "conan-io/conan-center-index"

    @property
    def index_repo_api_url(self) -> str:
        return f"{self.github_api_url.rstrip('/')}/repos/{self.index_repo}"


@dataclass
class ResilienceConfig:
    circuit_breaker_enabled: bool = True
    failure_threshold: int = 5
    reset_timeout_seconds: float = 30.0
    retry_max_attempts: int = 3
    retry_base_delay_seconds: float = 1.0


@dataclass
class ServerConfig:
    name: str = "conan-package-readme"
    version: str = __version__
    log_level: str = "WARNING"
    transport: str = "stdio"  # stdio | streamable-http
    host: str = "127.0.0.1"
    port: int = 3000
    cache: CacheConfig = dataclasses.field(default_factory=CacheConfig)
    ttl: TTLPolicy = dataclasses.field(default_factory=TTLPolicy)
    http: HttpConfig = dataclasses.field(default_factory=HttpConfig)
    resilience: ResilienceConfig = dataclasses.field(default_factory=ResilienceConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServerConfig":
        def build(dc_cls, key):
            values = data.get(key, {})
            return dc_cls(**values)

        top_level = {
            f.name: data[f.name]
            for f in dataclasses.fields(cls)
            if f.name in data and f.name not in {"cache", "ttl", "http", "resilience"}
        }
        return cls(
            **top_level,
            cache=build(CacheConfig, "cache"),
            ttl=build(TTLPolicy, "ttl"),
            http=build(HttpConfig, "http"),
            resilience=build(ResilienceConfig, "resilience"),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """Build from ``CONAN_MCP_*`` variables, e.g. ``CONAN_MCP_CACHE_MAX_SIZE_BYTES``."""
        env = os.environ if environ is None else environ
        data: Dict[str, Any] = {}
        sections = {"cache": CacheConfig, "ttl": TTLPolicy, "http": HttpConfig, "resilience": ResilienceConfig}
        for f in dataclasses.fields(cls):
            if f.name in sections:
                continue
            raw = env.get(f"CONAN_MCP_{f.name.upper()}")
            if raw is not None:
                data[f.name] = _coerce(raw, getattr(cls(), f.name))
        for section, dc_cls in sections.items():
            defaults = dc_cls()
            values: Dict[str, Any] = {}
            for f in dataclasses.fields(dc_cls):
                raw = env.get(f"CONAN_MCP_{section.upper()}_{f.name.upper()}")
                if raw is not None:
                    values[f.name] = _coerce(raw, getattr(defaults, f.name))
            data[section] = values
        return cls.from_dict(data)


def _coerce(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        return raw.strip().lower() in {"1", "true", "yes", "on"}
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw
