from __future__ import annotations

import typing as t
from dataclasses import asdict, dataclass, field

JSON = t.Dict[str, t.Any]


def _drop_none(data: JSON) -> JSON:
    return {key: value for key, value in data.items() if value is not None}


class _Record:
    """Mixin giving dataclasses a JSON-ready ``to_dict`` that omits unset optionals."""

    def to_dict(self) -> JSON:
        return asdict(self, dict_factory=lambda items: _drop_none(dict(items)))


@dataclass
class UsageExample(_Record):
    title: str
    code: str
    language: str
    description: t.Optional[str] = None


@dataclass
class InstallationInfo(_Record):
    conan: str
    cmake: t.Optional[str] = None

    @classmethod
    def for_package(cls, package_name: str, version: str) -> "InstallationInfo":
        return cls(
            conan=f"conan install --requires={package_name}/{version}@",
            cmake=f"find_package({package_name} REQUIRED)",
        )


@dataclass
class RepositoryInfo(_Record):
    url: str
    type: str = "git"


@dataclass
class PackageBasicInfo(_Record):
    name: str
    version: str
    description: str = ""
    license: str = ""
    author: str = ""
    topics: t.List[str] = field(default_factory=list)
    homepage: t.Optional[str] = None


# Upstream records


@dataclass
class RecipeInfo(_Record):
    name: str
    latest_version: str
    versions: t.List[str] = field(default_factory=list)
    description: str = ""
    license: str = "Unknown"
    author: str = "Conan Center"
    topics: t.List[str] = field(default_factory=list)
    homepage: str = ""


@dataclass
class RecipeDetails(_Record):
    name: str
    version: str
    description: str = ""
    license: str = ""
    author: str = ""
    topics: t.List[str] = field(default_factory=list)
    homepage: t.Optional[str] = None
    requires: t.Optional[t.List[str]] = None
    options: t.Optional[t.Dict[str, t.Any]] = None


@dataclass
class SearchResult(_Record):
    name: str
    version: str
    description: str = ""
    topics: t.List[str] = field(default_factory=list)
    author: str = ""
    license: str = ""
    homepage: t.Optional[str] = None


# Tool responses


@dataclass
class PackageInfoResponse(_Record):
    package_name: str
    latest_version: str
    description: str
    author: str
    license: str
    topics: t.List[str]
    exists: bool
    dependencies: t.Optional[t.List[str]] = None
    options: t.Optional[t.Dict[str, t.Any]] = None
    repository: t.Optional[RepositoryInfo] = None

    @classmethod
    def missing(cls, package_name: str) -> "PackageInfoResponse":
        return cls(
            package_name=package_name,
            latest_version="",
            description="",
            author="",
            license="",
            topics=[],
            exists=False,
        )


@dataclass
class PackageReadmeResponse(_Record):
    package_name: str
    version: str
    description: str
    readme_content: str
    usage_examples: t.List[UsageExample]
    installation: InstallationInfo
    basic_info: PackageBasicInfo
    exists: bool
    repository: t.Optional[RepositoryInfo] = None

    @classmethod
    def missing(cls, package_name: str, version: str) -> "PackageReadmeResponse":
        return cls(
            package_name=package_name,
            version=version,
            description="",
            readme_content="",
            usage_examples=[],
            installation=InstallationInfo.for_package(package_name, version),
            basic_info=PackageBasicInfo(name=package_name, version=version),
            exists=False,
        )


@dataclass
class SearchPackagesResponse(_Record):
    query: str
    total: int
    packages: t.List[SearchResult]
