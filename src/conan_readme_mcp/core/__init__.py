"""Core module: response models and the cached package service."""

from .models import (
    InstallationInfo,
    PackageBasicInfo,
    PackageInfoResponse,
    PackageReadmeResponse,
    RecipeDetails,
    RecipeInfo,
    RepositoryInfo,
    SearchPackagesResponse,
    SearchResult,
    UsageExample,
)

__all__ = [
    # Tool responses
    "PackageInfoResponse",
    "PackageReadmeResponse",
    "SearchPackagesResponse",
    # Building blocks
    "UsageExample",
    "InstallationInfo",
    "RepositoryInfo",
    "PackageBasicInfo",
    # Upstream records
    "RecipeInfo",
    "RecipeDetails",
    "SearchResult",
]
