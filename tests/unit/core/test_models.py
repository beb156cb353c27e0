"""Unit tests for data models."""

import json

from conan_readme_mcp.core.models import (
    InstallationInfo,
    PackageInfoResponse,
    PackageReadmeResponse,
    RecipeInfo,
    RepositoryInfo,
    SearchPackagesResponse,
    SearchResult,
    UsageExample,
)


class TestToDict:
    """Test the JSON shape produced by to_dict."""

    def test_unset_optionals_omitted(self):
        """Test None-valued fields are dropped."""
        example = UsageExample(title="CMake Usage", code="find_package(x)", language="cmake")

        assert example.to_dict() == {"title": "CMake Usage", "code": "find_package(x)", "language": "cmake"}

    def test_empty_values_kept(self):
        """Test empty strings and lists are not mistaken for unset fields."""
        data = PackageInfoResponse.missing("nope").to_dict()

        assert data["topics"] == []
        assert data["latest_version"] == ""
        assert data["exists"] is False
        assert "repository" not in data
        assert "dependencies" not in data

    def test_nested_records(self):
        """Test nested dataclasses are converted and cleaned too."""
        response = SearchPackagesResponse(
            query="zlib",
            total=1,
            packages=[SearchResult(name="zlib", version="unknown")],
        )

        data = response.to_dict()

        assert data["packages"] == [
            {"name": "zlib", "version": "unknown", "description": "", "topics": [], "author": "", "license": ""}
        ]
        json.dumps(data)

    def test_repository_defaults_to_git(self):
        """Test RepositoryInfo type default."""
        assert RepositoryInfo(url="https://github.com/madler/zlib").to_dict() == {
            "url": "https://github.com/madler/zlib",
            "type": "git",
        }


class TestFactories:
    """Test convenience constructors."""

    def test_installation_for_package(self):
        """Test install snippets embed name and version."""
        info = InstallationInfo.for_package("fmt", "10.2.1")

        assert info.conan == "conan install --requires=fmt/10.2.1@"
        assert info.cmake == "find_package(fmt REQUIRED)"

    def test_missing_readme(self):
        """Test the negative README response."""
        data = PackageReadmeResponse.missing("nope", "1.0").to_dict()

        assert data["exists"] is False
        assert data["version"] == "1.0"
        assert data["usage_examples"] == []
        assert data["basic_info"] == {
            "name": "nope",
            "version": "1.0",
            "description": "",
            "license": "",
            "author": "",
            "topics": [],
        }

    def test_recipe_info_defaults(self):
        """Test placeholder metadata for index recipes."""
        recipe = RecipeInfo(name="zlib", latest_version="1.3.1")

        assert recipe.license == "Unknown"
        assert recipe.author == "Conan Center"
        assert recipe.versions == []
