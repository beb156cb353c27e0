"""Unit tests for argument validators."""

import pytest

from conan_readme_mcp.errors import ErrorKind, ValidationError
from conan_readme_mcp.validation import (
    require_arguments,
    validate_boolean,
    validate_limit,
    validate_package_name,
    validate_search_query,
    validate_version,
)


class TestPackageName:
    @pytest.mark.parametrize("name", ["zlib", "boost", "openssl", "libjpeg-turbo", "nlohmann_json", "gtk.3"])
    def test_valid_names(self, name):
        assert validate_package_name(name) == name

    @pytest.mark.parametrize("name", [" zlib", "zlib ", "zlib\n", "\tzlib"])
    def test_surrounding_whitespace_rejected(self, name):
        with pytest.raises(ValidationError):
            validate_package_name(name)

    @pytest.mark.parametrize("name", ["", "   ", "zlib/1.3", "bad name", "zlib@conan", None, 42])
    def test_invalid_names(self, name):
        with pytest.raises(ValidationError) as excinfo:
            validate_package_name(name)
        assert excinfo.value.kind is ErrorKind.INVALID_INPUT
        assert excinfo.value.field == "package_name"


class TestVersion:
    def test_absent_or_blank_is_none(self):
        assert validate_version(None) is None
        assert validate_version("  ") is None

    def test_valid_version(self):
        assert validate_version("1.3.1") == "1.3.1"
        assert validate_version("cci.20230101") == "cci.20230101"

    @pytest.mark.parametrize("version", [1.3, "1.3 beta", "1.3/x", " 1.3", "1.3\n"])
    def test_invalid_version(self, version):
        with pytest.raises(ValidationError):
            validate_version(version)


class TestSearchQuery:
    def test_trims(self):
        assert validate_search_query("  json ") == "json"

    def test_empty_rejected(self):
        with pytest.raises(ValidationError, match="empty"):
            validate_search_query("   ")

    def test_length_limit(self):
        assert validate_search_query("a" * 200) == "a" * 200
        with pytest.raises(ValidationError, match="too long"):
            validate_search_query("a" * 201)

    def test_non_string(self):
        with pytest.raises(ValidationError):
            validate_search_query(None)


class TestLimit:
    def test_default(self):
        assert validate_limit(None) == 20

    @pytest.mark.parametrize("limit", [1, 50, 100, 10.0])
    def test_in_range(self, limit):
        assert validate_limit(limit) == int(limit)

    @pytest.mark.parametrize("limit", [0, 101, -5, 2.5, "10", True])
    def test_rejected(self, limit):
        with pytest.raises(ValidationError):
            validate_limit(limit)


class TestBoolean:
    def test_default_used_for_none(self):
        assert validate_boolean(None, "include_examples", True) is True
        assert validate_boolean(None, "include_options", False) is False

    def test_explicit_value(self):
        assert validate_boolean(False, "include_examples", True) is False

    def test_non_boolean(self):
        with pytest.raises(ValidationError, match="include_options must be a boolean"):
            validate_boolean("yes", "include_options", False)


class TestArguments:
    def test_none_becomes_empty(self):
        assert require_arguments(None) == {}

    def test_non_mapping_rejected(self):
        with pytest.raises(ValidationError):
            require_arguments(["zlib"])
