"""Unit tests for cache key builders."""

import base64
import datetime as dt

from conan_readme_mcp.cache import package_info_key, package_readme_key, recipe_details_key, search_key


class TestPackageKeys:
    def test_package_info_key_format(self):
        assert package_info_key("zlib", "latest") == "pkg_info:zlib:latest"

    def test_keys_are_deterministic(self):
        assert package_info_key("zlib", "1.3") == package_info_key("zlib", "1.3")
        assert package_readme_key("zlib", "1.3") == package_readme_key("zlib", "1.3")

    def test_distinct_inputs_distinct_keys(self):
        keys = {
            package_info_key("zlib", "1.3"),
            package_info_key("zlib", "1.2"),
            package_info_key("boost", "1.3"),
            package_readme_key("zlib", "1.3"),
            recipe_details_key("zlib", "1.3"),
        }
        assert len(keys) == 5


class TestSearchKey:
    def test_same_query_same_key(self):
        assert search_key("boost", 20) == search_key("boost", 20)

    def test_limit_changes_key(self):
        assert search_key("boost", 10) != search_key("boost", 20)

    def test_query_is_base64_encoded(self):
        key = search_key("a:b ü", 5)
        encoded = base64.b64encode("a:b ü".encode("utf-8")).decode("ascii")
        assert key == f"search:{encoded}:5"
        assert key.isascii()

    def test_delimiters_in_query_do_not_collide(self):
        assert search_key("a:1", 2) != search_key("a", 1)

    def test_extra_discriminators_and_day(self):
        key = search_key("boost", 20, "popular", day=dt.date(2024, 1, 31))
        encoded = base64.b64encode(b"popular").decode("ascii")
        assert key.endswith(f":20:{encoded}:d=2024-01-31")
        assert key != search_key("boost", 20, "popular", day=dt.date(2024, 2, 1))

    def test_delimiters_in_extras_do_not_collide(self):
        assert search_key("boost", 20, "a:b") != search_key("boost", 20, "a", "b")

    def test_date_like_extra_differs_from_day(self):
        assert search_key("boost", 20, "2026-10-18") != search_key("boost", 20, day=dt.date(2026, 10, 18))
        assert search_key("boost", 20, "d=2026-10-18") != search_key("boost", 20, day=dt.date(2026, 10, 18))
