"""Unit tests for GitHubApi."""

import base64

import httpx
import pytest

from conan_readme_mcp.clients import GitHubApi, parse_github_repo
from conan_readme_mcp.utils.config import HttpConfig


def make_api(handler):
    return GitHubApi(HttpConfig(), transport=httpx.MockTransport(handler))


def readme_payload(text: str, encoding: str = "base64") -> dict:
    return {
        "name": "README.md",
        "encoding": encoding,
        "content": base64.encodebytes(text.encode("utf-8")).decode("ascii"),
    }


class TestParseGithubRepo:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://github.com/madler/zlib", ("madler", "zlib")),
            ("https://github.com/madler/zlib.git", ("madler", "zlib")),
            ("https://github.com/fmtlib/fmt/tree/master/doc", ("fmtlib", "fmt")),
        ],
    )
    def test_valid(self, url, expected):
        assert parse_github_repo(url) == expected

    @pytest.mark.parametrize(
        "url", ["https://gitlab.com/a/b", "https://github.com/only-owner", "not a url", "", "https://zlib.net"]
    )
    def test_invalid(self, url):
        assert parse_github_repo(url) is None


@pytest.mark.asyncio
class TestGitHubApi:
    async def test_readme_decoded(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["accept"] = request.headers["accept"]
            return httpx.Response(200, json=readme_payload("# zlib\n\nCompression ✓\n"))

        async with make_api(handler) as api:
            content = await api.get_readme_content("https://github.com/madler/zlib")

        assert content == "# zlib\n\nCompression ✓\n"
        assert seen["path"] == "/repos/madler/zlib/readme"
        assert seen["accept"] == "application/vnd.github.v3+json"

    async def test_missing_readme(self):
        async with make_api(lambda request: httpx.Response(404)) as api:
            assert await api.get_readme_content("https://github.com/madler/zlib") is None

    async def test_non_github_url_makes_no_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200)

        async with make_api(handler) as api:
            assert await api.get_readme_content("https://zlib.net/") is None
        assert calls == []

    async def test_unexpected_encoding(self):
        payload = {"encoding": "none", "content": ""}
        async with make_api(lambda request: httpx.Response(200, json=payload)) as api:
            assert await api.get_readme_content("https://github.com/madler/zlib") is None

    async def test_upstream_failure_degrades_to_none(self):
        async with make_api(lambda request: httpx.Response(502)) as api:
            assert await api.get_readme_content("https://github.com/madler/zlib") is None

    async def test_repository_exists(self):
        def handler(request):
            assert request.method == "HEAD"
            return httpx.Response(200 if request.url.path == "/repos/madler/zlib" else 404)

        async with make_api(handler) as api:
            assert await api.repository_exists("https://github.com/madler/zlib") is True
            assert await api.repository_exists("https://github.com/madler/nope") is False
            assert await api.repository_exists("https://example.com/x/y") is False
