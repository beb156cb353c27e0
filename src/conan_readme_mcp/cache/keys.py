"""Canonical cache keys.

Keys depend only on their arguments so identical requests collide across
process runs. Free-text segments (the query and any extra discriminators)
are base64-encoded so ``:`` and non-ASCII characters cannot bleed into
neighbouring key segments.
"""

from __future__ import annotations

import base64
import datetime as dt
import typing as t


def _encode(value: t.Any) -> str:
    return base64.b64encode(str(value).encode("utf-8")).decode("ascii")


def package_info_key(package_name: str, version: str) -> str:
    return f"pkg_info:{package_name}:{version}"


def package_readme_key(package_name: str, version: str) -> str:
    return f"pkg_readme:{package_name}:{version}"


def recipe_details_key(package_name: str, version: str) -> str:
    return f"recipe:{package_name}:{version}"


def search_key(query: str, limit: int, *extra: t.Any, day: t.Optional[dt.date] = None) -> str:
    """Key for a search result page.

    ``extra`` discriminators are appended in order, each encoded like the
    query. Passing ``day`` adds a trailing ``d=YYYY-MM-DD`` segment so results
    are bucketed per calendar day; ``-`` never occurs in base64, so the day
    segment cannot equal an encoded extra.
    """
    parts = ["search", _encode(query), str(limit), *(_encode(p) for p in extra)]
    if day is not None:
        parts.append(f"d={day.isoformat()}")
    return ":".join(parts)
