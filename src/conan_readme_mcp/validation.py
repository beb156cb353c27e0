"""Shape checks for tool arguments. All failures raise :class:`ValidationError`."""

from __future__ import annotations

import re
import typing as t

from .errors import ValidationError

NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")
MAX_QUERY_LENGTH = 200
DEFAULT_LIMIT = 20
MIN_LIMIT = 1
MAX_LIMIT = 100


def validate_package_name(package_name: t.Any) -> str:
    if not isinstance(package_name, str):
        raise ValidationError("Package name must be a string", field="package_name")
    if not package_name.strip():
        raise ValidationError("Package name cannot be empty", field="package_name")
    if not NAME_PATTERN.fullmatch(package_name):
        raise ValidationError(
            "Package name contains invalid characters. "
            "Only letters, numbers, dots, hyphens, and underscores are allowed",
            field="package_name",
        )
    return package_name


def validate_version(version: t.Any) -> t.Optional[str]:
    """Return the version, or ``None`` when it is absent or blank."""
    if version is None:
        return None
    if not isinstance(version, str):
        raise ValidationError("Version must be a string", field="version")
    if not version.strip():
        return None
    if not NAME_PATTERN.fullmatch(version):
        raise ValidationError("Version contains invalid characters", field="version")
    return version


def validate_search_query(query: t.Any) -> str:
    if not isinstance(query, str):
        raise ValidationError("Search query must be a string", field="query")
    if not query.strip():
        raise ValidationError("Search query cannot be empty", field="query")
    if len(query) > MAX_QUERY_LENGTH:
        raise ValidationError(
            f"Search query is too long (maximum {MAX_QUERY_LENGTH} characters)", field="query"
        )
    return query.strip()


def validate_limit(limit: t.Any) -> int:
    if limit is None:
        return DEFAULT_LIMIT
    # bool is an int subclass; reject it explicitly
    if isinstance(limit, bool) or not isinstance(limit, (int, float)):
        raise ValidationError("Limit must be a number", field="limit")
    if isinstance(limit, float):
        if not limit.is_integer():
            raise ValidationError("Limit must be an integer", field="limit")
        limit = int(limit)
    if limit < MIN_LIMIT:
        raise ValidationError(f"Limit must be at least {MIN_LIMIT}", field="limit")
    if limit > MAX_LIMIT:
        raise ValidationError(f"Limit cannot exceed {MAX_LIMIT}", field="limit")
    return limit


def validate_boolean(value: t.Any, field: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be a boolean", field=field)
    return value


def require_arguments(arguments: t.Any) -> t.Dict[str, t.Any]:
    if arguments is None:
        return {}
    if not isinstance(arguments, dict):
        raise ValidationError("Arguments must be an object")
    return arguments
