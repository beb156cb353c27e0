"""Heuristic extraction of usage examples from README markdown.

This is best-effort scraping, not a markdown parser: only fenced blocks with
a recognised language tag are considered, and titles/descriptions are
guessed from the text just above each fence. Missing or odd examples are
expected and must not be treated as errors by callers.
"""

from __future__ import annotations

import logging
import re
import typing as t
from dataclasses import dataclass

from conan_readme_mcp.core.models import UsageExample

logger = logging.getLogger(__name__)

TITLE_WINDOW = 500
DESCRIPTION_WINDOW = 300
MAX_DESCRIPTION_LENGTH = 200
MIN_DESCRIPTION_LENGTH = 10
DEFAULT_DESCRIPTION = "Conan package"

_FLAGS = re.IGNORECASE | re.DOTALL


@dataclass(frozen=True)
class ExampleFamily:
    language: str
    default_title: str
    pattern: t.Pattern[str]


# Families are emitted in this order; within a family, document order.
FAMILIES: t.Tuple[ExampleFamily, ...] = (
    ExampleFamily("cmake", "CMake Usage", re.compile(r"```cmake[ \t]*\n(.*?)\n```", _FLAGS)),
    ExampleFamily("cpp", "C++ Usage", re.compile(r"```(?:cpp|c\+\+|cxx)[ \t]*\n(.*?)\n```", _FLAGS)),
    ExampleFamily(
        "python", "Conanfile Usage", re.compile(r"```(?:python|py)[ \t]*\n((?:(?!```).)*?conanfile.*?)\n```", _FLAGS)
    ),
    ExampleFamily(
        "bash", "Installation", re.compile(r"```(?:bash|shell|sh)[ \t]*\n((?:(?!```).)*?conan.*?)\n```", _FLAGS)
    ),
)

_HEADING = re.compile(r"^#+\s*(.+?)\s*$", re.MULTILINE)
_BOLD = re.compile(r"\*\*([^*]+)\*\*\s*$", re.MULTILINE)


class ReadmeParser:
    def iter_usage_examples(self, content: str) -> t.Iterator[UsageExample]:
        for family in FAMILIES:
            for match in family.pattern.finditer(content):
                code = match.group(1).strip()
                if not code:
                    continue
                yield UsageExample(
                    title=self._extract_title(content, match.start()) or family.default_title,
                    code=code,
                    language=family.language,
                    description=self._extract_description(content, match.start()),
                )

    def parse_usage_examples(self, content: str) -> t.List[UsageExample]:
        try:
            examples = list(self.iter_usage_examples(content))
        except Exception:  # noqa: BLE001
            logger.warning("Failed to parse usage examples", exc_info=True)
            return []
        logger.debug("Parsed %d usage examples from README", len(examples))
        return examples

    def extract_package_description(self, content: str) -> str:
        """First substantial prose line after a heading, ignoring code and images."""
        in_code_block = False
        found_title = False
        for line in content.splitlines():
            stripped = line.strip()
            if stripped.startswith("```"):
                in_code_block = not in_code_block
                continue
            if in_code_block:
                continue
            if stripped.startswith("#"):
                found_title = True
                continue
            if found_title and len(stripped) > 20 and not stripped.startswith("!["):
                return stripped
        return DEFAULT_DESCRIPTION

    @staticmethod
    def _extract_title(content: str, index: int) -> t.Optional[str]:
        """Nearest line-start heading above the fence, else the nearest trailing bold text."""
        before = content[max(0, index - TITLE_WINDOW) : index]
        headings = _HEADING.findall(before)
        if headings:
            return headings[-1].strip()
        bold = _BOLD.findall(before)
        if bold:
            return bold[-1].strip()
        return None

    @staticmethod
    def _extract_description(content: str, index: int) -> t.Optional[str]:
        before = content[max(0, index - DESCRIPTION_WINDOW) : index]
        description = ""
        for line in reversed(before.split("\n")):
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or stripped.startswith("```"):
                if description:
                    break
                continue
            description = f"{stripped} {description}" if description else stripped
            if len(description) > MAX_DESCRIPTION_LENGTH:
                break
        return description if len(description) > MIN_DESCRIPTION_LENGTH else None
