"""Placeholder token extraction and substitution.

Templates carry delimiter-wrapped uppercase tokens such as ``@PROJECT_NAME@``.
A :class:`PlaceholderEngine` is configured with one or more
:class:`PlaceholderStyle` values and recognises all of them at once, so a
single document may mix styles freely.  Only literal replacement is
performed; there are no conditionals or loops.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from enum import Enum

TOKEN_BODY = r"[A-Z0-9_]+"


class PlaceholderStyle(Enum):
    """Delimiter pair wrapping a token name."""

    AT = ("@", "@")
    HASH = ("#", "#")
    PERCENT = ("%", "%")
    BRACES = ("{", "}")
    DOLLAR = ("$", "")
    DOLLAR_BRACES = ("${", "}")

    @property
    def prefix(self) -> str:
        return self.value[0]

    @property
    def suffix(self) -> str:
        return self.value[1]

    def wrap(self, name: str) -> str:
        """Return *name* wrapped in this style's delimiters."""
        return f"{self.prefix}{name}{self.suffix}"

    def pattern(self) -> str:
        """Regex for this style with the token body as a capture group."""
        return f"{re.escape(self.prefix)}({TOKEN_BODY}){re.escape(self.suffix)}"

    @classmethod
    def from_name(cls, name: str) -> "PlaceholderStyle":
        """Look a style up by its name, case-insensitively (``"at"``, ``"dollar_braces"``)."""
        try:
            return cls[name.strip().upper().replace("-", "_")]
        except KeyError:
            choices = ", ".join(s.name.lower() for s in cls)
            raise ValueError(f"Unknown placeholder style '{name}' (choose from: {choices})") from None


DEFAULT_STYLES: tuple[PlaceholderStyle, ...] = (PlaceholderStyle.AT,)


class PlaceholderEngine:
    """Extracts and replaces tokens under an ordered list of styles."""

    def __init__(self, styles: Iterable[PlaceholderStyle] | None = None) -> None:
        self.styles: tuple[PlaceholderStyle, ...] = tuple(styles) if styles else DEFAULT_STYLES
        self._regex = re.compile("|".join(style.pattern() for style in self.styles))

    def __repr__(self) -> str:
        names = ", ".join(style.name for style in self.styles)
        return f"PlaceholderEngine({names})"

    def _matches(self, text: str) -> Iterable[tuple[str, str]]:
        """Yield ``(full_match, name)`` for every token in *text*."""
        for match in self._regex.finditer(text):
            name = next(group for group in match.groups() if group is not None)
            yield match.group(0), name

    def extract(self, text: str) -> list[str]:
        """Return the unique token names in *text* in first-seen order."""
        seen: dict[str, None] = {}
        for _, name in self._matches(text):
            seen.setdefault(name, None)
        return list(seen)

    def replace(self, text: str, values: Mapping[str, str]) -> str:
        """Substitute every token whose name is in *values*.

        Matched tokens are replaced longest-first so that a token such as
        ``@FOO_BAR@`` is never clobbered by a shorter ``@FOO@`` replacement.
        Tokens without a value are left untouched.
        """
        replacements: dict[str, str] = {}
        for full, name in self._matches(text):
            if name in values and full not in replacements:
                replacements[full] = values[name]

        result = text
        for full in sorted(replacements, key=len, reverse=True):
            result = result.replace(full, replacements[full])
        return result

    def same_styles(self, other: "PlaceholderEngine") -> bool:
        """True when *other* recognises exactly the same styles, in any order."""
        return set(self.styles) == set(other.styles)
