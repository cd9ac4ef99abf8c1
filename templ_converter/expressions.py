"""Expression Translator: JavaScript expression text to Go expression text.

Translation is pattern based over the raw text. Recognised constructs are
ternaries, strict (in)equality and back-tick template literals; everything
else is passed through untouched and left for the Go compiler to judge.
"""

from __future__ import annotations

import logging
from typing import Optional

from . import constants
from .go_types import go_string

logger = logging.getLogger(__name__)

_OPENERS = "([{"
_CLOSERS = ")]}"
_CODE, _STRING, _TEMPLATE = "code", "string", "template"


def _string_end(text: str, start: int) -> int:
    """Index just past the quoted string opened at ``start``."""
    quote = text[start]
    i = start + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == quote:
            return i + 1
        i += 1
    return len(text)


def _placeholder_end(text: str, start: int) -> int:
    """Index of the ``}`` closing the ``${`` placeholder whose body starts at ``start``."""
    depth = 1
    i = start
    while i < len(text):
        ch = text[i]
        if ch in "'\"":
            i = _string_end(text, i)
            continue
        if ch == "`":
            i = _template_end(text, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return len(text)


def _template_end(text: str, start: int) -> int:
    """Index just past the template literal opened at ``start``."""
    i = start + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == "`":
            return i + 1
        if text.startswith("${", i):
            i = _placeholder_end(text, i + 2) + 1
            continue
        i += 1
    return len(text)


def _segments(text: str) -> list[tuple[str, str]]:
    """Split text into code, quoted-string and template-literal segments."""
    segments: list[tuple[str, str]] = []
    start = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in "'\"`":
            if i > start:
                segments.append((_CODE, text[start:i]))
            end = _template_end(text, i) if ch == "`" else _string_end(text, i)
            segments.append((_TEMPLATE if ch == "`" else _STRING, text[i:end]))
            start = i = end
            continue
        i += 1
    if start < len(text):
        segments.append((_CODE, text[start:]))
    return segments


class _Nested:
    """Marker for a ternary that contains another top-level ternary."""


_NESTED = _Nested()


class ExpressionTranslator:
    """Stateless text-to-text translator. Never raises."""

    def translate(self, expression: str) -> str:
        text = expression.strip()
        if not text:
            return text

        ternary = self._split_ternary(text)
        if ternary is _NESTED:
            logger.debug("Nested ternary passed through verbatim: %s", text)
            return text
        if ternary is not None:
            condition, consequent, alternative = ternary
            return (
                f"{constants.CONDITIONAL_CALL}(({self.translate(condition)}), "
                f"{self.translate(consequent)}, {self.translate(alternative)})"
            )

        translated = "".join(self._translate_segment(kind, part) for kind, part in _segments(text))
        if translated == text:
            logger.debug("Expression passed through unchanged: %s", text)
        return translated

    def _translate_segment(self, kind: str, part: str) -> str:
        if kind == _CODE:
            return part.replace("!==", "!=").replace("===", "==")
        if kind == _TEMPLATE:
            converted = self._translate_template(part)
            if converted is None:
                logger.debug("Template literal passed through verbatim: %s", part)
                return part
            return converted
        return part

    def _translate_template(self, literal: str) -> Optional[str]:
        if len(literal) < 2 or not literal.endswith("`"):
            return None
        body = literal[1:-1]
        pieces: list[str] = []
        arguments: list[str] = []
        i = 0
        while i < len(body):
            if body[i] == "\\" and i + 1 < len(body):
                escaped = body[i + 1]
                pieces.append(escaped if escaped in "`$" else body[i : i + 2])
                i += 2
                continue
            if body.startswith("${", i):
                end = _placeholder_end(body, i + 2)
                placeholder = body[i + 2 : end]
                if "`" in placeholder:
                    return None
                arguments.append(placeholder.strip())
                pieces.append(constants.FORMAT_SPECIFIER)
                i = end + 1
                continue
            pieces.append("%%" if body[i] == "%" and self._has_placeholder(body) else body[i])
            i += 1

        formatted = go_string("".join(pieces)).replace("\\\\", "\\")
        if not arguments:
            return formatted
        return f"{constants.FORMAT_CALL}({formatted}, {', '.join(arguments)})"

    @staticmethod
    def _has_placeholder(body: str) -> bool:
        return "${" in body

    def _split_ternary(self, text: str):
        """Split on the first top-level ``?`` and the first ``:`` after it."""
        depth = 0
        question = -1
        colon = -1
        i = 0
        while i < len(text):
            ch = text[i]
            if ch in "'\"":
                i = _string_end(text, i)
                continue
            if ch == "`":
                i = _template_end(text, i)
                continue
            if ch in _OPENERS:
                depth += 1
            elif ch in _CLOSERS:
                depth -= 1
            elif depth == 0 and ch == "?":
                following = text[i + 1 : i + 2]
                if following in ("?", "."):
                    i += 2
                    continue
                if question >= 0:
                    return _NESTED
                question = i
            elif depth == 0 and ch == ":" and question >= 0 and colon < 0:
                colon = i
            i += 1

        if question < 0 or colon < 0:
            return None
        condition = text[:question].strip()
        consequent = text[question + 1 : colon].strip()
        alternative = text[colon + 1 :].strip()
        if not (condition and consequent and alternative):
            return None
        return condition, consequent, alternative


def translate_expression(expression: str) -> str:
    return ExpressionTranslator().translate(expression)
