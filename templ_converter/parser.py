"""Source parsing for in-process component extraction."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)

SUPPORTED_GRAMMARS: tuple[str, ...] = ("tsx", "typescript", "javascript")


class GrammarProvider(ABC):
    """Supplies a tree-sitter parser for a grammar name."""

    @abstractmethod
    def parser_for(self, grammar: str): ...


class LanguagePackProvider(GrammarProvider):
    """Loads grammars from tree-sitter-language-pack on first use."""

    def __init__(self):
        self._parsers: dict[str, object] = {}

    def parser_for(self, grammar: str):
        if grammar not in self._parsers:
            import tree_sitter_language_pack as tslp

            logger.debug("Loading %s grammar", grammar)
            self._parsers[grammar] = tslp.get_parser(grammar)
        return self._parsers[grammar]


def parse_source(source: str, grammar: str = "tsx", provider: Optional[GrammarProvider] = None):
    """Parse component source into a tree-sitter tree.

    Raises:
        ValueError: If the grammar is not one of ``SUPPORTED_GRAMMARS``.
    """
    if grammar not in SUPPORTED_GRAMMARS:
        raise ValueError(f"Unsupported grammar {grammar!r}; expected one of {SUPPORTED_GRAMMARS}")
    parser = (provider or LanguagePackProvider()).parser_for(grammar)
    return parser.parse(source.encode("utf-8"))
