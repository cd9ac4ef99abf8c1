"""Small helpers for emitting generated source text."""

from __future__ import annotations

from .options import ConversionOptions

_COMMENT_PREFIX = "//"


def reindent(text: str, options: ConversionOptions) -> str:
    """Replace leading tabs with the configured indentation."""
    lines = []
    for line in text.split("\n"):
        stripped = line.lstrip("\t")
        lines.append(options.indent(len(line) - len(stripped)) + stripped)
    return "\n".join(lines)


def drop_comment_lines(text: str) -> str:
    return "\n".join(
        line for line in text.split("\n") if not line.strip().startswith(_COMMENT_PREFIX)
    )


def join_blocks(blocks: list[str]) -> str:
    """Join non-empty blocks with one blank line between them."""
    return "\n\n".join(block.strip("\n") for block in blocks if block.strip()) + "\n"


def finish(text: str, options: ConversionOptions) -> str:
    """Apply the comment and indent options to already-filled source."""
    if not options.include_comments:
        text = drop_comment_lines(text)
    return reindent(text, options)
