"""Text helpers for rich-text post bodies."""

import html
import re

_TAG = re.compile(r"<[^>]*>")
_BLOCK_TAG = re.compile(r"</?(p|div|br|li|ul|ol|h[1-6]|blockquote)\b[^>]*>", re.I)
_WHITESPACE = re.compile(r"\s+")

ELLIPSIS = "…"


def strip_markup(rich_text: str) -> str:
    """Plain text of a rich-text body.

    Block-level tags become spaces so words on either side do not merge.

    Args:
        rich_text: HTML body

    Returns:
        Text with tags removed, entities decoded and whitespace collapsed
    """
    if not rich_text:
        return ""
    text = _BLOCK_TAG.sub(" ", rich_text)
    text = _TAG.sub("", text)
    text = html.unescape(text)
    return _WHITESPACE.sub(" ", text).strip()


def make_excerpt(text: str, term: str, before: int = 50, after: int = 80) -> str:
    """Window of text around the first case-insensitive match of a term.

    The window starts ``before`` characters ahead of the match and ends
    ``after`` characters past it. Truncated ends are marked with an
    ellipsis. Without a literal match the leading part of the text is used.

    Args:
        text: Plain text
        term: Search term
        before: Characters kept ahead of the match
        after: Characters kept past the end of the match

    Returns:
        Excerpt
    """
    if not text:
        return ""
    index = text.lower().find(term.lower()) if term else -1
    if index < 0:
        end = before + after
        return text[:end] + (ELLIPSIS if len(text) > end else "")

    start = max(0, index - before)
    end = min(len(text), index + len(term) + after)
    excerpt = text[start:end]
    if start > 0:
        excerpt = ELLIPSIS + excerpt
    if end < len(text):
        excerpt = excerpt + ELLIPSIS
    return excerpt
