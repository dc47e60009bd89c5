"""Normalization of model output that arrives wrapped in markdown code fences."""

import re

_TAGGED_OPENER = re.compile(r"\A```(?:markdown|md)\s*\n?", re.IGNORECASE)
_CLOSER = re.compile(r"\n?```\s*\Z")
_BARE_OPENER = re.compile(r"\A```\s*\n?")

_FENCED_BLOCK = re.compile(r"```[\s\S]*?```")
_FENCE_TO_EOL = re.compile(r"```.*$", re.MULTILINE)


def _strip_once(content: str) -> str:
    cleaned = content.strip()
    cleaned = _TAGGED_OPENER.sub("", cleaned, count=1)
    cleaned = _CLOSER.sub("", cleaned, count=1)
    cleaned = _BARE_OPENER.sub("", cleaned, count=1)
    return cleaned.strip()


def strip_code_fences(content: str) -> str:
    """Remove a code fence wrapped around the whole document.

    Only fences at the very start or end are touched. The pass is repeated
    until the text stops changing, so the result is a fixed point and
    ``strip_code_fences(strip_code_fences(s)) == strip_code_fences(s)``.
    """
    cleaned = _strip_once(content)
    while True:
        again = _strip_once(cleaned)
        if again == cleaned:
            return cleaned
        cleaned = again


def remove_fenced_blocks(content: str) -> str:
    """Aggressively drop every fenced block and any dangling fence line tail.

    Fallback for output that still carries fences mid-document after
    :func:`strip_code_fences`; legitimate code blocks are lost too.
    """
    cleaned = _FENCED_BLOCK.sub("", content)
    cleaned = _FENCE_TO_EOL.sub("", cleaned)
    return cleaned.strip()
