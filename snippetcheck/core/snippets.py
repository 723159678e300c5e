"""Fenced code block extraction."""

import re
from dataclasses import dataclass
from typing import List

from .loader import Document

SUPPORTED_LANGUAGES = frozenset({"ts", "tsx", "js", "jsx"})

# ```<tag><meta>\n<body>```
FENCE_PATTERN = re.compile(r"```([a-zA-Z0-9_-]+)([^\n]*)\n(.*?)```", re.DOTALL)


@dataclass(frozen=True)
class Snippet:
    """A fenced code block ready for analysis.

    ``start_line`` is the 1-based document line holding the first body line.
    """
    file: str
    language_tag: str
    body: str
    start_line: int
    meta: str = ""


def normalize_language(tag: str) -> str:
    """Trim, lowercase and keep the first whitespace-delimited token."""
    tokens = tag.strip().lower().split()
    return tokens[0] if tokens else ""


def extract_snippets(document: Document) -> List[Snippet]:
    """Return the analyzable snippets of ``document`` in document order.

    Blocks with an unsupported language tag are dropped, and so are blocks
    whose body never mentions ``import``: such a block cannot produce either
    issue kind.
    """
    snippets = []
    text = document.raw_text
    for match in FENCE_PATTERN.finditer(text):
        language = normalize_language(match.group(1))
        if language not in SUPPORTED_LANGUAGES:
            continue
        body = match.group(3)
        if "import" not in body:
            continue
        start_line = text.count("\n", 0, match.start(3)) + 1
        snippets.append(Snippet(
            file=document.path,
            language_tag=language,
            body=body,
            start_line=start_line,
            meta=match.group(2).strip(),
        ))
    return snippets
