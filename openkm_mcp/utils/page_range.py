"""Page range expressions.

A page range is a comma-separated list of tokens:

- ``7``: a single page
- ``-1``: the last page
- ``3-5`` or ``5-3``: an inclusive range, in either order

Pages outside ``[1, num_pages]`` and tokens that match none of the forms above
are dropped without error. The result is always ascending and duplicate-free.
"""

from __future__ import annotations

import re

LAST_PAGE_TOKEN = "-1"
_PAGE_RE = re.compile(r"^\d+$")
_SPAN_RE = re.compile(r"^(\d+)-(\d+)$")


def resolve_page_range(expression: str, num_pages: int) -> list[int]:
    """Resolve a page range expression against a document's page count.

    Args:
        expression: Page range such as ``"1,3-5,-1"``.
        num_pages: Total pages in the document (0 or more).

    Returns:
        Ascending list of unique 1-based page numbers; empty when nothing in
        the expression falls inside the document.

    Example:
        >>> resolve_page_range("5,1,3-4", 10)
        [1, 3, 4, 5]
        >>> resolve_page_range("3-8", 5)
        [3, 4, 5]
    """
    pages: set[int] = set()
    for raw in expression.split(","):
        token = raw.strip()
        if not token:
            continue
        if token == LAST_PAGE_TOKEN:
            if num_pages >= 1:
                pages.add(num_pages)
        elif _PAGE_RE.match(token):
            page = int(token)
            if 1 <= page <= num_pages:
                pages.add(page)
        elif match := _SPAN_RE.match(token):
            start, end = sorted((int(match.group(1)), int(match.group(2))))
            pages.update(range(max(start, 1), min(end, num_pages) + 1))
    return sorted(pages)


def format_page_range(pages: list[int]) -> str:
    """Render page numbers back into a compact expression.

    Consecutive runs collapse into ``a-b`` spans, so
    ``resolve_page_range(format_page_range(p), n) == p`` for any resolved ``p``.
    """
    parts: list[str] = []
    ordered = sorted(set(pages))
    i = 0
    while i < len(ordered):
        j = i
        while j + 1 < len(ordered) and ordered[j + 1] == ordered[j] + 1:
            j += 1
        parts.append(str(ordered[i]) if i == j else f"{ordered[i]}-{ordered[j]}")
        i = j + 1
    return ",".join(parts)
