"""Paged reads over PostgREST queries."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

DEFAULT_PAGE_SIZE = 1000


def fetch_all_rows(
    build_query: Callable[[], Any],
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> List[Dict[str, Any]]:
    """Read every row of a query, ``page_size`` rows at a time.

    ``build_query`` must return a fresh, filtered and ordered query builder on
    each call; ``.range()`` is inclusive on both ends.
    """

    rows: List[Dict[str, Any]] = []
    offset = 0
    while True:
        response = build_query().range(offset, offset + page_size - 1).execute()
        data = getattr(response, "data", None) or []
        rows.extend(data)
        if len(data) < page_size:
            break
        offset += page_size
    return rows
