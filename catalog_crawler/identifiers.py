"""Position-indexed DOM ids.

PeopleSoft renders every grid cell with an id of the form ``FIELD$row``; the
same field in row 3 of a grid is ``FIELD$3``. All knowledge of that naming
convention lives here.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

INDEX_DELIMITER = "$"


def element_id(base: str, index: Optional[int] = None) -> str:
    """Return the DOM id of ``base`` at row ``index`` (or ``base`` itself)."""

    if index is None:
        return base
    return f"{base}{INDEX_DELIMITER}{int(index)}"


def id_selector(dom_id: str) -> str:
    """CSS selector for an id that may contain ``$``."""

    escaped = dom_id.replace("\\", "\\\\").replace('"', '\\"')
    return f'[id="{escaped}"]'


def find_element(doc: BeautifulSoup, base: str, index: Optional[int] = None) -> Optional[Tag]:
    found = doc.find(id=element_id(base, index))
    return found if isinstance(found, Tag) else None


def field_value(
    doc: BeautifulSoup,
    base: str,
    index: Optional[int] = None,
    *,
    html: bool = True,
) -> Optional[str]:
    """Return the trimmed content of field ``base`` at ``index``.

    ``html=True`` returns the inner HTML (rich detail text keeps its markup),
    otherwise the rendered text. An absent element yields ``None``.
    """

    element = find_element(doc, base, index)
    if element is None:
        return None
    if html:
        return element.decode_contents().strip()
    return element.get_text().strip()


def row_ids(doc: BeautifulSoup, container_id: str) -> List[int]:
    """Return the row indices rendered in the grid ``container_id``.

    Only ``tbody > tr`` rows carrying an id are data rows; header and
    template rows have none. Row ``k`` of the result is the ``k``-th data
    row, which is the index its cells use in their ids.
    """

    container = doc.find(id=container_id)
    if not isinstance(container, Tag):
        return []
    rows = [row for row in container.select(":scope > tbody > tr") if row.get("id")]
    return list(range(len(rows)))


def option_values(doc: BeautifulSoup, select_id: str) -> List[Tuple[str, str]]:
    """Return ``(value, text)`` for every non-empty option of a select."""

    select = doc.find(id=select_id)
    if not isinstance(select, Tag):
        return []
    options: List[Tuple[str, str]] = []
    for option in select.find_all("option"):
        value = (option.get("value") or "").strip()
        if not value:
            continue
        options.append((value, option.get_text().strip()))
    return options


__all__ = [
    "INDEX_DELIMITER",
    "element_id",
    "id_selector",
    "find_element",
    "field_value",
    "row_ids",
    "option_values",
]
