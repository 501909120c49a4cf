"""Pure extraction of listing rows and course records from a page snapshot.

Nothing here navigates. The caller takes a :func:`snapshot` of the page in
the state it needs and every function reads only that snapshot.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from playwright.sync_api import Page

from .error_codes import ErrorCode
from .identifiers import field_value, row_ids
from .logging_utils import _scraper_event
from .models import (
    NOT_A_NUMBER,
    Assessment,
    ClassActivity,
    Convenor,
    DetailRecord,
    Group,
    ListingRow,
    Number,
)
from .selectors import CATALOG_SELECTORS, CatalogSelectors, SubTable

NUMERIC_FIELDS = ("credits", "level")


def snapshot(page: Page) -> BeautifulSoup:
    """Parse the page's current DOM into a read-only document."""

    return parse_html(page.content())


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def parse_number(raw: Optional[str], field: str, *, context: Optional[Dict[str, Any]] = None) -> Optional[Number]:
    """Convert a numeric field's text.

    ``None`` stays ``None`` (field absent). Text that is not a number becomes
    ``NOT_A_NUMBER`` and a warning is logged; it is never coerced to zero.
    """

    if raw is None:
        return None
    text = raw.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        value = NOT_A_NUMBER
    if math.isfinite(value):
        return value
    # "nan" and "inf" parse as floats but are not numbers a course can carry.
    _scraper_event(
        "warning",
        phase="extract",
        level=logging.WARNING,
        error_code=ErrorCode.NUMERIC_PARSE,
        field=field,
        raw=raw,
        **(context or {}),
    )
    return NOT_A_NUMBER


def extract_listing(
    doc: BeautifulSoup, selectors: CatalogSelectors = CATALOG_SELECTORS
) -> List[ListingRow]:
    """Return the rows of the results grid in on-page order."""

    rows: List[ListingRow] = []
    for index in row_ids(doc, selectors.listing_table_id):
        values = {
            name: field_value(doc, base, index, html=False)
            for name, base in selectors.listing_fields
        }
        rows.append(ListingRow(index=index, **values))
    return rows


def _extract_sub_table(doc: BeautifulSoup, table: SubTable) -> List[Dict[str, Optional[str]]]:
    return [
        {name: field_value(doc, base, index) for name, base in table.fields}
        for index in row_ids(doc, table.container_id)
    ]


def extract_detail(
    doc: BeautifulSoup,
    group: Group,
    selectors: CatalogSelectors = CATALOG_SELECTORS,
) -> DetailRecord:
    """Assemble the course record shown in the open detail view."""

    scalars: Dict[str, Any] = {
        name: field_value(doc, base, 0) for name, base in selectors.detail_fields
    }
    for name in NUMERIC_FIELDS:
        scalars[name] = parse_number(
            scalars.get(name),
            name,
            context={"course": scalars.get("code"), "group": group.code},
        )

    return DetailRecord(
        belongs_to=group,
        convenor=tuple(
            Convenor(**row) for row in _extract_sub_table(doc, selectors.convenors)
        ),
        classes=tuple(
            ClassActivity(**row) for row in _extract_sub_table(doc, selectors.classes)
        ),
        assessment=tuple(
            Assessment(**row) for row in _extract_sub_table(doc, selectors.assessments)
        ),
        **scalars,
    )


__all__ = [
    "NUMERIC_FIELDS",
    "snapshot",
    "parse_html",
    "parse_number",
    "extract_listing",
    "extract_detail",
]
