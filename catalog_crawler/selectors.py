from __future__ import annotations

"""Element ids of the PeopleSoft course extract pages.

Ids are raw DOM ids, not CSS. Indexed fields are stored as base names; the
row index is appended by :func:`catalog_crawler.identifiers.element_id`.
"""

from dataclasses import dataclass, field
from typing import Tuple

FieldMap = Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class SubTable:
    """A repeating section of the detail view: container id plus row fields."""

    container_id: str
    fields: FieldMap


@dataclass(frozen=True)
class CatalogSelectors:
    """Site contract for the course search form.

    The search form lives on a single page whose fragments are swapped in by
    the server: the criteria form, then either the results grid or the
    "no results" HTML area, then the detail view.
    """

    entry_button_id: str = "UN_PAM_EXTR_WRK_UN_MODULE_PB"
    campus_select_id: str = "UN_PAM_EXTR_WRK_CAMPUS"
    year_select_id: str = "UN_PAM_EXTR_WRK_STRM"
    group_select_id: str = "UN_PAM_EXTR_WRK_UN_PAM_CRSE1_SRCH$0"
    search_button_id: str = "UN_PAM_EXTR_WRK_UN_SEARCH_PB$0"

    results_panel_id: str = "win0divUN_PAM_CRSE_VW$0"
    empty_panel_id: str = "win0divUN_PAM_EXTR_WRK_HTMLAREA8"

    listing_table_id: str = "UN_PAM_CRSE_VW$scroll$0"
    listing_fields: FieldMap = (
        ("level", "UN_PAM_CRSE_VW_UN_LEVEL1_DESCR"),
        ("code", "CRSE_CODE"),
        ("title", "UN_PAM_CRSE_VW_COURSE_TITLE_LONG"),
        ("semester", "SSR_CRSE_TYPOFF_DESCR"),
    )
    # Clicking the code cell of listing row i opens that course's detail view.
    listing_link_field: str = "CRSE_CODE"

    detail_anchor_field: str = "UN_PAM_CRSE_DTL_SUBJECT_DESCR"
    detail_fields: FieldMap = (
        ("code", "UN_PAM_CRSE_DTL_SUBJECT_DESCR"),
        ("title", "UN_PAM_CRSE_DTL_COURSE_TITLE_LONG"),
        ("credits", "UN_PAM_CRSE_DTL_UNITS_MINIMUM"),
        ("level", "UN_PAM_CRSE_DTL_UN_LEVELS"),
        ("summary", "UN_PAM_CRSE_DTL_UN_SUMMARY_CONTENT"),
        ("aims", "UN_PAM_CRSE_DTL_UN_AIMS"),
        ("offering", "ACAD_ORG_TBL_DESCRFORMAL"),
        ("semester", "SSR_CRSE_TYPOFF_DESCR"),
        ("requisites", "UN_PAM_CRSE_WRK_UN_PRE_CO_REQ_GRP"),
        ("outcome", "UN_QAA_CRSE_OUT_UN_LEARN_OUTCOME"),
    )
    convenors: SubTable = field(
        default_factory=lambda: SubTable(
            container_id="UN_PAM_CRS_CONV$scroll$0",
            fields=(("name", "UN_PAM_CRS_CONV_NAME52"),),
        )
    )
    classes: SubTable = field(
        default_factory=lambda: SubTable(
            container_id="UN_PAM_CRSE_FRQ$scroll$0",
            fields=(
                ("activity", "UN_PAM_CRSE_FRQ_SSR_COMPONENT"),
                ("num_of_weeks", "UN_PAM_EXTR_WRK_UN_CRSE_DURATN_WKS"),
                ("num_of_sessions", "UN_PAM_EXTR_WRK_UN_CRSE_NUM_SESN"),
                ("session_duration", "UN_PAM_EXTR_WRK_UN_CRSE_DURATN_SES"),
            ),
        )
    )
    assessments: SubTable = field(
        default_factory=lambda: SubTable(
            container_id="UN_QA_CRSE_ASAI$scroll$0",
            fields=(
                ("type", "UN_QA_CRSE_ASAI_DESCR50"),
                ("weight", "UN_QA_CRSE_ASAI_SSR_CW_WEIGHT"),
                ("requirements", "UN_QA_CRSE_ASAI_SSR_DESCRLONG"),
            ),
        )
    )


CATALOG_SELECTORS = CatalogSelectors()

__all__ = [
    "FieldMap",
    "SubTable",
    "CatalogSelectors",
    "CATALOG_SELECTORS",
]
