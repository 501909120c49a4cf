from __future__ import annotations

from typing import Sequence, Tuple

import pytest

from catalog_crawler import config
from catalog_crawler.error_codes import ErrorCode, TraversalError, WaitTimeoutError
from catalog_crawler.models import TraversalConfig
from catalog_crawler.navigator import FormNavigator, NavState, SearchOutcome, year_label
from tests.fake_site import FakePage, FakeSite, course, two_school_site

RESOLVED = TraversalConfig(campus_code="N", campus="Nottingham", year_code="25", year="2025")


class Chooser:
    def __init__(self, answers: dict[str, str]) -> None:
        self.answers = answers
        self.calls: list[Tuple[str, list]] = []

    def __call__(self, question: str, options: Sequence[Tuple[str, str]]) -> str:
        self.calls.append((question, list(options)))
        return self.answers[question]


def _navigator(site: FakeSite | None = None) -> tuple[FormNavigator, FakePage]:
    page = FakePage(site or two_school_site())
    return FormNavigator(page, timeout_ms=10, nav_timeout_ms=10), page


def _at_criteria(nav: FormNavigator) -> None:
    nav.open_home()
    nav.enter_search_form()


def test_open_home_visits_portal_then_search_form() -> None:
    nav, page = _navigator()

    nav.open_home()

    assert page.gotos == [config.PORTAL_URL, config.SEARCH_URL]
    assert nav.state is NavState.HOME


def test_enter_search_form_reaches_criteria() -> None:
    nav, page = _navigator()
    nav.open_home()

    nav.enter_search_form()

    assert page.view == "criteria"
    assert nav.state is NavState.CRITERIA


def test_apply_axes_prompts_once_and_derives_labels() -> None:
    nav, page = _navigator()
    _at_criteria(nav)
    chooser = Chooser({"Which campus?": "M", "Which year?": "24"})

    resolved = nav.apply_axes(TraversalConfig(), chooser)

    assert resolved == TraversalConfig(
        campus_code="M", campus="Malaysia", year_code="24", year="2024"
    )
    assert [question for question, _ in chooser.calls] == ["Which campus?", "Which year?"]
    assert chooser.calls[0][1] == [("N", "Nottingham"), ("M", "Malaysia")]
    assert page.selected["UN_PAM_EXTR_WRK_CAMPUS"] == "M"
    assert page.selected["UN_PAM_EXTR_WRK_STRM"] == "24"


def test_apply_axes_with_resolved_config_never_prompts() -> None:
    nav, page = _navigator()
    _at_criteria(nav)
    chooser = Chooser({})

    assert nav.apply_axes(RESOLVED, chooser) == RESOLVED
    assert chooser.calls == []
    assert page.selected["UN_PAM_EXTR_WRK_STRM"] == "25"


def test_apply_axes_pinned_codes_derive_labels_without_prompt() -> None:
    nav, _ = _navigator()
    _at_criteria(nav)

    resolved = nav.apply_axes(TraversalConfig(campus_code="N", year_code="25"))

    assert resolved == RESOLVED


def test_apply_axes_unknown_code_is_config_error() -> None:
    nav, _ = _navigator()
    _at_criteria(nav)

    with pytest.raises(TraversalError) as excinfo:
        nav.apply_axes(TraversalConfig(campus_code="X"))

    assert excinfo.value.error_code == ErrorCode.CONFIG


def test_list_groups_in_option_order() -> None:
    nav, _ = _navigator()
    _at_criteria(nav)
    nav.apply_axes(RESOLVED)

    groups = nav.list_groups()

    assert [(g.code, g.name) for g in groups] == [("SCI", "Science"), ("ART", "Arts")]


def test_search_group_results_branch() -> None:
    nav, _ = _navigator()
    _at_criteria(nav)
    nav.apply_axes(RESOLVED)

    assert nav.search_group("SCI") is SearchOutcome.RESULTS
    assert nav.state is NavState.RESULTS


def test_search_group_empty_branch_and_return() -> None:
    site = two_school_site()
    site.courses["ART"] = []
    nav, page = _navigator(site)
    _at_criteria(nav)
    nav.apply_axes(RESOLVED)

    assert nav.search_group("ART") is SearchOutcome.EMPTY
    assert nav.state is NavState.EMPTY

    nav.return_to_criteria(RESOLVED)

    assert page.view == "criteria"
    assert nav.search_group("SCI") is SearchOutcome.RESULTS


def test_open_detail_then_reload_and_resume() -> None:
    nav, page = _navigator()
    _at_criteria(nav)
    nav.apply_axes(RESOLVED)
    nav.search_group("SCI")

    nav.open_detail(2)
    assert nav.state is NavState.DETAIL
    assert page.visits == [("SCI", 2)]

    assert nav.reload_and_resume(RESOLVED, "SCI") is SearchOutcome.RESULTS
    assert page.reloads == 1
    assert page.searches == ["SCI", "SCI"]


def test_missing_entry_button_times_out() -> None:
    nav, _ = _navigator()

    with pytest.raises(WaitTimeoutError) as excinfo:
        nav.enter_search_form()

    assert excinfo.value.error_code == ErrorCode.WAIT_TIMEOUT
    assert "UN_PAM_EXTR_WRK_UN_MODULE_PB" in excinfo.value.selector


def test_missing_detail_view_times_out() -> None:
    site = FakeSite(
        campuses=[("N", "Nottingham")],
        years=[("25", "2025")],
        schools=[("SCI", "Science")],
        courses={"SCI": [course("SCI1001", "Chemistry", fields={"code": None})]},
    )
    nav, _ = _navigator(site)
    _at_criteria(nav)
    nav.apply_axes(RESOLVED)
    nav.search_group("SCI")

    with pytest.raises(WaitTimeoutError):
        nav.open_detail(0)


@pytest.mark.parametrize(
    "text, expected",
    [("2025", "2025"), ("2024/25 Academic Year", "2024/25"), (" 2023 Spring ", "2023")],
)
def test_year_label(text: str, expected: str) -> None:
    assert year_label(text) == expected
