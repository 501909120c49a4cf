"""Form navigation for the course extract page.

The page is a server-driven state machine::

    HOME -> CRITERIA -> RESULTS | EMPTY -> DETAIL
                 ^                           |
                 +------ reload + replay ----+

Back-navigation out of a detail view does not leave the session in a state
the next search can trust, so after every detail visit the whole page is
reloaded and the criteria and group search are replayed. Row indices are
only valid against the listing rendered right after that replay.
"""

from __future__ import annotations

import enum
from contextlib import contextmanager
from dataclasses import replace
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from playwright.sync_api import Error as PWError, Page, TimeoutError as PWTimeout

from . import config
from .error_codes import ErrorCode, TraversalError, WaitTimeoutError
from .extractor import snapshot
from .identifiers import element_id, id_selector, option_values
from .logging_utils import _scraper_event
from .models import Group, TraversalConfig
from .selectors import CATALOG_SELECTORS, CatalogSelectors
from .utils import log_line

Option = Tuple[str, str]
# (question, [(value, text), ...]) -> chosen value
AxisChooser = Callable[[str, Sequence[Option]], str]


class NavState(enum.Enum):
    BLANK = "blank"
    HOME = "home"
    CRITERIA = "criteria"
    RESULTS = "results"
    EMPTY = "empty"
    DETAIL = "detail"


class SearchOutcome(enum.Enum):
    """Which of the two mutually exclusive fragments a search rendered."""

    RESULTS = "results"
    EMPTY = "empty"


def year_label(option_text: str) -> str:
    """``"2025/26 Academic Year"`` -> ``"2025/26"``."""

    parts = option_text.strip().split(" ")
    return parts[0] if parts else ""


class FormNavigator:
    """Drives one Playwright page through the course search form."""

    def __init__(
        self,
        page: Page,
        selectors: CatalogSelectors = CATALOG_SELECTORS,
        *,
        timeout_ms: Optional[int] = None,
        nav_timeout_ms: Optional[int] = None,
    ) -> None:
        self.page = page
        self.selectors = selectors
        self.timeout_ms = timeout_ms if timeout_ms is not None else config.selector_timeout_ms()
        self.nav_timeout_ms = (
            nav_timeout_ms if nav_timeout_ms is not None else config.nav_timeout_ms()
        )
        self.state = NavState.BLANK

    # -- low level -----------------------------------------------------

    @contextmanager
    def _bounded(self, step: str, selector: str) -> Iterator[None]:
        try:
            yield
        except PWTimeout as exc:
            _scraper_event(
                "error",
                phase="nav",
                step=step,
                error_code=ErrorCode.WAIT_TIMEOUT,
                selector=selector,
                state=self.state.value,
                error=str(exc),
            )
            raise WaitTimeoutError(
                selector, f"Timed out during {step} waiting for {selector}"
            ) from exc

    def _wait(self, selector: str, step: str) -> None:
        with self._bounded(step, selector):
            self.page.wait_for_selector(selector, state="attached", timeout=self.timeout_ms)

    def _click(self, selector: str, step: str, **kwargs) -> None:
        with self._bounded(step, selector):
            self.page.click(selector, timeout=self.timeout_ms, **kwargs)

    def _select(self, select_id: str, value: str, step: str) -> None:
        selector = id_selector(select_id)
        with self._bounded(step, selector):
            self.page.select_option(selector, value, timeout=self.timeout_ms)

    # -- HOME / CRITERIA -----------------------------------------------

    def open_home(self) -> None:
        """Load the portal, then the search component it frames."""

        for url in (config.PORTAL_URL, config.SEARCH_URL):
            log_line(f"[NAV] Opening {url}")
            with self._bounded("goto", url):
                self.page.goto(url, wait_until="domcontentloaded", timeout=self.nav_timeout_ms)
        self.state = NavState.HOME

    def reload(self) -> None:
        log_line("[NAV] Reloading page...")
        with self._bounded("reload", "page"):
            self.page.reload(wait_until="domcontentloaded", timeout=self.nav_timeout_ms)
        self.state = NavState.HOME

    def enter_search_form(self) -> None:
        """HOME -> CRITERIA: click 'Search for Courses' and wait for the form."""

        entry = id_selector(self.selectors.entry_button_id)
        log_line("[NAV] Clicking 'Search for Courses' button...")
        self._wait(entry, "wait_entry_button")
        self._click(entry, "click_entry_button")
        self._wait(id_selector(self.selectors.campus_select_id), "wait_criteria_form")
        self.state = NavState.CRITERIA

    def _options(self, select_id: str) -> List[Option]:
        return option_values(snapshot(self.page), select_id)

    def _choose(
        self,
        axis: str,
        question: str,
        select_id: str,
        preset: Optional[str],
        chooser: Optional[AxisChooser],
    ) -> Option:
        options = self._options(select_id)
        code = preset
        if not code:
            if chooser is None:
                raise TraversalError(
                    ErrorCode.CONFIG, f"No {axis} selected and no chooser available"
                )
            log_line(f"[NAV] Selecting a {axis}...")
            code = chooser(question, options)
        for value, text in options:
            if value == code:
                return value, text
        raise TraversalError(
            ErrorCode.CONFIG,
            f"{axis.capitalize()} {code!r} is not offered; choices: {[v for v, _ in options]}",
        )

    def apply_axes(
        self, traversal_config: TraversalConfig, chooser: Optional[AxisChooser] = None
    ) -> TraversalConfig:
        """Select campus and year, resolving them first if needed.

        Returns the resolved config. Labels are read from the option lists
        only while unresolved; a resolved config is applied as-is.
        """

        resolved = traversal_config
        sel = self.selectors

        if not resolved.campus_resolved:
            code, text = self._choose(
                "campus", "Which campus?", sel.campus_select_id, resolved.campus_code, chooser
            )
            resolved = replace(resolved, campus_code=code, campus=text.strip())
        self._select(sel.campus_select_id, resolved.campus_code, "select_campus")

        log_line("[NAV] Waiting for academic year data...")
        year_select = id_selector(sel.year_select_id)
        if resolved.year_code:
            year_option = f'{year_select} > option[value="{resolved.year_code}"]'
        else:
            year_option = f'{year_select} > option:not([value=""])'
        self._wait(year_option, "wait_year_options")

        if not resolved.year_resolved:
            code, text = self._choose(
                "academic year", "Which year?", sel.year_select_id, resolved.year_code, chooser
            )
            resolved = replace(resolved, year_code=code, year=year_label(text))
        self._select(sel.year_select_id, resolved.year_code, "select_year")

        self.state = NavState.CRITERIA
        return resolved

    def list_groups(self) -> List[Group]:
        """Enumerate the schools offered by the group filter."""

        log_line("[NAV] Get schools data...")
        self._wait(id_selector(self.selectors.group_select_id), "wait_group_select")
        groups = [
            Group(code=value, name=text)
            for value, text in self._options(self.selectors.group_select_id)
        ]
        _scraper_event("nav", step="groups_loaded", count=len(groups))
        return groups

    # -- RESULTS / EMPTY -----------------------------------------------

    def search_group(self, group_code: str) -> SearchOutcome:
        """Search one school and report which fragment the site rendered."""

        sel = self.selectors
        self._wait(id_selector(sel.group_select_id), "wait_group_select")
        self._select(sel.group_select_id, group_code, "select_group")
        self._click(id_selector(sel.search_button_id), "click_search")

        results = id_selector(sel.results_panel_id)
        empty = id_selector(sel.empty_panel_id)
        # One wait on either fragment; whichever is attached decides the branch.
        self._wait(f"{results}, {empty}", "wait_results_or_empty")
        try:
            has_results = self.page.query_selector(results) is not None
        except PWError as exc:
            raise TraversalError(ErrorCode.SITE_STRUCTURE, f"Cannot inspect results: {exc}") from exc

        outcome = SearchOutcome.RESULTS if has_results else SearchOutcome.EMPTY
        self.state = NavState.RESULTS if has_results else NavState.EMPTY
        _scraper_event("nav", step="search", group=group_code, outcome=outcome.value)
        return outcome

    def return_to_criteria(self, traversal_config: TraversalConfig) -> None:
        """EMPTY -> CRITERIA for the next school, reusing the resolved axes."""

        log_line("[NAV] Backing to search page")
        self.enter_search_form()
        self.apply_axes(traversal_config)

    # -- DETAIL ----------------------------------------------------------

    def open_detail(self, index: int) -> None:
        """RESULTS -> DETAIL for listing row ``index``."""

        link = id_selector(element_id(self.selectors.listing_link_field, index))
        self._click(link, "open_detail", button="middle")
        self._wait(
            id_selector(element_id(self.selectors.detail_anchor_field, 0)),
            "wait_detail",
        )
        self.state = NavState.DETAIL

    def reload_to_criteria(self, traversal_config: TraversalConfig) -> None:
        """Reload and replay HOME -> CRITERIA with the resolved axes."""

        self.reload()
        self.enter_search_form()
        self.apply_axes(traversal_config)

    def reload_and_resume(self, traversal_config: TraversalConfig, group_code: str) -> SearchOutcome:
        """Reload and replay the search for ``group_code`` from scratch."""

        self.reload_to_criteria(traversal_config)
        return self.search_group(group_code)


__all__ = [
    "AxisChooser",
    "NavState",
    "SearchOutcome",
    "FormNavigator",
    "year_label",
]
