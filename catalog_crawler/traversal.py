"""Traversal of every school and every course of one campus/year.

``Traversal.run`` walks the two-level hierarchy (school x course) on one
page, strictly sequentially, and hands each course record to the sink.
``crawl`` owns the browser and releases it on every exit path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from playwright.sync_api import sync_playwright

from . import config
from .error_codes import ErrorCode, TraversalError
from .extractor import NUMERIC_FIELDS, extract_detail, extract_listing, snapshot
from .logging_utils import _scraper_event
from .models import DetailRecord, Group, ListingRow, TraversalConfig, is_not_a_number
from .navigator import AxisChooser, FormNavigator, SearchOutcome
from .sinks import RecordSink
from .utils import log_line

# Built once the campus and year are known; the sink is named after them.
SinkFactory = Callable[[TraversalConfig], RecordSink]


@dataclass
class TraversalSummary:
    config: TraversalConfig
    groups_total: int = 0
    groups_done: int = 0
    empty_groups: List[str] = field(default_factory=list)
    records_written: int = 0
    numeric_fallbacks: int = 0


class Traversal:
    """One run over all schools, driven through ``navigator``."""

    def __init__(
        self,
        navigator: FormNavigator,
        sink_factory: SinkFactory,
        traversal_config: Optional[TraversalConfig] = None,
        chooser: Optional[AxisChooser] = None,
    ) -> None:
        self.navigator = navigator
        self.sink_factory = sink_factory
        self.config = traversal_config or TraversalConfig()
        self.chooser = chooser
        self.sink: Optional[RecordSink] = None

    def run(self) -> TraversalSummary:
        nav = self.navigator
        nav.open_home()
        nav.enter_search_form()
        self.config = nav.apply_axes(self.config, self.chooser)
        log_line(
            f"[RUN] Config selected: campus={self.config.campus!r} year={self.config.year!r}"
        )
        self.sink = self.sink_factory(self.config)

        groups = nav.list_groups()
        summary = TraversalSummary(config=self.config, groups_total=len(groups))

        log_line("[RUN] Traversing...")
        for position, group in enumerate(groups, start=1):
            log_line(f"School <{group.name}> [{position}/{len(groups)}]")
            outcome = nav.search_group(group.code)
            if outcome is SearchOutcome.EMPTY:
                log_line("No courses")
                summary.empty_groups.append(group.code)
                nav.return_to_criteria(self.config)
            else:
                self._traverse_group(group, position, len(groups), summary)
                nav.reload_to_criteria(self.config)
            summary.groups_done += 1
            _scraper_event(
                "progress",
                phase="group_done",
                group=group.code,
                groups_done=summary.groups_done,
                groups_total=summary.groups_total,
                records_written=summary.records_written,
            )

        return summary

    def _listing(self, group: Group) -> List[ListingRow]:
        rows = extract_listing(snapshot(self.navigator.page), self.navigator.selectors)
        log_line(f"{len(rows)} Courses loaded for {group.code}")
        return rows

    def _traverse_group(
        self, group: Group, position: int, groups_total: int, summary: TraversalSummary
    ) -> None:
        nav = self.navigator
        listing = self._listing(group)
        total = len(listing)

        index = 0
        while index < total:
            row = listing[index]
            log_line(
                f"Course <{row.title}> [{index + 1}/{total}] "
                f"in School <{group.name}> [{position}/{groups_total}]"
            )
            nav.open_detail(row.index)
            record = extract_detail(snapshot(nav.page), group, nav.selectors)
            self._write(record, summary)

            outcome = nav.reload_and_resume(self.config, group.code)
            index += 1
            if index < total:
                listing = self._resumed_listing(outcome, group, index, total)

    def _resumed_listing(
        self, outcome: SearchOutcome, group: Group, index: int, total: int
    ) -> List[ListingRow]:
        # Indices from the previous render are stale; re-read the listing.
        if outcome is SearchOutcome.EMPTY:
            raise TraversalError(
                ErrorCode.SITE_STRUCTURE,
                f"School {group.code} returned no courses after reload (expected {total})",
            )
        listing = self._listing(group)
        if len(listing) != total:
            log_line(
                f"[RUN] Listing for {group.code} changed size after reload: {total} -> {len(listing)}",
                level=logging.WARNING,
            )
        if index >= len(listing):
            raise TraversalError(
                ErrorCode.SITE_STRUCTURE,
                f"Row {index} of school {group.code} is gone after reload",
            )
        return listing

    def _write(self, record: DetailRecord, summary: TraversalSummary) -> None:
        if self.sink is None:
            raise TraversalError(ErrorCode.INTERNAL, "Sink used before the campus and year were resolved")
        fallbacks = sum(1 for name in NUMERIC_FIELDS if is_not_a_number(getattr(record, name)))
        summary.numeric_fallbacks += fallbacks
        log_line("Uploading...")
        self.sink.write(record)
        summary.records_written += 1
        log_line("Uploaded")

    def close(self, *, quiet: bool = False) -> None:
        """Close the sink. ``quiet`` logs close failures instead of raising."""

        if self.sink is None:
            return
        try:
            self.sink.close()
        except Exception as exc:  # noqa: BLE001
            if not quiet:
                raise
            log_line(f"[SINK] Close failed after an earlier error: {exc}", level=logging.ERROR)


def crawl(
    sink_factory: SinkFactory,
    traversal_config: Optional[TraversalConfig] = None,
    chooser: Optional[AxisChooser] = None,
    *,
    headless: Optional[bool] = None,
) -> TraversalSummary:
    """Launch Chromium, run one traversal and always release the browser."""

    headless = config.HEADLESS if headless is None else headless
    log_line("[RUN] Starting the browser")
    with sync_playwright() as pw:
        browser = pw.chromium.launch(headless=headless, args=list(config.BROWSER_ARGS))
        try:
            context = browser.new_context(
                user_agent=config.USER_AGENT,
                viewport=config.VIEWPORT,
                is_mobile=True,
                has_touch=True,
            )
            try:
                page = context.new_page()
                log_line("[RUN] Browser is ready")
                traversal = Traversal(FormNavigator(page), sink_factory, traversal_config, chooser)
                try:
                    summary = traversal.run()
                except BaseException:
                    # The traversal error propagates; close failures are only logged.
                    traversal.close(quiet=True)
                    raise
                traversal.close()
                return summary
            finally:
                context.close()
        finally:
            browser.close()
            _scraper_event("state", phase="browser_closed")


__all__ = ["SinkFactory", "TraversalSummary", "Traversal", "crawl"]
