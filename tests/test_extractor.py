from __future__ import annotations

import pytest

from catalog_crawler import extractor
from catalog_crawler.extractor import extract_detail, extract_listing, parse_html, parse_number
from catalog_crawler.models import Group, is_not_a_number
from tests.fake_site import FakePage, FakeSite, course

SCIENCE = Group(code="SCI", name="Science")


@pytest.fixture
def event_recorder(monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, dict]]:
    events: list[tuple[str, dict]] = []

    def _record(label: str, **fields: object) -> None:
        events.append((label, fields))

    monkeypatch.setattr(extractor, "_scraper_event", _record)
    return events


def _page_for(*courses, view: str = "detail", index: int = 0) -> FakePage:
    site = FakeSite(
        campuses=[("N", "Nottingham")],
        years=[("25", "2025")],
        schools=[("SCI", "Science")],
        courses={"SCI": list(courses)},
    )
    page = FakePage(site)
    page.view = view
    page.group = "SCI"
    page.detail_index = index
    return page


def test_extract_listing_in_page_order() -> None:
    page = _page_for(course("SCI1001", "Chemistry"), course("SCI1002", "Physics"), view="results")

    rows = extract_listing(parse_html(page.content()))

    assert [row.index for row in rows] == [0, 1]
    assert [row.code for row in rows] == ["SCI1001", "SCI1002"]
    assert rows[1].title == "Physics"
    assert rows[0].level == "Level 1"
    assert rows[0].semester == "Autumn"


def test_extract_detail_full_record() -> None:
    page = _page_for(
        course(
            "SCI1001",
            "Chemistry",
            convenors=["Ada Lovelace", "Alan Turing"],
            classes=[("Lecture", "11", "2", "1 hour"), ("Lab", "10", "1", "3 hours")],
            assessments=[("Exam", "70", "2 hour paper"), ("Coursework", "30", "Report")],
        )
    )

    record = extract_detail(parse_html(page.content()), SCIENCE)

    assert record.belongs_to == SCIENCE
    assert record.code == "SCI1001"
    assert record.title == "Chemistry"
    assert record.credits == 20
    assert record.level == 1
    assert record.summary == "<p>Chemistry summary</p>"
    assert [c.name for c in record.convenor] == ["Ada Lovelace", "Alan Turing"]
    assert record.classes[1].activity == "Lab"
    assert record.classes[0].session_duration == "1 hour"
    assert record.assessment[0].type == "Exam"
    assert record.assessment[1].weight == "30"

    document = record.to_document()
    assert document["belongsTo"] == {"code": "SCI", "name": "Science"}
    assert document["class"][0] == {
        "activity": "Lecture",
        "numOfWeeks": "11",
        "numOfSessions": "2",
        "sessionDuration": "1 hour",
    }
    assert document["assessment"][1]["requirements"] == "Report"


def test_missing_fields_are_none_and_rest_extracts() -> None:
    page = _page_for(course("SCI1001", "Chemistry", fields={"aims": None, "credits": None}))

    record = extract_detail(parse_html(page.content()), SCIENCE)

    assert record.aims is None
    assert record.credits is None
    assert record.title == "Chemistry"
    assert record.outcome == "Knowledge"
    assert record.convenor == ()
    assert record.classes == ()


def test_non_numeric_credits_become_not_a_number(event_recorder) -> None:
    page = _page_for(course("SCI1001", "Chemistry", fields={"credits": "N/A"}))

    record = extract_detail(parse_html(page.content()), SCIENCE)

    assert is_not_a_number(record.credits)
    assert record.credits != 0
    assert record.level == 1
    assert len(event_recorder) == 1
    label, fields = event_recorder[0]
    assert label == "warning"
    assert fields["field"] == "credits"
    assert fields["raw"] == "N/A"
    assert fields["course"] == "SCI1001"


@pytest.mark.parametrize(
    "raw, expected",
    [("20", 20), (" 10 ", 10), ("7.5", 7.5), (None, None)],
)
def test_parse_number_values(raw: str | None, expected) -> None:
    assert parse_number(raw, "credits") == expected


@pytest.mark.parametrize("raw", ["", "N/A", "twenty", "NaN", "nan", "inf", "-Infinity"])
def test_parse_number_sentinel(raw: str, event_recorder) -> None:
    assert is_not_a_number(parse_number(raw, "level"))
    assert event_recorder[0][1]["error_code"] == "numeric_parse"
