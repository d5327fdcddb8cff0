from datetime import date

import pytest

from rss_links.feeds import to_link_record
from rss_links.merge import merge_links
from rss_links.models import FeedItem, LinkRecord
from rss_links.section import parse_section, render_document


def test_cap_evicts_oldest_entries(make_record):
    existing = [make_record("A"), make_record("B"), make_record("C")]
    fresh = [make_record("D"), make_record("E"), make_record("F"), make_record("G")]

    result = merge_links(fresh, existing, cap=5)

    assert [r.title for r in result.final_entries] == ["D", "E", "F", "G", "A"]
    assert result.added_count == 4
    assert result.evicted_count == 2


def test_duplicates_of_existing_entries_are_filtered():
    existing = [
        LinkRecord(
            "A",
            "https://x.com/a?utm_source=github&utm_medium=o&utm_campaign=r",
            "2024-03-01",
        )
    ]
    fresh = [LinkRecord("A again", "https://x.com/a", "2024-03-02")]

    result = merge_links(fresh, existing, cap=10)

    assert result.added_count == 0
    assert result.final_entries == tuple(existing)


def test_empty_fresh_items_leave_existing_untouched(make_record):
    existing = [make_record(name) for name in "ABCDEFG"]

    result = merge_links([], existing, cap=3)

    assert result.added_count == 0
    assert result.evicted_count == 0
    assert result.final_entries == tuple(existing)


def test_second_merge_with_no_fresh_items_is_idempotent(make_record):
    first = merge_links([make_record("N")], [make_record("A")], cap=10)

    second = merge_links([], first.final_entries, cap=10)

    assert second.added_count == 0
    assert second.final_entries == first.final_entries


def test_duplicates_within_one_run_are_kept(make_record):
    fresh = [make_record("same"), make_record("same")]

    result = merge_links(fresh, [], cap=10)

    assert result.added_count == 2
    assert len(result.final_entries) == 2


def test_added_entries_include_items_beyond_the_cap(make_record):
    fresh = [make_record(str(i)) for i in range(4)]

    result = merge_links(fresh, [make_record("old")], cap=2)

    assert [r.title for r in result.final_entries] == ["0", "1"]
    assert result.added_count == 4
    assert result.evicted_count == 3


def test_invalid_cap_raises(make_record):
    with pytest.raises(ValueError):
        merge_links([make_record("A")], [], cap=0)


def test_blank_titled_item_is_not_added_twice():
    record = to_link_record(
        FeedItem(title="   ", link="https://example.com/x"), "o", "r", date(2024, 3, 15)
    )
    first = merge_links([record], [], cap=10)
    document = render_document(parse_section("", "2024-03-15"), first.final_entries)

    second = merge_links([record], parse_section(document, "2024-03-15").entries, cap=10)

    assert second.added_count == 0
