import textwrap

from rss_links.models import LinkRecord
from rss_links.section import (
    MARKER_END,
    MARKER_START,
    SEED_DOCUMENT,
    parse_section,
    render_document,
    render_section,
    sanitize_title,
)


def test_parse_section_extracts_entries_in_order():
    document = textwrap.dedent(
        f"""\
        # Reading list

        Intro text.

        {MARKER_START}
        - [Newest](https://example.com/new) - 2024-03-10
        - [Older](https://example.com/old) - 2024-03-01
        {MARKER_END}

        Footer.
        """
    )

    section = parse_section(document, "2024-03-15")

    assert section.entries == (
        LinkRecord("Newest", "https://example.com/new", "2024-03-10"),
        LinkRecord("Older", "https://example.com/old", "2024-03-01"),
    )
    assert section.prefix == "# Reading list\n\nIntro text.\n\n"
    assert section.suffix == "\n\nFooter.\n"


def test_parse_section_defaults_missing_date_and_drops_noise():
    document = (
        f"{MARKER_START}\n"
        "- [No date](https://example.com/a)\n"
        "some stray note\n"
        "* [Wrong bullet](https://example.com/b) - 2024-01-01\n"
        f"{MARKER_END}\n"
    )

    section = parse_section(document, "2024-03-15")

    assert section.entries == (
        LinkRecord("No date", "https://example.com/a", "2024-03-15"),
    )


def test_parse_section_without_markers_appends_section():
    document = "# Notes\n\nKeep me.\n\n\n"

    section = parse_section(document, "2024-03-15")

    assert section.entries == ()
    assert section.prefix == "# Notes\n\nKeep me.\n\n"
    assert section.suffix == "\n"
    rendered = render_document(section, [])
    assert rendered == f"# Notes\n\nKeep me.\n\n{MARKER_START}\n{MARKER_END}\n"


def test_parse_section_of_empty_document():
    section = parse_section("", "2024-03-15")

    assert section.prefix == ""
    assert render_document(section, []) == f"{MARKER_START}\n{MARKER_END}\n"


def test_end_marker_before_start_is_not_a_section():
    document = f"{MARKER_END}\ntext\n{MARKER_START}\n"

    section = parse_section(document, "2024-03-15")

    assert section.entries == ()
    assert section.prefix == document.rstrip() + "\n\n"


def test_seed_document_parses_to_empty_section():
    section = parse_section(SEED_DOCUMENT, "2024-03-15")

    assert section.entries == ()
    assert section.prefix == "# RSS Links\n\n"
    assert section.suffix == "\n"


def test_render_section_formats_entries():
    entries = [
        LinkRecord("A", "https://example.com/a", "2024-03-02"),
        LinkRecord("B", "https://example.com/b", "2024-03-01"),
    ]

    assert render_section(entries) == (
        f"{MARKER_START}\n"
        "- [A](https://example.com/a) - 2024-03-02\n"
        "- [B](https://example.com/b) - 2024-03-01\n"
        f"{MARKER_END}"
    )


def test_round_trip_preserves_entries_and_surrounding_text(make_record):
    entries = (make_record("one", "2024-03-03"), make_record("two", "2024-02-28"))
    original = "Top\n\n" + render_section(entries) + "\nBottom\n"

    section = parse_section(original, "2024-03-15")

    assert section.entries == entries
    assert render_document(section, section.entries) == original


def test_sanitize_title():
    assert sanitize_title("  [Breaking]   news\n\tnow ") == "Breaking news now"
    assert sanitize_title(None) == "Untitled"
    assert sanitize_title("") == "Untitled"


def test_sanitize_title_blank_after_cleaning_uses_placeholder():
    assert sanitize_title("   ") == "Untitled"
    assert sanitize_title("[]") == "Untitled"
    assert sanitize_title(" [ ] ") == "Untitled"


def test_blank_title_entry_survives_round_trip():
    entry = LinkRecord(sanitize_title("  "), "https://example.com/x", "2024-03-01")

    section = parse_section(render_section([entry]), "2024-03-15")

    assert section.entries == (entry,)


def test_non_ascii_digits_are_not_a_date():
    document = (
        f"{MARKER_START}\n"
        "- [a](https://e.com/a) - ٢٠٢٤-٠١-٠١\n"
        f"{MARKER_END}\n"
    )

    section = parse_section(document, "2024-03-15")

    assert section.entries == (LinkRecord("a", "https://e.com/a", "2024-03-15"),)


def test_stray_end_marker_before_start_still_finds_later_section():
    document = (
        f"{MARKER_END}\nintro\n{MARKER_START}\n"
        "- [A](https://example.com/a) - 2024-03-01\n"
        f"{MARKER_END}\n"
    )

    section = parse_section(document, "2024-03-15")

    assert section.prefix == f"{MARKER_END}\nintro\n"
    assert [entry.title for entry in section.entries] == ["A"]
