import pytest

from rss_links.models import LinkRecord


@pytest.fixture
def make_record():
    def _make(name: str, day: str = "2024-03-01") -> LinkRecord:
        return LinkRecord(title=name, url=f"https://example.com/{name}", date=day)

    return _make
