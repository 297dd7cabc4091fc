import pytest

from feedrelay.models import Source


@pytest.fixture
def rss_source() -> Source:
    return Source(id="example", name="Example News", url="https://news.example.com/feed")
