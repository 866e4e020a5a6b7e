"""Pytest configuration and shared fixtures."""

import pytest
from pathlib import Path
from typing import Dict, List, Union

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from feed_snapshot.errors import FetchError
from feed_snapshot.ingestion.interfaces import FetchedFeed, FetcherInterface, FetchOptions


SAMPLE_RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <title>Example Feed</title>
    <link>https://example.com/</link>
    <description>An example feed</description>
    <language>en-us</language>
    <generator>Example Generator</generator>
    <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
    <lastBuildDate>Tue, 02 Jan 2024 08:30:00 GMT</lastBuildDate>
    <item>
      <title>First Post</title>
      <link>https://example.com/first</link>
      <guid isPermaLink="false">post-1</guid>
      <pubDate>Mon, 01 Jan 2024 10:00:00 GMT</pubDate>
      <description>&lt;p&gt;Hello &amp;amp; welcome&lt;/p&gt;</description>
      <content:encoded><![CDATA[<p>Full text</p>]]></content:encoded>
      <itunes:duration>00:30:00</itunes:duration>
    </item>
    <item>
      <title>Second Post</title>
      <link>https://example.com/second</link>
      <guid isPermaLink="false">post-2</guid>
      <pubDate>Sun, 31 Dec 2023 09:00:00 GMT</pubDate>
      <description>Second description</description>
    </item>
  </channel>
</rss>
"""

SAMPLE_ATOM = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Example</title>
  <link href="https://example.org/" rel="alternate"/>
  <updated>2024-01-01T12:00:00Z</updated>
  <id>urn:uuid:60a76c80-d399-11d9-b93C-0003939e0af6</id>
  <entry>
    <title>Atom Entry</title>
    <link href="https://example.org/entry" rel="alternate"/>
    <id>urn:uuid:1225c695-cfb8-4ebb-aaaa-80da344efa6a</id>
    <updated>2024-01-01T12:00:00Z</updated>
    <summary>Entry summary</summary>
  </entry>
</feed>
"""

SAMPLE_JSON_FEED = b"""{
  "version": "https://jsonfeed.org/version/1.1",
  "title": "JSON Example",
  "home_page_url": "https://example.net/",
  "description": "A JSON feed",
  "items": [
    {
      "id": "1",
      "url": "https://example.net/1",
      "title": "JSON Item",
      "content_html": "<p>Item <b>body</b></p>",
      "date_published": "2024-01-01T12:00:00Z"
    }
  ]
}"""


class StubFetcher(FetcherInterface):
    """Fetcher returning canned payloads and recording every call."""

    def __init__(self, responses: Dict[str, Union[bytes, Exception]]):
        self.responses = responses
        self.calls: List[str] = []
        self.entered = 0

    async def __aenter__(self):
        self.entered += 1
        return self

    async def __aexit__(self, *args):
        return None

    async def fetch(self, url: str, options: FetchOptions = None) -> FetchedFeed:
        self.calls.append(url)
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return FetchedFeed(url=url, body=response)


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse."""

    def __init__(self, body: bytes = b"", status: int = 200, reason: str = "OK", headers=None):
        self.body = body
        self.status = status
        self.reason = reason
        self.headers = headers or {"Content-Type": "application/rss+xml"}

    async def read(self) -> bytes:
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        return False


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep runner environment variables out of the tests."""
    for name in (
        "INPUT_FEED_URL", "INPUT_FILE_PATH", "INPUT_PARSER_OPTIONS",
        "INPUT_FETCH_OPTIONS", "INPUT_REMOVE_PUBLISHED",
        "INPUT_REMOVE_LAST_BUILD_DATE", "INPUT_MODE", "GITHUB_OUTPUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_rss():
    return SAMPLE_RSS


@pytest.fixture
def sample_atom():
    return SAMPLE_ATOM


@pytest.fixture
def sample_json_feed():
    return SAMPLE_JSON_FEED


@pytest.fixture
def http_404():
    return FetchError("HTTP 404 Not Found", url="https://example.com/feed", status=404)
