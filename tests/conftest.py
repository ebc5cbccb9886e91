import gzip
import logging
from collections.abc import AsyncIterator, Awaitable, Callable

import pytest
import pytest_asyncio
from aiohttp import web
from langchain_core.messages import AIMessage

from page_scout.config import DiscoveryConfig
from page_scout.crawler.fetcher import Fetcher, open_session
from page_scout.curation import CuratedPage
from page_scout.logger import LOGGER_NAME

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

ServeApp = Callable[[web.Application], Awaitable[str]]


def urlset_xml(urls) -> bytes:
    """Build a <urlset> sitemap body for *urls*."""
    entries = "".join(f"<url><loc>{u}</loc></url>" for u in urls)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset xmlns="{SITEMAP_NS}">{entries}</urlset>'.encode()


def index_xml(sitemaps) -> bytes:
    """Build a <sitemapindex> body referencing *sitemaps*."""
    entries = "".join(f"<sitemap><loc>{u}</loc></sitemap>" for u in sitemaps)
    return f'<?xml version="1.0" encoding="UTF-8"?><sitemapindex xmlns="{SITEMAP_NS}">{entries}</sitemapindex>'.encode()


def xml_response(body: bytes) -> web.Response:
    return web.Response(body=body, content_type="application/xml")


def gzip_response(body: bytes, *, as_content_encoding: bool) -> web.Response:
    """Return *body* gzipped, either as a transfer encoding or as a .gz file."""
    if as_content_encoding:
        return web.Response(
            body=gzip.compress(body),
            content_type="application/xml",
            headers={"Content-Encoding": "gzip"},
        )
    return web.Response(body=gzip.compress(body), content_type="application/x-gzip")


def html_page(title: str, extra_head: str = "") -> str:
    return (
        f"<html><head><title>{title}</title>{extra_head}</head>"
        f"<body><h1>{title}</h1></body></html>"
    )


class EchoCurator:
    """Deterministic curator: keeps every URL and labels it with *label*."""

    def __init__(self, label: str = "test") -> None:
        self.label = label
        self.narrow_calls: list[tuple[list[str], str]] = []
        self.select_calls: list[tuple[list[str], dict[str, str], str]] = []

    async def narrow_down(self, urls, category):
        self.narrow_calls.append((list(urls), category))
        return list(urls)

    async def select_and_categorize(self, urls, heads, category):
        self.select_calls.append((list(urls), dict(heads), category))
        return [CuratedPage(url=u, category=self.label) for u in urls]


class ScriptedChat:
    """Chat model stand-in: answers with *replies* in order and records prompts.

    A reply that is an exception instance is raised instead of returned.
    """

    def __init__(self, replies, **options) -> None:
        self.replies = list(replies)
        self.options = options
        self.prompts: list[str] = []

    async def ainvoke(self, messages):
        self.prompts.append(messages[-1].content)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return AIMessage(content=reply)


# --------------------------------------------------------------------------- #
#                                  Fixtures                                   #
# --------------------------------------------------------------------------- #


@pytest_asyncio.fixture
async def serve_app(unused_tcp_port_factory) -> AsyncIterator[ServeApp]:
    """Start aiohttp apps on free ports; every started app is cleaned up after the test."""
    runners: list[web.AppRunner] = []

    async def _serve(app: web.Application) -> str:
        runner = web.AppRunner(app)
        await runner.setup()
        port = unused_tcp_port_factory()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{port}"

    yield _serve
    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def closed_url(unused_tcp_port_factory) -> str:
    """URL of a port nobody listens on."""
    return f"http://127.0.0.1:{unused_tcp_port_factory()}/"


@pytest.fixture()
def fast_config() -> DiscoveryConfig:
    return DiscoveryConfig(timeout=2.0, head_delay=0.0, user_agent="TestAgent/1.0")


@pytest_asyncio.fixture
async def fetcher(fast_config) -> AsyncIterator[Fetcher]:
    async with open_session(fast_config) as session:
        yield Fetcher(session)


@pytest.fixture()
def propagate_logs(monkeypatch):
    """Let caplog see records from the project logger."""
    monkeypatch.setattr(logging.getLogger(LOGGER_NAME), "propagate", True)


@pytest.fixture()
def echo_curator() -> EchoCurator:
    return EchoCurator()
