# File: page_scout/parser/sitemap_parser.py
"""page_scout.parser.sitemap_parser: Разбор sitemap.xml (index или urlset) и распаковка gzip."""

from __future__ import annotations

import gzip
import zlib
from dataclasses import dataclass, field
from typing import List, Literal

from lxml import etree

from page_scout.errors import ParseError

__all__ = ("SitemapDocument", "parse_sitemap", "maybe_gunzip")

GZIP_MAGIC = b"\x1f\x8b"


@dataclass(slots=True)
class SitemapDocument:
    """Разобранный sitemap: тип корня и адреса в порядке документа.

    Для ``index`` в ``locations`` лежат URL вложенных sitemap, для ``urlset`` —
    URL страниц.
    """

    kind: Literal["index", "urlset"]
    locations: List[str] = field(default_factory=list)


def maybe_gunzip(url: str, content: bytes, content_encoding: str = "") -> bytes:
    """Распаковывает тело, если сервер или суффикс ``.gz`` указывают на gzip.

    aiohttp уже снимает gzip транспортного уровня, поэтому распаковка делается
    только при наличии сигнатуры gzip в самих данных.
    """
    announced = "gzip" in content_encoding or url.lower().endswith(".gz")
    if not announced or not content.startswith(GZIP_MAGIC):
        return content
    try:
        return gzip.decompress(content)
    except (OSError, EOFError, zlib.error) as exc:
        raise ParseError(url, f"не удалось распаковать gzip: {exc}") from exc


def _child_locs(root: etree._Element, entry: str, *, keep_empty: bool = False) -> List[str]:
    """Текст каждого ``<entry><loc>`` в порядке документа.

    С ``keep_empty`` пустой ``<loc>`` даёт ``""``: N элементов ``<loc>`` — N адресов.
    """
    locs: List[str] = []
    for loc in root.iterfind(f"{{*}}{entry}/{{*}}loc"):
        text = (loc.text or "").strip()
        if text or keep_empty:
            locs.append(text)
    return locs


def parse_sitemap(xml_content: bytes, url: str = "") -> SitemapDocument:
    """Разбирает XML sitemap и возвращает :class:`SitemapDocument`.

    Args:
        xml_content: байты документа (уже распакованные).
        url: адрес документа, только для сообщений об ошибках.

    Raises:
        ParseError: XML некорректен или корень не ``<sitemapindex>``/``<urlset>``.

    Пример:
    ```python
    doc = parse_sitemap(b'<urlset><url><loc>https://example.com/</loc></url></urlset>')
    assert doc.kind == "urlset"
    ```
    """
    parser = etree.XMLParser(ns_clean=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(xml_content, parser=parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise ParseError(url, f"некорректный XML sitemap: {exc}") from exc
    if root is None:
        raise ParseError(url, "пустой документ sitemap")

    name = etree.QName(root).localname
    if name == "sitemapindex":
        return SitemapDocument("index", _child_locs(root, "sitemap"))
    if name == "urlset":
        return SitemapDocument("urlset", _child_locs(root, "url", keep_empty=True))
    raise ParseError(url, f"неверный формат sitemap: нет ни <sitemapindex>, ни <urlset> (корень <{name}>)")
