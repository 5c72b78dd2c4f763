"""HTML page extraction: anchor hrefs and element ids."""

from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup

from ..types import ParseResult


@dataclass(slots=True)
class PageExtractorConfig:
    """Config for link/id extraction."""

    parser_features: str = "lxml"
    link_tags: tuple[str, ...] = ("a",)


class PageExtractor:
    """Walk an HTML document once, collecting hrefs and ids in document order.

    Hrefs are de-duplicated by raw value, keeping the first occurrence. Ids are
    returned as found, repeats included; callers treat them as a set.
    """

    def __init__(self, config: PageExtractorConfig | None = None) -> None:
        self.config = config or PageExtractorConfig()

    def parse(self, html: str | bytes) -> ParseResult:
        soup = BeautifulSoup(self._coerce_html_text(html), self.config.parser_features)

        result = ParseResult()
        seen_links: set[str] = set()

        for element in soup.find_all(True):
            element_id = element.get("id")
            if isinstance(element_id, str) and element_id:
                result.ids.append(element_id)

            if element.name not in self.config.link_tags:
                continue

            href = element.get("href")
            if not isinstance(href, str):
                continue
            href = href.strip()
            if not href or href in seen_links:
                continue

            seen_links.add(href)
            result.links.append(href)

        return result

    @staticmethod
    def _coerce_html_text(html: str | bytes) -> str:
        if isinstance(html, bytes):
            return html.decode("utf-8", errors="replace")
        return html


__all__ = [
    "PageExtractor",
    "PageExtractorConfig",
]
