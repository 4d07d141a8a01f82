from __future__ import annotations

import asyncio
from typing import Literal, Optional

from selectolax.lexbor import LexborHTMLParser, LexborNode

ReadyState = Literal["loading", "interactive", "complete"]


class PageDocument:
    """Read-only snapshot of a rendered wishlist page.

    A page created in the ``loading`` state exposes whatever markup it was given
    so far. ``mark_loaded`` swaps in the final markup and releases anyone
    waiting in ``wait_until_loaded``.
    """

    def __init__(self, html: str, url: str | None = None, ready_state: ReadyState = "complete"):
        self.url = url
        self._html = html
        self._ready_state: ReadyState = ready_state
        self._parser: LexborHTMLParser | None = None
        self._loaded = asyncio.Event()
        if ready_state != "loading":
            self._loaded.set()

    @property
    def ready_state(self) -> ReadyState:
        return self._ready_state

    @property
    def html(self) -> str:
        return self._html

    @property
    def parser(self) -> LexborHTMLParser:
        if self._parser is None:
            self._parser = LexborHTMLParser(self._html)
        return self._parser

    def css(self, selector: str) -> list[LexborNode]:
        return self.parser.css(selector)

    def css_first(self, selector: str) -> Optional[LexborNode]:
        return self.parser.css_first(selector)

    def mark_loaded(self, html: str | None = None) -> None:
        if html is not None:
            self._html = html
            self._parser = None
        self._ready_state = "complete"
        self._loaded.set()

    async def wait_until_loaded(self) -> None:
        await self._loaded.wait()
