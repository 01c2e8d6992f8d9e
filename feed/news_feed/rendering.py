from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence
from urllib.parse import urlencode

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from news_feed.filters import short_summary
from news_feed.models import NewsItem

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

MESSAGES = {
    "empty": "ニュースデータがありません。",
    "not_found": "ニュースが見つかりませんでした。",
    "fetch_failed": "ニュースデータの取得に失敗しました。詳細: {reason}",
}


class ViewKind(str, Enum):
    INDEX_WIDGET = "index_widget"
    LIST = "list"
    DETAIL = "detail"


class ViewState(str, Enum):
    READY = "ready"
    READY_EMPTY = "ready_empty"
    NOT_FOUND = "not_found"
    FETCH_FAILED = "fetch_failed"


@dataclass(slots=True)
class RenderedView:
    kind: ViewKind
    state: ViewState
    html: str
    card_ids: tuple[str, ...] = ()
    has_images: bool = False


class NewsRenderer:
    def __init__(
        self,
        *,
        detail_page: str = "news.html",
        list_page: str = "news.html",
        default_image: str = "images/default-news.jpg",
        summary_word_limit: int = 50,
    ) -> None:
        self.detail_page = detail_page
        self.list_page = list_page
        self.default_image = default_image
        self.summary_word_limit = summary_word_limit
        self._environment = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=select_autoescape(["html"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def detail_href(self, item: NewsItem) -> str:
        return f"{self.detail_page}?{urlencode({'id': item.id})}"

    def render_index_widget(self, items: Sequence[NewsItem], *, fetch_failed: bool = False) -> RenderedView:
        html = self._render("index_widget.html", cards=self._cards(items))
        return RenderedView(
            kind=ViewKind.INDEX_WIDGET,
            state=self._collection_state(items, fetch_failed),
            html=html,
            card_ids=tuple(item.id for item in items),
            has_images=False,
        )

    def render_list(self, items: Sequence[NewsItem], *, fetch_failed: bool = False) -> RenderedView:
        html = self._render("news_list.html", cards=self._cards(items), default_image=self.default_image)
        return RenderedView(
            kind=ViewKind.LIST,
            state=self._collection_state(items, fetch_failed),
            html=html,
            card_ids=tuple(item.id for item in items),
            has_images=bool(items),
        )

    def render_detail(self, item: NewsItem | None, *, fetch_failed: bool = False) -> RenderedView:
        html = self._render(
            "news_detail.html",
            item=item,
            default_image=self.default_image,
            back_href=self.list_page,
        )
        if item is not None:
            state = ViewState.READY
        elif fetch_failed:
            state = ViewState.FETCH_FAILED
        else:
            state = ViewState.NOT_FOUND
        return RenderedView(
            kind=ViewKind.DETAIL,
            state=state,
            html=html,
            card_ids=(item.id,) if item is not None else (),
            has_images=item is not None,
        )

    def _cards(self, items: Sequence[NewsItem]) -> list[dict[str, object]]:
        return [
            {
                "item": item,
                "summary": short_summary(item.summary, self.summary_word_limit),
                "href": self.detail_href(item),
            }
            for item in items
        ]

    def _render(self, template_name: str, **context: object) -> str:
        template = self._environment.get_template(template_name)
        return template.render(messages=MESSAGES, **context).strip()

    @staticmethod
    def _collection_state(items: Sequence[NewsItem], fetch_failed: bool) -> ViewState:
        if fetch_failed:
            return ViewState.FETCH_FAILED
        return ViewState.READY if items else ViewState.READY_EMPTY


def fetch_failed_message(reason: str) -> str:
    return MESSAGES["fetch_failed"].format(reason=reason)
