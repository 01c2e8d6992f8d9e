from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Mapping

from news_feed.engine import FeedState, FeedStateError, NewsFeedEngine
from news_feed.filters import NewsFilterCriteria
from news_feed.layout import LayoutAdjuster, MeasureContent
from news_feed.rendering import NewsRenderer, RenderedView, ViewKind

logger = logging.getLogger(__name__)

DETAIL_PARAM = "id"


class PageKind(str, Enum):
    INDEX = "index"
    NEWS = "news"


@dataclass(slots=True)
class PageRender:
    view: RenderedView
    filter_bar_visible: bool
    intro_visible: bool
    error_message: str | None = None
    image_heights: dict[str, int] | None = None


class NewsPage:
    """Picks and renders the view for one page load, then handles filter/resize events."""

    def __init__(
        self,
        engine: NewsFeedEngine,
        renderer: NewsRenderer,
        *,
        kind: PageKind,
        query_params: Mapping[str, str] | None = None,
        layout: LayoutAdjuster | None = None,
        index_widget_size: int = 3,
    ) -> None:
        self.engine = engine
        self.renderer = renderer
        self.kind = kind
        self.query_params = dict(query_params or {})
        self.layout = layout or LayoutAdjuster()
        self.index_widget_size = index_widget_size
        self.criteria = NewsFilterCriteria()
        self._current: PageRender | None = None

    @property
    def detail_address(self) -> str | None:
        return self.query_params.get(DETAIL_PARAM)

    async def setup(self, measure: MeasureContent | None = None) -> PageRender:
        if self.engine.state is FeedState.UNINITIALIZED:
            await self.engine.load()
        failed = self.engine.state is FeedState.FETCH_FAILED

        if self.kind is PageKind.INDEX:
            view = self.renderer.render_index_widget(
                self.engine.latest(self.index_widget_size),
                fetch_failed=failed,
            )
        elif self.detail_address is not None:
            view = self.renderer.render_detail(self.engine.resolve(self.detail_address), fetch_failed=failed)
        else:
            view = self.renderer.render_list(self.engine.view(self.criteria), fetch_failed=failed)

        return self._present(view, measure)

    def change_filters(
        self,
        *,
        category: str | None = None,
        date_order: str | None = None,
        measure: MeasureContent | None = None,
    ) -> PageRender:
        if self.engine.state is not FeedState.READY:
            raise FeedStateError(f"filters unavailable (state={self.engine.state.value})")
        if self._current is None or self._current.view.kind is not ViewKind.LIST:
            raise FeedStateError("filters are only available on the news list view")

        update: dict[str, str] = {}
        if category is not None:
            update["category"] = category
        if date_order is not None:
            update["dateOrder"] = date_order
        self.criteria = NewsFilterCriteria(**{**self.criteria.model_dump(by_alias=True), **update})
        logger.info("news filters changed category=%s date_order=%s", self.criteria.category, self.criteria.date_order)

        view = self.renderer.render_list(self.engine.view(self.criteria))
        return self._present(view, measure)

    def resize(self, measure: MeasureContent) -> dict[str, int]:
        return self.layout.adjust(measure)

    def categories(self) -> list[str]:
        if self.engine.state is not FeedState.READY:
            return []
        return self.engine.categories()

    def _present(self, view: RenderedView, measure: MeasureContent | None) -> PageRender:
        self.layout.track(view.card_ids, has_images=view.has_images)
        on_detail = self.detail_address is not None and self.kind is PageKind.NEWS
        self._current = PageRender(
            view=view,
            filter_bar_visible=self.kind is PageKind.NEWS and not on_detail,
            intro_visible=not on_detail,
            error_message=self.engine.error_message,
            image_heights=self.layout.adjust(measure) if measure is not None else None,
        )
        return self._current
