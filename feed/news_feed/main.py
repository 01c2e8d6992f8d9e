from __future__ import annotations

import argparse
import asyncio
import logging
from urllib.parse import parse_qsl

from opentelemetry import trace

from news_feed.core.config import Settings, get_settings
from news_feed.core.telemetry import FeedTelemetry, configure_feed_logging
from news_feed.engine import NewsFeedEngine
from news_feed.layout import LayoutAdjuster
from news_feed.page import NewsPage, PageKind, PageRender
from news_feed.rendering import NewsRenderer
from news_feed.services.news_client import NewsClient

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def build_page(settings: Settings, *, kind: PageKind, query_params: dict[str, str]) -> NewsPage:
    client = NewsClient(settings.data_url, timeout_seconds=settings.request_timeout_seconds)
    renderer = NewsRenderer(
        detail_page=settings.detail_page,
        list_page=settings.list_page,
        default_image=settings.default_image,
        summary_word_limit=settings.summary_word_limit,
    )
    return NewsPage(
        NewsFeedEngine(client),
        renderer,
        kind=kind,
        query_params=query_params,
        layout=LayoutAdjuster(cap=settings.image_height_cap),
        index_widget_size=settings.index_widget_size,
    )


async def render_page(kind: PageKind, query_string: str = "") -> PageRender:
    settings = get_settings()
    configure_feed_logging(settings)
    telemetry = FeedTelemetry(settings)
    telemetry.start()
    try:
        with tracer.start_as_current_span("news_feed.render_page") as span:
            span.set_attribute("news.page_kind", kind.value)
            page = build_page(settings, kind=kind, query_params=dict(parse_qsl(query_string, keep_blank_values=True)))
            rendered = await page.setup()
            span.set_attribute("news.view_state", rendered.view.state.value)
            if rendered.error_message:
                logger.warning("%s", rendered.error_message)
            return rendered
    finally:
        telemetry.stop()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="itf-news-feed", description="Render a news page fragment.")
    parser.add_argument(
        "kind",
        nargs="?",
        default=PageKind.NEWS.value,
        choices=[kind.value for kind in PageKind],
        help="page to render",
    )
    parser.add_argument("query", nargs="?", default="", help="page query string, e.g. id=<news id>")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    rendered = asyncio.run(render_page(PageKind(args.kind), args.query.lstrip("?")))
    print(rendered.view.html)
    return 1 if rendered.error_message else 0


if __name__ == "__main__":
    raise SystemExit(main())
