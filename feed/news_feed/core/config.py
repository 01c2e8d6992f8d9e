from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    environment: str = "dev"
    data_url: str = "http://localhost:8000/news/data"
    request_timeout_seconds: float = 10.0
    summary_word_limit: int = 50
    index_widget_size: int = 3
    image_height_cap: int = 300
    default_image: str = "images/default-news.jpg"
    list_page: str = "news.html"
    detail_page: str = "news.html"
    otel_enabled: bool = True
    otel_service_name: str = "itf-news-feed"
    otel_exporter_otlp_endpoint: str | None = None
    otel_exporter_otlp_headers: str | None = None
    otel_trace_sample_ratio: float = 1.0
    otel_log_correlation: bool = True

    model_config = SettingsConfigDict(env_prefix="ITF_NEWS_", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
