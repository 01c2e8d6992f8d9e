from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import DEPLOYMENT_ENVIRONMENT, SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from news_feed.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s trace_id=%(trace_id)s span_id=%(span_id)s %(message)s"
PLAIN_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

logger = logging.getLogger(__name__)


class TraceContextFilter(logging.Filter):
    """Stamps every record with the active span's ids so LOG_FORMAT always resolves."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = trace.get_current_span().get_span_context()
        if context.is_valid:
            record.trace_id = format(context.trace_id, "032x")
            record.span_id = format(context.span_id, "016x")
        else:
            record.trace_id = "0" * 32
            record.span_id = "0" * 16
        return True


@dataclass(slots=True)
class FeedTelemetry:
    settings: Settings
    provider: TracerProvider | None = None
    _instrumentor: HTTPXClientInstrumentor = field(default_factory=HTTPXClientInstrumentor)

    @property
    def enabled(self) -> bool:
        return self.provider is not None

    def start(self) -> None:
        if not self.settings.otel_enabled or self.provider is not None:
            return
        provider = TracerProvider(
            resource=Resource.create(
                {
                    SERVICE_NAME: self.settings.otel_service_name,
                    DEPLOYMENT_ENVIRONMENT: self.settings.environment,
                }
            ),
            sampler=TraceIdRatioBased(self.settings.otel_trace_sample_ratio),
        )
        endpoint = (
            self.settings.otel_exporter_otlp_endpoint
            or os.getenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT")
            or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        )
        if endpoint:
            headers = parse_otlp_headers(self.settings.otel_exporter_otlp_headers or os.getenv("OTEL_EXPORTER_OTLP_HEADERS"))
            provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, headers=headers or None)))
        else:
            logger.info("OTel exporter endpoint not set; spans remain local-only for service=%s", self.settings.otel_service_name)
        trace.set_tracer_provider(provider)
        self._instrumentor.instrument(tracer_provider=provider)
        self.provider = provider

    def stop(self) -> None:
        if self.provider is None:
            return
        self._instrumentor.uninstrument()
        self.provider.force_flush()
        self.provider.shutdown()
        self.provider = None


def configure_feed_logging(settings: Settings) -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    handler = logging.StreamHandler()
    if settings.otel_log_correlation:
        handler.addFilter(TraceContextFilter())
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(logging.INFO)


def parse_otlp_headers(raw: str | None) -> dict[str, str]:
    if raw is None:
        return {}
    parsed: dict[str, str] = {}
    for item in raw.split(","):
        key, separator, value = item.partition("=")
        if separator and key.strip():
            parsed[key.strip()] = value.strip()
    return parsed
