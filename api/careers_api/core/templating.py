from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from careers_api.core.config import get_settings

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def public_image_path(image: str | None) -> str:
    settings = get_settings()
    if not image:
        return settings.default_job_image
    return image.replace(settings.upload_path_prefix, settings.public_upload_path_prefix)


@lru_cache
def get_template_environment() -> Environment:
    environment = Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    environment.filters["public_image_path"] = public_image_path
    return environment


def render_template(name: str, **context: Any) -> str:
    context.setdefault("settings", get_settings())
    return get_template_environment().get_template(name).render(**context)
