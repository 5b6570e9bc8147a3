"""
Collector factory.

Single source of truth for configuration: the collector is built from
Settings (pydantic-settings), never from raw os.getenv calls.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from urllib.parse import urlsplit

from watersurvey.collector.http import HttpCollector
from watersurvey.collector.interface import SurveyCollector
from watersurvey.collector.mock import InMemoryCollector
from watersurvey.config import CollectorType, Settings, get_settings

logger = logging.getLogger(__name__)


def _mask_url(url: str) -> str:
    """Keep scheme and host only; script ids act as write credentials."""
    if not url:
        return ""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}/***"


def create_collector(settings: Settings | None = None) -> SurveyCollector:
    cfg = settings or get_settings()

    logger.info(
        "Collector config resolved",
        extra={
            "collector_type": cfg.collector_type.value,
            "collector_url": _mask_url(cfg.collector_url),
            "collector_configured": cfg.collector_configured,
            "timeout_seconds": cfg.collector_timeout_seconds,
        },
    )

    if cfg.collector_type == CollectorType.HTTP:
        return HttpCollector(settings=cfg)

    if cfg.collector_type == CollectorType.MOCK:
        return InMemoryCollector()

    raise ValueError(f"Unsupported collector_type: {cfg.collector_type}")


@lru_cache(maxsize=1)
def get_collector() -> SurveyCollector:
    """Create and cache the process-wide collector."""
    return create_collector()
