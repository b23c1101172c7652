"""
Ingestion configuration.
One explicit struct handed to the engine instead of module-level globals.
"""

from dataclasses import dataclass, replace
from typing import Any, Optional

from django.conf import settings as django_settings
from django.core.exceptions import ImproperlyConfigured

DEFAULT_TX_KIND = "txfer"
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_PERSIST_EVERY = 10
DEFAULT_SOURCE_URL = "http://localhost:8080"
DEFAULT_SOURCE_TIMEOUT = 10.0
DEFAULT_CHECKPOINT_KEY = "singleton_metrics_state"


@dataclass(frozen=True)
class IngestConfig:
    """Configuration for one ingestion engine."""

    qualifying_kind: str = DEFAULT_TX_KIND
    poll_interval: float = DEFAULT_POLL_INTERVAL
    persist_every: int = DEFAULT_PERSIST_EVERY
    source_url: str = DEFAULT_SOURCE_URL
    source_timeout: float = DEFAULT_SOURCE_TIMEOUT
    checkpoint_key: str = DEFAULT_CHECKPOINT_KEY

    def __post_init__(self):
        if not self.qualifying_kind:
            raise ImproperlyConfigured("Qualifying transaction kind must not be empty")
        if self.poll_interval <= 0:
            raise ImproperlyConfigured(f"Poll interval must be positive, got {self.poll_interval}")
        if self.persist_every < 1:
            raise ImproperlyConfigured(f"Persist cadence must be at least 1 round, got {self.persist_every}")
        if self.source_timeout <= 0:
            raise ImproperlyConfigured(f"Source timeout must be positive, got {self.source_timeout}")
        if not self.checkpoint_key:
            raise ImproperlyConfigured("Checkpoint key must not be empty")

    @classmethod
    def from_settings(cls, settings: Optional[Any] = None) -> "IngestConfig":
        """Build configuration from Django settings (INGEST_* names)."""
        settings = settings or django_settings
        return cls(
            qualifying_kind=getattr(settings, "INGEST_TX_KIND", DEFAULT_TX_KIND),
            poll_interval=float(getattr(settings, "INGEST_POLL_INTERVAL", DEFAULT_POLL_INTERVAL)),
            persist_every=int(getattr(settings, "INGEST_PERSIST_EVERY", DEFAULT_PERSIST_EVERY)),
            source_url=getattr(settings, "INGEST_SOURCE_URL", DEFAULT_SOURCE_URL),
            source_timeout=float(getattr(settings, "INGEST_SOURCE_TIMEOUT", DEFAULT_SOURCE_TIMEOUT)),
            checkpoint_key=getattr(settings, "INGEST_CHECKPOINT_KEY", DEFAULT_CHECKPOINT_KEY),
        )

    def override(self, **changes) -> "IngestConfig":
        """Return a copy with the non-None values in `changes` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
