"""Dependency wiring for the table store server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import structlog
from opentelemetry import trace

from tablestore.adapters.outbound.file_snapshot_store import FileSnapshotStore
from tablestore.application.state_manager import StateManager
from tablestore.infrastructure.config import Config, get_config
from tablestore.infrastructure.logging import get_logger, setup_logging
from tablestore.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from tablestore.infrastructure.tracing import setup_tracing


@dataclass
class Container:
    """Process-wide components of a table store server."""

    config: Config
    logger: structlog.BoundLogger
    tracer: trace.Tracer
    metrics: MetricsRegistry
    store: FileSnapshotStore
    state: StateManager

    _instance: ClassVar[Container | None] = None

    @classmethod
    def create(cls, config: Config | None = None) -> Container:
        """Create the container, loading the snapshot from disk.

        Args:
            config: Configuration to use; defaults to get_config().
        """
        if cls._instance is not None:
            return cls._instance

        config = config or get_config()
        setup_logging(config.observability)
        logger = get_logger("tablestore")
        tracer = setup_tracing(config.observability)

        if config.server.metrics_enabled:
            metrics = setup_metrics(config.server.metrics_port)
        else:
            metrics = get_metrics()

        config.ensure_directories()
        store = FileSnapshotStore(config.snapshot_path, atomic_writes=config.storage.atomic_writes)
        state = StateManager.open(store, metrics=metrics)

        cls._instance = cls(
            config=config,
            logger=logger,
            tracer=tracer,
            metrics=metrics,
            store=store,
            state=state,
        )

        logger.info(
            "tablestore_container_initialized",
            snapshot=store.location,
            atomic_writes=store.atomic_writes,
            metrics_enabled=config.server.metrics_enabled,
        )

        return cls._instance

    @classmethod
    def get(cls) -> Container:
        """Get the singleton container instance."""
        if cls._instance is None:
            return cls.create()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the container (useful for testing)."""
        cls._instance = None
