"""
Ingestion engine: load the checkpoint, backfill to the frontier, follow the
source live, and persist the checkpoint on the way out.
"""

import enum
import logging
import threading
from typing import Optional

from .backfill import BackfillCoordinator, BackfillResult
from .config import IngestConfig
from .errors import BackfillFailed, IngestError, SourceUnavailable, StoreUnavailable
from .interfaces import CheckpointStore, SourceGateway, TransactionSink
from .poller import LivePoller
from .processor import BlockProcessor
from .types import Checkpoint

logger = logging.getLogger(__name__)


class EngineState(enum.Enum):
    CREATED = "created"
    LOADING = "loading"
    BACKFILLING = "backfilling"
    POLLING = "polling"
    DRAINING = "draining"
    TERMINATED = "terminated"


class IngestEngine:
    """
    Owns the checkpoint and drives it through a single worker.

    run() blocks until stop() is called (from a signal handler or another
    thread). All fetching, folding and saving happens on the calling thread.
    """

    def __init__(
        self,
        gateway: SourceGateway,
        sink: TransactionSink,
        store: CheckpointStore,
        config: Optional[IngestConfig] = None,
    ):
        self.config = config or IngestConfig()
        self.gateway = gateway
        self.store = store
        self.stop_event = threading.Event()

        self.processor = BlockProcessor(sink, self.config.qualifying_kind)
        self.backfill = BackfillCoordinator(gateway, self.processor, self.stop_event)
        self.poller = LivePoller(
            gateway,
            self.processor,
            store,
            poll_interval=self.config.poll_interval,
            persist_every=self.config.persist_every,
            stop_event=self.stop_event,
        )

        self.state = EngineState.CREATED
        self.checkpoint: Optional[Checkpoint] = None
        self.backfill_result: Optional[BackfillResult] = None

    def stop(self):
        """Request shutdown; honoured at the next round or tick boundary."""
        if not self.stop_event.is_set():
            logger.info("Shutdown signal received.")
        self.stop_event.set()

    def run(self) -> Checkpoint:
        """
        Run until stopped and return the final, persisted checkpoint.

        Raises:
            StoreUnavailable: the checkpoint could not be loaded, or the final
                save failed.
            BackfillFailed: the source frontier could not be fetched at
                startup (the checkpoint has been saved).

        Any other error is re-raised after the checkpoint has been saved.
        """
        self.state = EngineState.LOADING
        self.checkpoint = self.store.load()
        logger.info(f"Service starting. Last processed round: {self.checkpoint.last_processed_round}")

        self.state = EngineState.BACKFILLING
        try:
            try:
                self.backfill_result = self.backfill.drain(self.checkpoint)
            except SourceUnavailable as e:
                logger.error(f"Backfill process failed: {e}")
                raise BackfillFailed(f"could not fetch the source frontier: {e}") from e

            if not self.backfill_result.cancelled:
                self.state = EngineState.POLLING
                self.poller.run(self.checkpoint)
        except IngestError:
            raise
        except Exception:
            logger.exception(f"Ingestion stopped by an unexpected error in state {self.state.value}")
            raise
        finally:
            # The checkpoint is saved on every way out, including errors.
            self._drain()
        return self.checkpoint

    def _drain(self):
        self.state = EngineState.DRAINING
        logger.info("Saving final state...")
        try:
            self.store.save(self.checkpoint)
        except StoreUnavailable:
            logger.exception(f"Failed to save checkpoint on exit at round {self.checkpoint.last_processed_round}")
            raise
        finally:
            self.state = EngineState.TERMINATED
        logger.info(f"State saved. {self.checkpoint}")
