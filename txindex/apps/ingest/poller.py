import enum
import logging
import threading
from typing import Optional

from .errors import RoundNotFound, SourceUnavailable, StoreUnavailable
from .interfaces import CheckpointStore, SourceGateway
from .processor import BlockProcessor
from .types import Checkpoint

logger = logging.getLogger(__name__)


class TickOutcome(enum.Enum):
    PROCESSED = "processed"
    NOT_FOUND = "not_found"
    FETCH_FAILED = "fetch_failed"


class LivePoller:
    """Follows the source one round per tick once backfill has caught up."""

    def __init__(
        self,
        gateway: SourceGateway,
        processor: BlockProcessor,
        store: CheckpointStore,
        poll_interval: float = 5.0,
        persist_every: int = 10,
        stop_event: Optional[threading.Event] = None,
    ):
        self.gateway = gateway
        self.processor = processor
        self.store = store
        self.poll_interval = poll_interval  # seconds between ticks
        self.persist_every = persist_every  # rounds between checkpoint saves
        self.stop_event = stop_event or threading.Event()

    def run(self, checkpoint: Checkpoint):
        """Tick every poll_interval until the stop event is set."""
        logger.info(
            f"Polling for new rounds every {self.poll_interval}s starting at round {checkpoint.next_round}"
        )
        while not self.stop_event.wait(self.poll_interval):
            self.tick(checkpoint)
        logger.info(f"Polling stopped at round {checkpoint.last_processed_round}")

    def tick(self, checkpoint: Checkpoint) -> TickOutcome:
        round_number = checkpoint.next_round
        try:
            block = self.gateway.fetch_block(round_number)
        except RoundNotFound:
            return TickOutcome.NOT_FOUND
        except SourceUnavailable as e:
            logger.warning(f"Failed to get block {round_number}: {e}")
            return TickOutcome.FETCH_FAILED
        except Exception:
            logger.exception(f"Unexpected error getting block {round_number}")
            return TickOutcome.FETCH_FAILED

        logger.info(f"Processing new block for round {block.round}")
        self.processor.fold(block, checkpoint)
        self.maybe_persist(checkpoint)
        return TickOutcome.PROCESSED

    def maybe_persist(self, checkpoint: Checkpoint) -> bool:
        """Save the checkpoint on every persist_every-th round. Returns True if saved."""
        last_round = checkpoint.last_processed_round
        if last_round == 0 or last_round % self.persist_every != 0:
            return False

        try:
            self.store.save(checkpoint)
        except StoreUnavailable as e:
            logger.error(f"Failed to persist checkpoint at round {last_round}: {e}")
            return False

        logger.info(f"Checkpoint successfully persisted at round {last_round}")
        return True
