import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import RoundNotFound, SourceUnavailable
from .interfaces import SourceGateway
from .processor import BlockProcessor
from .types import Checkpoint, Round

logger = logging.getLogger(__name__)


@dataclass
class BackfillResult:
    frontier: Round
    processed: List[Round] = field(default_factory=list)
    skipped: List[Round] = field(default_factory=list)
    cancelled: bool = False


class BackfillCoordinator:
    """Catches up on every round missed since the last checkpoint, in order."""

    def __init__(self, gateway: SourceGateway, processor: BlockProcessor, stop_event: Optional[threading.Event] = None):
        self.gateway = gateway
        self.processor = processor
        self.stop_event = stop_event or threading.Event()

    def drain(self, checkpoint: Checkpoint) -> BackfillResult:
        """
        Fold rounds last_processed_round + 1 .. frontier into `checkpoint`.

        Raises SourceUnavailable if the frontier cannot be fetched. Rounds
        that fail to fetch are skipped for this run. Stops before the next
        round once the stop event is set.
        """
        frontier = self.gateway.current_frontier()
        result = BackfillResult(frontier=frontier)

        start = checkpoint.next_round
        if start > frontier:
            logger.info(f"Current network round is {frontier}. Nothing to backfill.")
            return result

        logger.info(f"Current network round is {frontier}. Backfilling rounds {start}-{frontier}...")

        for round_number in range(start, frontier + 1):
            if self.stop_event.is_set():
                logger.info(f"Shutdown requested during backfill at round {round_number}.")
                result.cancelled = True
                return result

            logger.debug(f"Backfilling round {round_number}")
            try:
                block = self.gateway.fetch_block(round_number)
            except (RoundNotFound, SourceUnavailable) as e:
                logger.warning(f"Could not fetch block {round_number} during backfill: {e}. Skipping.")
                result.skipped.append(round_number)
                continue

            self.processor.fold(block, checkpoint)
            result.processed.append(round_number)

        logger.info(
            f"Backfill complete: {len(result.processed)} rounds processed, "
            f"{len(result.skipped)} skipped. {checkpoint}"
        )
        return result
