import logging
from dataclasses import dataclass

from .errors import SinkUnavailable
from .interfaces import TransactionSink
from .types import AmountRecord, Block, Checkpoint

logger = logging.getLogger(__name__)


@dataclass
class FoldStats:
    round: int = 0
    qualifying: int = 0
    folded: int = 0
    failed: int = 0


class BlockProcessor:
    """
    Folds qualifying transactions of a block into the running checkpoint.

    A transaction is only counted once the sink has accepted it (a duplicate
    counts as accepted). Sink failures skip that transaction and never abort
    the block; the checkpoint always advances to the block's round.
    """

    def __init__(self, sink: TransactionSink, qualifying_kind: str = "txfer"):
        self.sink = sink
        self.qualifying_kind = qualifying_kind
        self.last_stats = FoldStats()

    def fold(self, block: Block, checkpoint: Checkpoint) -> Checkpoint:
        stats = FoldStats(round=block.round)

        for txn in block.transactions:
            if txn.kind != self.qualifying_kind:
                continue
            stats.qualifying += 1

            try:
                self.sink.append(txn)
            except SinkUnavailable as e:
                logger.error(f"Failed to log transaction {txn.signature}: {e}")
                stats.failed += 1
                continue

            amount = txn.amount
            checkpoint.txn_count += 1
            checkpoint.total_amount += amount
            stats.folded += 1

            if checkpoint.txn_count == 1:
                checkpoint.min_amount = AmountRecord(amount, block.round)
                checkpoint.max_amount = AmountRecord(amount, block.round)
            else:
                if amount < checkpoint.min_amount.amount:
                    checkpoint.min_amount = AmountRecord(amount, block.round)
                if amount > checkpoint.max_amount.amount:
                    checkpoint.max_amount = AmountRecord(amount, block.round)

        checkpoint.last_processed_round = block.round
        self.last_stats = stats

        if stats.failed:
            logger.warning(
                f"Round {block.round}: {stats.failed} of {stats.qualifying} qualifying transactions "
                f"could not be logged and were left out of the aggregate"
            )
        return checkpoint
