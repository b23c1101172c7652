"""
Collaborators consumed by the ingestion engine.

SourceGateway raises RoundNotFound / SourceUnavailable, TransactionSink
raises SinkUnavailable and CheckpointStore raises StoreUnavailable.
"""

import enum
from typing import Protocol

from .types import Block, Checkpoint, Round, Transaction


class AppendResult(enum.Enum):
    INSERTED = "inserted"
    ALREADY_EXISTS = "already_exists"


class SourceGateway(Protocol):
    def current_frontier(self) -> Round:
        ...

    def fetch_block(self, round_number: Round) -> Block:
        ...


class TransactionSink(Protocol):
    def append(self, txn: Transaction) -> AppendResult:
        ...


class CheckpointStore(Protocol):
    def load(self) -> Checkpoint:
        ...

    def save(self, checkpoint: Checkpoint) -> None:
        ...
