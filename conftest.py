from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

import pytest

from txindex.apps.ingest.errors import RoundNotFound, SinkUnavailable, SourceUnavailable, StoreUnavailable
from txindex.apps.ingest.interfaces import AppendResult
from txindex.apps.ingest.types import Block, Checkpoint, Transaction


class FakeGateway:
    """In-memory source: serves `blocks`, fails rounds listed in `failing`.

    Rounds in `errors` raise the mapped exception as-is.
    """

    def __init__(self, blocks: Optional[Dict[int, Block]] = None, frontier: Optional[int] = None):
        self.blocks = blocks or {}
        self.frontier = frontier if frontier is not None else max(self.blocks, default=0)
        self.failing: Set[int] = set()
        self.errors: Dict[int, Exception] = {}
        self.frontier_error: Optional[Exception] = None
        self.fetched: List[int] = []

    def add_block(self, block: Block):
        self.blocks[block.round] = block
        self.frontier = max(self.frontier, block.round)

    def current_frontier(self) -> int:
        if self.frontier_error is not None:
            raise self.frontier_error
        return self.frontier

    def fetch_block(self, round_number: int) -> Block:
        self.fetched.append(round_number)
        if round_number in self.errors:
            raise self.errors[round_number]
        if round_number in self.failing:
            raise SourceUnavailable(f"round {round_number} unavailable")
        if round_number not in self.blocks:
            raise RoundNotFound(round_number)
        return self.blocks[round_number]


class FakeSink:
    """Idempotent in-memory transaction log keyed by signature."""

    def __init__(self):
        self.records: Dict[str, Transaction] = {}
        self.calls: List[str] = []
        self.failing_signatures: Set[str] = set()
        self.fail_all = False

    def append(self, txn: Transaction) -> AppendResult:
        self.calls.append(txn.signature)
        if self.fail_all or txn.signature in self.failing_signatures:
            raise SinkUnavailable("database is down")
        if txn.signature in self.records:
            return AppendResult.ALREADY_EXISTS
        self.records[txn.signature] = txn
        return AppendResult.INSERTED


@dataclass
class FakeStore:
    stored: Optional[Checkpoint] = None
    saved: List[Checkpoint] = field(default_factory=list)
    fail_load: bool = False
    fail_save: bool = False

    def load(self) -> Checkpoint:
        if self.fail_load:
            raise StoreUnavailable("store is down")
        if self.stored is None:
            return Checkpoint.empty()
        return Checkpoint.from_dict(self.stored.to_dict())

    def save(self, checkpoint: Checkpoint) -> None:
        if self.fail_save:
            raise StoreUnavailable("store is down")
        snapshot = Checkpoint.from_dict(checkpoint.to_dict())
        self.saved.append(snapshot)
        self.stored = snapshot

    @property
    def saved_rounds(self) -> List[int]:
        return [c.last_processed_round for c in self.saved]


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def store():
    return FakeStore()
