"""
Source gateway clients.

The engine needs two things from a ledger source: the current frontier round
and the block for a given round. SmartBloxClient talks to the node HTTP API;
SimulatedChain produces blocks in-process for local runs and tests.
"""

import logging
import random
import time
from typing import Any, Callable, Dict, Optional

import requests

from .errors import RoundNotFound, SourceUnavailable
from .types import Block, Round, Transaction

logger = logging.getLogger(__name__)


class SmartBloxClient:
    """HTTP client for the node API (/api/status, /api/blocks/<round>)."""

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout  # Request timeout in seconds
        self.session = session or requests.Session()

    def current_frontier(self) -> Round:
        """Fetch the latest round produced by the node."""
        data = self._get_json("/api/status")
        try:
            return int(data["last-round"])
        except (KeyError, TypeError, ValueError) as e:
            raise SourceUnavailable(f"failed to decode status response: {e}") from e

    def fetch_block(self, round_number: Round) -> Block:
        """Fetch a block, raising RoundNotFound if it has not been produced yet."""
        data = self._get_json(f"/api/blocks/{round_number}", round_number=round_number)
        try:
            block = Block.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SourceUnavailable(f"failed to decode block {round_number}: {e}") from e
        if block.round != round_number:
            raise SourceUnavailable(f"asked for block {round_number}, got block {block.round}")
        return block

    def _get_json(self, path: str, round_number: Optional[Round] = None) -> Dict[str, Any]:
        url = self.base_url + path
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise SourceUnavailable(f"failed to get {path}: {e}") from e

        if response.status_code == 404 and round_number is not None:
            raise RoundNotFound(round_number)

        try:
            response.raise_for_status()
            data = response.json()
        except requests.HTTPError as e:
            raise SourceUnavailable(f"failed to get {path}: {e}") from e
        except ValueError as e:
            raise SourceUnavailable(f"failed to unmarshal response from {path}: {e}") from e

        if not isinstance(data, dict):
            raise SourceUnavailable(f"unexpected response from {path}: {data!r}")
        return data

    def close(self):
        self.session.close()


class SimulatedChain:
    """
    In-process ledger that produces one block every `block_time` seconds.

    Blocks are derived from `seed` and the round number, so fetching the same
    round twice returns the same block. Rounds above the frontier raise
    RoundNotFound.
    """

    KINDS = ("txfer", "txfer", "txfer", "acfg", "keyreg")

    def __init__(
        self,
        start_round: Round = 1000,
        block_time: float = 2.0,
        max_txs_per_block: int = 8,
        seed: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if block_time <= 0:
            raise ValueError("block_time must be positive")
        self.start_round = start_round
        self.block_time = block_time
        self.max_txs_per_block = max_txs_per_block
        self.seed = seed
        self.clock = clock
        self.started_at = clock()

    def current_frontier(self) -> Round:
        elapsed = max(0.0, self.clock() - self.started_at)
        return self.start_round + int(elapsed // self.block_time)

    def fetch_block(self, round_number: Round) -> Block:
        if round_number < 0 or round_number > self.current_frontier():
            raise RoundNotFound(round_number)

        rng = random.Random(f"{self.seed}:{round_number}")
        transactions = []
        for index in range(rng.randint(0, self.max_txs_per_block)):
            transactions.append(Transaction(
                signature=f"{self.seed:x}-{round_number}-{index}-{rng.getrandbits(48):012x}",
                kind=rng.choice(self.KINDS),
                sender=rng.randint(1, 10_000),
                recipient=rng.randint(1, 10_000),
                amount=rng.randint(1, 1_000_000),
            ))
        logger.debug(f"Simulated block {round_number} with {len(transactions)} transactions")
        return Block(round=round_number, transactions=tuple(transactions))
