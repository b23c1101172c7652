"""
Ledger data types shared by the ingestion engine.
Blocks and transactions are immutable once fetched; the checkpoint is the
only mutable value and is owned by a single writer.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Tuple

Round = int


def _mapping(value: Any, name: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be an object, got {value!r}")
    return value


def _unsigned(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


@dataclass(frozen=True)
class Transaction:
    signature: str
    kind: str
    sender: int
    recipient: int
    amount: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        """Decode the source's wire shape: {"sig": ..., "tx": {...}}."""
        data = _mapping(data, "transaction")
        detail = _mapping(data["tx"], "tx")
        # The source spells this key "receipient".
        recipient = detail.get("receipient", detail.get("recipient", 0))
        return cls(
            signature=str(data["sig"]),
            kind=str(detail["type"]),
            sender=_unsigned(detail.get("sender", 0), "sender"),
            recipient=_unsigned(recipient, "recipient"),
            amount=_unsigned(detail["amount"], "amount"),
        )


@dataclass(frozen=True)
class Block:
    round: Round
    transactions: Tuple[Transaction, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Block":
        data = _mapping(data, "block")
        txs = data.get("transactions") or []
        if not isinstance(txs, list):
            raise ValueError(f"transactions must be a list, got {txs!r}")
        return cls(
            round=_unsigned(data["round"], "round"),
            transactions=tuple(Transaction.from_dict(tx) for tx in txs),
        )


@dataclass(frozen=True)
class AmountRecord:
    """An amount together with the round it was seen in."""

    amount: int = 0
    round: Round = 0


@dataclass
class Checkpoint:
    """
    Running aggregate over every qualifying transaction folded so far.

    min_amount and max_amount only carry meaning once txn_count > 0.
    """

    last_processed_round: Round = 0
    txn_count: int = 0
    total_amount: int = 0
    min_amount: AmountRecord = field(default_factory=AmountRecord)
    max_amount: AmountRecord = field(default_factory=AmountRecord)

    @classmethod
    def empty(cls) -> "Checkpoint":
        return cls()

    @property
    def has_transactions(self) -> bool:
        return self.txn_count > 0

    @property
    def next_round(self) -> Round:
        return self.last_processed_round + 1

    @property
    def mean_amount(self) -> float:
        if not self.txn_count:
            return 0.0
        return self.total_amount / self.txn_count

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Checkpoint":
        return cls(
            last_processed_round=data.get("last_processed_round", 0),
            txn_count=data.get("txn_count", 0),
            total_amount=data.get("total_amount", 0),
            min_amount=AmountRecord(**data.get("min_amount", {})),
            max_amount=AmountRecord(**data.get("max_amount", {})),
        )

    def __str__(self):
        if not self.has_transactions:
            return f"Checkpoint(round={self.last_processed_round}, no transactions)"
        return (
            f"Checkpoint(round={self.last_processed_round}, count={self.txn_count}, "
            f"total={self.total_amount}, min={self.min_amount.amount}@{self.min_amount.round}, "
            f"max={self.max_amount.amount}@{self.max_amount.round})"
        )
