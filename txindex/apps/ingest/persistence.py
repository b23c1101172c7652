"""
Durable collaborators of the ingestion engine, backed by the Django ORM.

DjangoTransactionSink appends transactions to an idempotent log keyed by
signature. DjangoCheckpointStore keeps the running aggregate in a single row.
"""

import logging
from decimal import Decimal

from django.db import DatabaseError, IntegrityError, transaction

from .errors import SinkUnavailable, StoreUnavailable
from .interfaces import AppendResult
from .models import CheckpointState, LoggedTransaction
from .types import AmountRecord, Checkpoint, Transaction

logger = logging.getLogger(__name__)


class DjangoTransactionSink:
    """Writes transactions to LoggedTransaction; duplicates are not errors."""

    def append(self, txn: Transaction) -> AppendResult:
        try:
            # Savepoint, so a duplicate does not poison an enclosing transaction
            with transaction.atomic():
                LoggedTransaction.objects.create(
                    signature=txn.signature,
                    kind=txn.kind,
                    sender=txn.sender,
                    recipient=txn.recipient,
                    amount=txn.amount,
                )
        except IntegrityError as e:
            if self._exists(txn.signature):
                logger.info(f"Duplicate transaction {txn.signature} found, skipping.")
                return AppendResult.ALREADY_EXISTS
            raise SinkUnavailable(f"failed to log transaction {txn.signature}: {e}") from e
        except (DatabaseError, OverflowError) as e:
            raise SinkUnavailable(f"failed to log transaction {txn.signature}: {e}") from e
        return AppendResult.INSERTED

    def _exists(self, signature: str) -> bool:
        try:
            return LoggedTransaction.objects.filter(signature=signature).exists()
        except DatabaseError as e:
            raise SinkUnavailable(f"failed to check transaction {signature}: {e}") from e


class DjangoCheckpointStore:
    """Loads and upserts the checkpoint row identified by `key`."""

    def __init__(self, key: str):
        self.key = key

    def load(self) -> Checkpoint:
        try:
            state = CheckpointState.objects.get(key=self.key)
        except CheckpointState.DoesNotExist:
            # First run
            logger.info(f"No checkpoint stored under '{self.key}', starting from round 0")
            return Checkpoint.empty()
        except DatabaseError as e:
            raise StoreUnavailable(f"failed to load checkpoint: {e}") from e

        return Checkpoint(
            last_processed_round=int(state.last_processed_round),
            txn_count=int(state.txn_count),
            total_amount=int(state.total_amount),
            min_amount=AmountRecord(int(state.min_amount), int(state.min_amount_round)),
            max_amount=AmountRecord(int(state.max_amount), int(state.max_amount_round)),
        )

    def save(self, checkpoint: Checkpoint) -> None:
        try:
            CheckpointState.objects.update_or_create(
                key=self.key,
                defaults={
                    'last_processed_round': checkpoint.last_processed_round,
                    'txn_count': checkpoint.txn_count,
                    'total_amount': Decimal(checkpoint.total_amount),
                    'min_amount': checkpoint.min_amount.amount,
                    'min_amount_round': checkpoint.min_amount.round,
                    'max_amount': checkpoint.max_amount.amount,
                    'max_amount_round': checkpoint.max_amount.round,
                },
            )
        except (DatabaseError, OverflowError) as e:
            raise StoreUnavailable(f"failed to save checkpoint: {e}") from e
        logger.debug(f"Saved {checkpoint}")
