from django.db import models

# Unsigned 64-bit values do not fit a bigint column past 2**63 - 1.
UINT64_DIGITS = 20


class CheckpointState(models.Model):
    """Persisted running aggregate; one row per checkpoint key."""

    key = models.CharField(max_length=100, primary_key=True)
    last_processed_round = models.DecimalField(max_digits=UINT64_DIGITS, decimal_places=0, default=0)
    txn_count = models.DecimalField(max_digits=UINT64_DIGITS, decimal_places=0, default=0)
    total_amount = models.DecimalField(max_digits=30, decimal_places=0, default=0)

    min_amount = models.DecimalField(max_digits=UINT64_DIGITS, decimal_places=0, default=0)
    min_amount_round = models.DecimalField(max_digits=UINT64_DIGITS, decimal_places=0, default=0)
    max_amount = models.DecimalField(max_digits=UINT64_DIGITS, decimal_places=0, default=0)
    max_amount_round = models.DecimalField(max_digits=UINT64_DIGITS, decimal_places=0, default=0)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Checkpoint'
        verbose_name_plural = 'Checkpoints'

    def __str__(self):
        return f"Checkpoint {self.key} at round {self.last_processed_round}"


class LoggedTransaction(models.Model):
    signature = models.CharField(max_length=128, unique=True)
    kind = models.CharField(max_length=32, db_index=True)
    sender = models.DecimalField(max_digits=UINT64_DIGITS, decimal_places=0, db_index=True)
    recipient = models.DecimalField(max_digits=UINT64_DIGITS, decimal_places=0, db_index=True)
    amount = models.DecimalField(max_digits=UINT64_DIGITS, decimal_places=0)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name = 'Logged Transaction'
        verbose_name_plural = 'Logged Transactions'

    def __str__(self):
        return f"Tx {self.signature[:10]}... ({self.amount})"
