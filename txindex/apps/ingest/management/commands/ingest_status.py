import json

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from txindex.apps.ingest.errors import StoreUnavailable
from txindex.apps.ingest.models import LoggedTransaction
from txindex.apps.ingest.persistence import DjangoCheckpointStore


class Command(BaseCommand):
    help = 'Show the persisted ingestion checkpoint and recently logged transactions'

    def add_arguments(self, parser):
        parser.add_argument(
            '--recent',
            type=int,
            default=5,
            help='Number of recently logged transactions to show (default: 5)'
        )
        parser.add_argument(
            '--format',
            choices=['table', 'json'],
            default='table',
            help='Output format (default: table)'
        )

    def handle(self, *args, **options):
        store = DjangoCheckpointStore(settings.INGEST_CHECKPOINT_KEY)
        try:
            checkpoint = store.load()
        except StoreUnavailable as e:
            raise CommandError(str(e))

        recent = list(LoggedTransaction.objects.all()[:max(options['recent'], 0)])

        if options['format'] == 'json':
            data = checkpoint.to_dict()
            data['mean_amount'] = checkpoint.mean_amount
            data['recent_transactions'] = [
                {'signature': tx.signature, 'kind': tx.kind, 'amount': int(tx.amount), 'created_at': tx.created_at}
                for tx in recent
            ]
            self.stdout.write(json.dumps(data, indent=2, default=str))
            return

        self.stdout.write(self.style.HTTP_INFO(f"=== Checkpoint: {store.key} ==="))
        self.stdout.write(f"Last processed round: {checkpoint.last_processed_round:,}")
        self.stdout.write(f"Transactions: {checkpoint.txn_count:,}")
        self.stdout.write(f"Total amount: {checkpoint.total_amount:,}")

        if checkpoint.has_transactions:
            self.stdout.write(f"Mean amount: {checkpoint.mean_amount:,.2f}")
            self.stdout.write(f"Min amount: {checkpoint.min_amount.amount:,} (round {checkpoint.min_amount.round:,})")
            self.stdout.write(f"Max amount: {checkpoint.max_amount.amount:,} (round {checkpoint.max_amount.round:,})")
        else:
            self.stdout.write(self.style.WARNING("No transactions aggregated yet"))

        if recent:
            self.stdout.write("\nRecent transactions:")
            for tx in recent:
                self.stdout.write(f"  {tx.signature}  {tx.kind}  {tx.sender} -> {tx.recipient}  {tx.amount:,}")
