import signal

from django.core.exceptions import ImproperlyConfigured
from django.core.management.base import BaseCommand, CommandError

from txindex.apps.ingest.client import SimulatedChain, SmartBloxClient
from txindex.apps.ingest.config import IngestConfig
from txindex.apps.ingest.engine import IngestEngine
from txindex.apps.ingest.errors import BackfillFailed, StoreUnavailable
from txindex.apps.ingest.persistence import DjangoCheckpointStore, DjangoTransactionSink


class Command(BaseCommand):
    help = 'Ingest ledger rounds into the transaction log and running checkpoint'

    def add_arguments(self, parser):
        parser.add_argument(
            '--kind',
            type=str,
            help='Transaction kind to aggregate (default: INGEST_TX_KIND)'
        )
        parser.add_argument(
            '--poll-interval',
            type=float,
            help='Seconds between live polls (default: INGEST_POLL_INTERVAL)'
        )
        parser.add_argument(
            '--persist-every',
            type=int,
            help='Persist the checkpoint every N rounds (default: INGEST_PERSIST_EVERY)'
        )
        parser.add_argument(
            '--source-url',
            type=str,
            help='Base URL of the node API (default: INGEST_SOURCE_URL)'
        )
        parser.add_argument(
            '--simulate',
            action='store_true',
            help='Ingest from an in-process simulated chain instead of the node API'
        )
        parser.add_argument(
            '--simulate-start',
            type=int,
            default=1,
            help='First round produced by the simulated chain (default: 1)'
        )

    def handle(self, *args, **options):
        try:
            config = IngestConfig.from_settings().override(
                qualifying_kind=options.get('kind'),
                poll_interval=options.get('poll_interval'),
                persist_every=options.get('persist_every'),
                source_url=options.get('source_url'),
            )
        except ImproperlyConfigured as e:
            raise CommandError(str(e))

        if options['simulate']:
            gateway = SimulatedChain(start_round=options['simulate_start'], block_time=config.poll_interval)
            self.stdout.write(f"Using simulated chain starting at round {options['simulate_start']}")
        else:
            gateway = SmartBloxClient(config.source_url, timeout=config.source_timeout)
            self.stdout.write(f"Using node API at {config.source_url}")

        engine = IngestEngine(
            gateway=gateway,
            sink=DjangoTransactionSink(),
            store=DjangoCheckpointStore(config.checkpoint_key),
            config=config,
        )

        def signal_handler(signum, frame):
            self.stdout.write("\nReceived shutdown signal, stopping...")
            engine.stop()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        self.stdout.write(
            f"Ingesting '{config.qualifying_kind}' transactions "
            f"(poll every {config.poll_interval}s, persist every {config.persist_every} rounds)"
        )
        self.stdout.write("Press Ctrl+C to stop")

        try:
            checkpoint = engine.run()
        except BackfillFailed as e:
            raise CommandError(f"Backfill failed, state saved: {e}")
        except StoreUnavailable as e:
            raise CommandError(f"Checkpoint store unavailable: {e}")
        finally:
            if isinstance(gateway, SmartBloxClient):
                gateway.close()

        self.stdout.write(
            self.style.SUCCESS(f"Stopped cleanly at round {checkpoint.last_processed_round}")
        )
