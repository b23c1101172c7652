"""
Ingest App - resumable ledger ingestion.

Walks a round-numbered ledger source in order, logs every transaction of
the configured kind to an idempotent transaction log and keeps a running
count/total/min/max checkpoint that survives restarts.

Modules:
- client: source gateways (HTTP node API, simulated chain)
- processor: fold a block into the checkpoint
- backfill: catch up from the checkpoint to the source frontier
- poller: follow the source one round per tick
- engine: compose the above and persist on shutdown
- persistence: Django-backed transaction log and checkpoint store

Usage:
    django-admin ingest --help
"""
