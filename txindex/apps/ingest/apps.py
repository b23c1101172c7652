from django.apps import AppConfig


class IngestAppConfig(AppConfig):
    name = "txindex.apps.ingest"
    label = "ingest"
    verbose_name = "Ledger Ingestion"
