"""
Error taxonomy for the ingestion engine.

RoundNotFound and SourceUnavailable come from the source gateway,
SinkUnavailable from the transaction sink and StoreUnavailable from the
checkpoint store. Only StoreUnavailable on load or final save, and a
failed frontier lookup at startup, are fatal.
"""


class IngestError(Exception):
    """Base class for ingestion failures."""


class RoundNotFound(IngestError):
    """The requested round has not been produced by the source yet."""

    def __init__(self, round_number: int):
        super().__init__(f"round {round_number} not found")
        self.round = round_number


class SourceUnavailable(IngestError):
    """Transport or decoding failure while talking to the source."""


class SinkUnavailable(IngestError):
    """A transaction could not be written to the transaction log."""


class StoreUnavailable(IngestError):
    """The checkpoint could not be loaded or saved."""


class BackfillFailed(IngestError):
    """Startup backfill could not determine the source frontier."""
