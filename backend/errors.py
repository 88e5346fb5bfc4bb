"""
Error taxonomy for the ingestion pipeline and the record store.
"""


class IngestError(Exception):
    """Base class for every failure surfaced to an upload caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidExtension(IngestError):
    """The upload's name does not carry an accepted extension."""


class OversizedDocument(IngestError):
    """The upload exceeds the configured size ceiling."""


class MalformedDocument(IngestError):
    """The upload's text is not well-formed XML (or not valid UTF-8)."""


class StoreError(IngestError):
    """Any failure reported by the record store."""
