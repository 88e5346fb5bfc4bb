"""
Upload validation — name and size checks run before any parsing.
"""

from typing import Sequence

from backend import config
from backend.errors import InvalidExtension, OversizedDocument
from backend.models import UploadedDocument


def validate_document(
    document: UploadedDocument,
    accepted_extensions: Sequence[str] | None = None,
    max_bytes: int | None = None,
) -> None:
    """
    Reject uploads with the wrong extension or above the size ceiling.

    The content is never inspected here; malformed XML is caught by the
    extractor.
    """
    if accepted_extensions is None:
        accepted_extensions = config.ACCEPTED_EXTENSIONS
    accepted = tuple(accepted_extensions)
    limit = max_bytes if max_bytes is not None else config.MAX_UPLOAD_BYTES

    if not document.name.endswith(accepted):
        kinds = ", ".join(ext.lstrip(".").upper() for ext in accepted)
        raise InvalidExtension(f"Only {kinds} files are accepted")

    if document.size_bytes > limit:
        raise OversizedDocument(
            f"File size exceeds {limit / (1024 * 1024):g}MB limit"
        )
