"""
Pydantic models shared across the backend.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from backend.errors import MalformedDocument
from backend.ingest.metadata import format_kb, parse_size_kb


class FileStatus(str, Enum):
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self is not FileStatus.PROCESSING

    def can_transition_to(self, target: "FileStatus") -> bool:
        """Only Processing may move, and only to a terminal status."""
        return self is FileStatus.PROCESSING and target.is_terminal


class TradeRecord(BaseModel):
    """One trade as read from a document. Owned by its FileRecord."""

    model_config = ConfigDict(frozen=True)

    date: Optional[str] = None
    symbol: Optional[str] = None
    type: Optional[str] = None
    quantity: int = 0
    price: float = 0.0
    counterparty: Optional[str] = None


class UploadedDocument(BaseModel):
    name: str
    size_bytes: int
    content: bytes = b""

    @classmethod
    def from_bytes(cls, name: str, content: bytes) -> "UploadedDocument":
        return cls(name=name, size_bytes=len(content), content=content)

    def text(self) -> str:
        try:
            return self.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedDocument(f"Invalid XML file format: {e}") from e


class NewFileRecord(BaseModel):
    filename: str
    status: FileStatus = FileStatus.PROCESSING
    file_type: str
    file_size_kb: float
    size_unit: str = "KB"
    raw_content: str = ""
    trade_count: int = 0
    sample_trades: list[TradeRecord] = Field(default_factory=list)
    upload_timestamp: str

    @field_validator("file_size_kb", mode="before")
    @classmethod
    def _accept_formatted_size(cls, value):
        # Legacy rows carry the size as "12.34 KB".
        if isinstance(value, str):
            return parse_size_kb(value)
        return value

    @model_validator(mode="after")
    def _check_trade_count(self):
        if self.trade_count != len(self.sample_trades):
            raise ValueError(
                f"trade_count={self.trade_count} does not match "
                f"{len(self.sample_trades)} sample trades"
            )
        return self

    @property
    def file_size(self) -> str:
        return format_kb(self.file_size_kb, self.size_unit)

    @property
    def display_type(self) -> str:
        return self.file_type.upper()


class FileRecord(NewFileRecord):
    id: str


class FileTypeStats(BaseModel):
    type: str
    files: int
    avg_size_kb: float
    success_rate: float


class AnalyticsSummary(BaseModel):
    total_files: int = 0
    success_rate: float = 0.0
    avg_file_size_kb: float = 0.0
    avg_process_time: str = ""
    process_time_measured: bool = False
    file_types: list[FileTypeStats] = Field(default_factory=list)


class IngestResult(BaseModel):
    file_id: str
    filename: str
    status: FileStatus
    trade_count: int = 0
    file_size: str = ""
    message: str = ""
