"""
API request / response models for FastAPI.
"""

from pydantic import BaseModel, Field

from backend.models import FileRecord, TradeRecord


class IngestResponse(BaseModel):
    file_id: str
    filename: str
    status: str
    trade_count: int = 0
    file_size: str = ""
    message: str = ""


class FileSummary(BaseModel):
    id: str
    filename: str
    status: str
    file_type: str = ""
    file_size: str = ""
    trade_count: int = 0
    upload_timestamp: str = ""

    @classmethod
    def from_record(cls, record: FileRecord) -> "FileSummary":
        return cls(
            id=record.id,
            filename=record.filename,
            status=record.status.value,
            file_type=record.display_type,
            file_size=record.file_size,
            trade_count=record.trade_count,
            upload_timestamp=record.upload_timestamp,
        )


class FileDetails(FileSummary):
    sample_trades: list[TradeRecord] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: FileRecord) -> "FileDetails":
        summary = FileSummary.from_record(record)
        return cls(**summary.model_dump(), sample_trades=record.sample_trades)


class FilesResponse(BaseModel):
    files: list[FileSummary] = Field(default_factory=list)
