"""Data models for the crawler."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DocumentRecord:
    document_id: str
    title: str = ""
    author: str = ""
    date_time: str = ""
    abstract: str = ""
    document: str = ""  # attachment file name, empty when none

    def to_json_dict(self) -> dict:
        return {
            "documentId": self.document_id,
            "title": self.title,
            "author": self.author,
            "dateTime": self.date_time,
            "abstract": self.abstract,
            "document": self.document,
        }


@dataclass(frozen=True)
class MetadataFields:
    """Fields as found in a metadata payload; None means the element was absent."""

    title: Optional[str] = None
    author: Optional[str] = None
    date_time: Optional[str] = None
    abstract: Optional[str] = None
    document: Optional[str] = None

    def to_record(self, document_id: str) -> DocumentRecord:
        return DocumentRecord(
            document_id=document_id,
            title=self.title or "",
            author=self.author or "",
            date_time=self.date_time or "",
            abstract=self.abstract or "",
            document=self.document or "",
        )


@dataclass(frozen=True)
class WorkerResult:
    document_id: str
    ok: bool
    reason: Optional[str] = None
