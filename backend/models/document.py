"""Document data models."""
from dataclasses import dataclass


@dataclass
class Document:
    """Represents a loaded manual: its raw text and page count."""
    filename: str
    text: str
    total_pages: int


@dataclass
class DocumentSummary:
    """What ingestion reports back about the current document."""
    name: str
    pages: int
    total_chunks: int
