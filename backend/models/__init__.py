"""Data models for the Manual Assistant."""
from .document import Document, DocumentSummary
from .chunk import Chunk, ScoredChunk
from .conversation import Message
from .api import (
    QueryRequest,
    QueryResponse,
    ResponseMetadata,
    HistoryMessage,
    DocumentPathRequest,
    DocumentResponse,
    ApiKeyRequest,
    ApiKeyStatus,
)

__all__ = [
    "Document",
    "DocumentSummary",
    "Chunk",
    "ScoredChunk",
    "Message",
    "QueryRequest",
    "QueryResponse",
    "ResponseMetadata",
    "HistoryMessage",
    "DocumentPathRequest",
    "DocumentResponse",
    "ApiKeyRequest",
    "ApiKeyStatus",
]
