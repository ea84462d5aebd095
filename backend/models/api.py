"""Request and response schemas for the HTTP API."""
from typing import List, Literal

from pydantic import BaseModel, Field


class HistoryMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class QueryRequest(BaseModel):
    question: str
    history: List[HistoryMessage] = Field(default_factory=list)


class ResponseMetadata(BaseModel):
    keywords: List[str]
    synonyms_added: List[str]
    context_chars: int
    chunks_used: List[int]
    latency_ms: int


class QueryResponse(BaseModel):
    answer: str
    metadata: ResponseMetadata


class DocumentPathRequest(BaseModel):
    path: str


class DocumentResponse(BaseModel):
    name: str
    pages: int
    total_chunks: int


class ApiKeyRequest(BaseModel):
    api_key: str


class ApiKeyStatus(BaseModel):
    configured: bool
