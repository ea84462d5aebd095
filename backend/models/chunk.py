"""Chunk data models."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Chunk:
    """A slice of the current document, in document order."""
    text: str
    index: int  # position in the chunk sequence, 0-based


@dataclass
class ScoredChunk:
    """Chunk with its keyword score for one question."""
    chunk: Chunk
    score: int

    @property
    def index(self) -> int:
        return self.chunk.index
