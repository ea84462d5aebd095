"""Chunking engine producing overlapping line-aligned windows."""
import logging
from typing import List

from models.chunk import Chunk
from config import CHUNK_SIZE, CHUNK_OVERLAP

logger = logging.getLogger(__name__)


class ChunkingEngine:
    """Segments a document's raw text into overlapping chunks of bounded size."""

    def __init__(self, chunk_size: int = CHUNK_SIZE, chunk_overlap: int = CHUNK_OVERLAP):
        """
        Initialize ChunkingEngine.

        Args:
            chunk_size: Target chunk size in characters
            chunk_overlap: Characters carried over from the previous chunk
        """
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def chunk_document(self, text: str) -> List[Chunk]:
        """
        Chunk raw document text into indexed chunks.

        Args:
            text: Raw text of the whole document

        Returns:
            List of Chunk objects in document order
        """
        chunks = [
            Chunk(text=chunk_text, index=idx)
            for idx, chunk_text in enumerate(self.split_text(text))
        ]
        logger.debug(f"Split {len(text)} chars into {len(chunks)} chunks")
        return chunks

    def split_text(self, text: str) -> List[str]:
        """
        Split text on line boundaries into windows of about chunk_size characters.

        Blank lines are dropped and the remaining lines are trimmed and
        newline-joined. When the next line would push the buffer past
        chunk_size, the buffer is closed and the next one starts with the
        last chunk_overlap characters of it, a space and the new line.
        A single line longer than chunk_size is never split.

        Args:
            text: Text to split

        Returns:
            List of non-empty chunk strings
        """
        chunks = []
        current_chunk = ""

        for line in text.split("\n"):
            trimmed = line.strip()
            if not trimmed:
                continue

            if current_chunk and len(current_chunk) + len(trimmed) + 1 > self.chunk_size:
                chunks.append(current_chunk)
                if self.chunk_overlap > 0:
                    current_chunk = current_chunk[-self.chunk_overlap:] + " " + trimmed
                else:
                    current_chunk = trimmed
            elif current_chunk:
                current_chunk = current_chunk + "\n" + trimmed
            else:
                current_chunk = trimmed

        if current_chunk.strip():
            chunks.append(current_chunk)

        return chunks
