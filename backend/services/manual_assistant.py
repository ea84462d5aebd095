"""Question answering over the currently loaded manual."""
import logging
import threading
from typing import Callable, Optional, Sequence, Tuple

from models.chunk import Chunk
from models.conversation import Message
from models.document import Document, DocumentSummary
from services.chunking_engine import ChunkingEngine
from services.document_loader import DocumentLoader
from services.llm_client import LLMClient
from services.retrieval_engine import RetrievalEngine, RetrievalResult

logger = logging.getLogger(__name__)


class AssistantError(Exception):
    """Base error for requests the assistant cannot serve."""

    code = "ASSISTANT_ERROR"


class UnconfiguredError(AssistantError):
    """No API key has been configured."""

    code = "UNCONFIGURED"

    def __init__(self, message: str = "API klíč není nastaven."):
        super().__init__(message)


class EmptyDocumentError(AssistantError):
    """A question was asked before any document was loaded."""

    code = "EMPTY_DOCUMENT"

    def __init__(self, message: str = "Žádný PDF dokument není nahrán."):
        super().__init__(message)


class ManualAssistant:
    """
    Holds one session's document and answers questions about it.

    The chunk sequence is an immutable tuple replaced as a whole under a
    lock, so a question in flight always scores a consistent snapshot.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        chunking_engine: Optional[ChunkingEngine] = None,
        retrieval_engine: Optional[RetrievalEngine] = None,
        document_loader: Optional[DocumentLoader] = None,
        client_factory: Callable[[str], LLMClient] = LLMClient,
    ):
        self.chunking_engine = chunking_engine or ChunkingEngine()
        self.retrieval_engine = retrieval_engine or RetrievalEngine()
        self.document_loader = document_loader or DocumentLoader()
        self.client_factory = client_factory
        self.llm_client: Optional[LLMClient] = None
        self._lock = threading.Lock()
        self._chunks: Tuple[Chunk, ...] = ()
        self._document_name: Optional[str] = None

        if api_key:
            self.set_api_key(api_key)

    @property
    def is_configured(self) -> bool:
        return self.llm_client is not None

    @property
    def chunks(self) -> Tuple[Chunk, ...]:
        with self._lock:
            return self._chunks

    @property
    def document_name(self) -> Optional[str]:
        return self._document_name

    def set_api_key(self, api_key: str) -> None:
        """Create the LLM client for a new API key."""
        self.llm_client = self.client_factory(api_key)
        logger.info("API key configured")

    def ingest_text(self, raw_text: str, name: str = "document", pages: int = 0) -> DocumentSummary:
        """
        Chunk raw document text and make it the current document.

        Args:
            raw_text: Full text of the document
            name: Display name of the document
            pages: Page count reported back to the caller

        Returns:
            DocumentSummary with the chunk count
        """
        chunks = tuple(self.chunking_engine.chunk_document(raw_text))
        with self._lock:
            self._chunks = chunks
            self._document_name = name

        logger.info(f"Parsed \"{name}\": {len(raw_text)} chars -> {len(chunks)} chunks")
        return DocumentSummary(name=name, pages=pages, total_chunks=len(chunks))

    def load_document(self, filepath: str) -> DocumentSummary:
        """Load a manual from disk and make it the current document."""
        return self._ingest(self.document_loader.load(filepath))

    def load_document_bytes(self, data: bytes, filename: str) -> DocumentSummary:
        """Load an uploaded manual and make it the current document."""
        return self._ingest(self.document_loader.load_bytes(data, filename))

    def _ingest(self, document: Document) -> DocumentSummary:
        return self.ingest_text(document.text, name=document.filename, pages=document.total_pages)

    def retrieve(self, question: str) -> RetrievalResult:
        """Assemble the context for a question from the current document."""
        return self.retrieval_engine.retrieve(self.chunks, question)

    def answer_question(self, question: str, history: Sequence[Message] = ()) -> str:
        """
        Answer a question about the current document.

        Args:
            question: User question
            history: Earlier turns of the conversation, oldest first

        Returns:
            Answer text from the LLM

        Raises:
            UnconfiguredError: If no API key is set
            EmptyDocumentError: If no document is loaded
            LLMClientError: If the completion call fails
        """
        return self.ask(question, history)[0]

    def ask(self, question: str, history: Sequence[Message] = ()) -> Tuple[str, RetrievalResult]:
        """Like answer_question, but also return the retrieval details."""
        llm_client = self.llm_client
        if llm_client is None:
            raise UnconfiguredError()

        chunks = self.chunks
        if not chunks:
            raise EmptyDocumentError()

        result = self.retrieval_engine.retrieve(chunks, question)
        logger.info(
            f"Keywords: [{', '.join(result.keywords)}] "
            f"+synonyms: [{', '.join(result.synonyms_added)}] "
            f"-> {len(result.context)} chars context"
        )

        system_prompt = LLMClient.build_system_prompt(result.context)
        response = llm_client.generate(system_prompt, history, question)
        return response.text, result
