"""Services for the Manual Assistant."""
from .document_loader import DocumentLoader, DocumentLoadError
from .chunking_engine import ChunkingEngine
from .keyword_extractor import extract_keywords, CZECH_STOP_WORDS
from .synonym_expander import expand_with_synonyms, SYNONYM_GROUPS
from .stemming import get_stem_variants
from .retrieval_engine import RetrievalEngine, RetrievalResult
from .llm_client import LLMClient, LLMResponse, LLMError, LLMClientError
from .manual_assistant import ManualAssistant, AssistantError, UnconfiguredError, EmptyDocumentError

__all__ = ['DocumentLoader', 'DocumentLoadError', 'ChunkingEngine', 'extract_keywords', 'CZECH_STOP_WORDS', 'expand_with_synonyms', 'SYNONYM_GROUPS', 'get_stem_variants', 'RetrievalEngine', 'RetrievalResult', 'LLMClient', 'LLMResponse', 'LLMError', 'LLMClientError', 'ManualAssistant', 'AssistantError', 'UnconfiguredError', 'EmptyDocumentError']
