"""Main entry point for the Manual Assistant API."""
import logging
import time
from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.concurrency import run_in_threadpool

from config import PORT, CORS_ORIGINS, GROQ_API_KEY, LOG_FORMAT, LOG_LEVEL
from logger import setup_logging
from models.api import (
    QueryRequest,
    QueryResponse,
    ResponseMetadata,
    DocumentPathRequest,
    DocumentResponse,
    ApiKeyRequest,
    ApiKeyStatus,
)
from models.conversation import Message
from models.document import DocumentSummary
from services.document_loader import DocumentLoadError
from services.llm_client import LLMClientError
from services.manual_assistant import ManualAssistant, UnconfiguredError, EmptyDocumentError

if LOG_FORMAT == "json":
    setup_logging(LOG_LEVEL)

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Manual Assistant",
    description="Answers questions about an uploaded product manual",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
assistant: ManualAssistant = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global assistant

    logger.info("Initializing Manual Assistant services...")

    try:
        assistant = ManualAssistant(api_key=GROQ_API_KEY)
        logger.info(f"Initialized ManualAssistant (configured={assistant.is_configured})")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


def _error_detail(code: str, message: str, details: dict = None) -> dict:
    return {"error": {"code": code, "message": message, "details": details or {}}}


def _document_response(summary: DocumentSummary) -> DocumentResponse:
    return DocumentResponse(name=summary.name, pages=summary.pages, total_chunks=summary.total_chunks)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Manual Assistant API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "manual-assistant",
        "version": "1.0.0",
        "configured": assistant.is_configured,
        "document": assistant.document_name,
        "chunks": len(assistant.chunks),
    }


@app.get("/api-key", response_model=ApiKeyStatus)
async def get_api_key_status() -> ApiKeyStatus:
    """Report whether an API key is configured. The key itself is never returned."""
    return ApiKeyStatus(configured=assistant.is_configured)


@app.put("/api-key", response_model=ApiKeyStatus)
async def set_api_key(request: ApiKeyRequest) -> ApiKeyStatus:
    """Configure the Groq API key for this process."""
    if not request.api_key.strip():
        raise HTTPException(status_code=400, detail="api_key cannot be empty")
    assistant.set_api_key(request.api_key.strip())
    return ApiKeyStatus(configured=True)


@app.post("/documents", response_model=DocumentResponse)
async def upload_document(file: UploadFile = File(...)) -> DocumentResponse:
    """Upload a manual; it replaces the current document."""
    data = await file.read()
    try:
        summary = await run_in_threadpool(assistant.load_document_bytes, data, file.filename or "document.pdf")
    except DocumentLoadError as e:
        logger.error(f"Document load error: {e}")
        raise HTTPException(status_code=422, detail=_error_detail(e.code, str(e)))
    return _document_response(summary)


@app.post("/documents/path", response_model=DocumentResponse)
async def load_document_from_path(request: DocumentPathRequest) -> DocumentResponse:
    """Load a manual from a path on the server; it replaces the current document."""
    try:
        summary = await run_in_threadpool(assistant.load_document, request.path)
    except DocumentLoadError as e:
        logger.error(f"Document load error: {e}")
        raise HTTPException(status_code=422, detail=_error_detail(e.code, str(e)))
    return _document_response(summary)


@app.post("/ask", response_model=QueryResponse)
async def ask_endpoint(request: QueryRequest) -> QueryResponse:
    """
    Answer a question about the current document.

    Args:
        request: QueryRequest with the question and the conversation so far

    Returns:
        QueryResponse with the answer and retrieval metadata

    Raises:
        HTTPException: For validation errors, missing setup or API failures
    """
    start_time = time.time()

    if not request.question or not request.question.strip():
        raise HTTPException(status_code=400, detail="Question field is required and cannot be empty")

    logger.info(f"Processing question: {request.question[:100]}...")
    history = [Message(role=m.role, content=m.content) for m in request.history]

    try:
        answer, result = await run_in_threadpool(assistant.ask, request.question, history)
    except UnconfiguredError as e:
        raise HTTPException(status_code=400, detail=_error_detail(e.code, str(e)))
    except EmptyDocumentError as e:
        raise HTTPException(status_code=409, detail=_error_detail(e.code, str(e)))
    except LLMClientError as e:
        # Handle LLM client errors with structured error response
        logger.error(f"LLM client error: {e.error.message}")
        status_code = 429 if e.error.code == LLMClientError.RATE_LIMITED else 503
        raise HTTPException(
            status_code=status_code,
            detail=_error_detail(e.error.code, e.error.message, e.error.details)
        )
    except Exception as e:
        # Handle unexpected errors
        logger.error(f"Unexpected error processing question: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(e)}"
        )

    total_latency_ms = int((time.time() - start_time) * 1000)
    logger.info(f"Question answered in {total_latency_ms}ms")

    return QueryResponse(
        answer=answer,
        metadata=ResponseMetadata(
            keywords=result.keywords,
            synonyms_added=result.synonyms_added,
            context_chars=len(result.context),
            chunks_used=result.indices,
            latency_ms=total_latency_ms,
        )
    )


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Manual Assistant API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
