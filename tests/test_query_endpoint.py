"""Integration tests for the HTTP endpoints."""
import asyncio
import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock, patch
import sys
import os

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

MANUAL = "Návod k obsluze\nTechnické parametry: napětí 230 V\nÚdržba: čistěte filtr"


@pytest.fixture
def llm_client():
    from services.llm_client import LLMResponse

    client = Mock()
    client.generate.return_value = LLMResponse(
        text="Napětí je 230 V.",
        tokens_input=100,
        tokens_output=20,
        latency_ms=500,
        model_used="llama-3.3-70b-versatile"
    )
    return client


@pytest.fixture
def client(llm_client):
    """Create a test client with a fresh assistant and a mocked LLM."""
    # Import after path is set
    from main import app
    import main
    from services.manual_assistant import ManualAssistant

    # Mock the startup event to avoid reading the real environment
    with patch('main.startup_event'):
        main.assistant = ManualAssistant(client_factory=lambda key: llm_client)
        yield TestClient(app)


class TestHealth:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health_reports_state(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["configured"] is False
        assert data["chunks"] == 0


class TestApiKey:

    def test_status_unconfigured(self, client):
        assert client.get("/api-key").json() == {"configured": False}

    def test_set_api_key(self, client):
        response = client.put("/api-key", json={"api_key": "gsk_test"})

        assert response.status_code == 200
        assert response.json() == {"configured": True}
        assert client.get("/api-key").json() == {"configured": True}

    def test_empty_api_key_rejected(self, client):
        response = client.put("/api-key", json={"api_key": "  "})
        assert response.status_code == 400


class TestDocuments:

    def test_upload_text_document(self, client):
        response = client.post(
            "/documents",
            files={"file": ("navod.txt", MANUAL.encode("utf-8"), "text/plain")}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "navod.txt"
        assert data["total_chunks"] == 1

    def test_upload_corrupted_pdf(self, client):
        response = client.post(
            "/documents",
            files={"file": ("broken.pdf", b"not a pdf", "application/pdf")}
        )

        assert response.status_code == 422
        assert response.json()["detail"]["error"]["code"] == "DOCUMENT_LOAD_ERROR"

    def test_load_from_path(self, client, tmp_path):
        path = tmp_path / "navod.txt"
        path.write_text(MANUAL, encoding="utf-8")

        response = client.post("/documents/path", json={"path": str(path)})

        assert response.status_code == 200
        assert response.json()["pages"] == 1

    def test_load_missing_path(self, client, tmp_path):
        response = client.post("/documents/path", json={"path": str(tmp_path / "nic.pdf")})
        assert response.status_code == 422


class TestAsk:

    def _prepare(self, client):
        client.put("/api-key", json={"api_key": "gsk_test"})
        client.post(
            "/documents",
            files={"file": ("navod.txt", MANUAL.encode("utf-8"), "text/plain")}
        )

    def test_ask_success(self, client, llm_client):
        self._prepare(client)

        response = client.post("/ask", json={
            "question": "Jaké je napětí?",
            "history": [
                {"role": "user", "content": "Ahoj"},
                {"role": "assistant", "content": "Dobrý den"},
            ]
        })

        assert response.status_code == 200
        data = response.json()
        assert data["answer"] == "Napětí je 230 V."
        assert data["metadata"]["keywords"] == ["napětí"]
        assert data["metadata"]["chunks_used"] == [0]
        assert data["metadata"]["context_chars"] == len(MANUAL)

        system_prompt, history, question = llm_client.generate.call_args.args
        assert MANUAL in system_prompt
        assert [m.role for m in history] == ["user", "assistant"]
        assert question == "Jaké je napětí?"

    def test_empty_question(self, client):
        response = client.post("/ask", json={"question": "   "})
        assert response.status_code == 400

    def test_ask_unconfigured(self, client):
        response = client.post("/ask", json={"question": "Jaké je napětí?"})

        assert response.status_code == 400
        assert response.json()["detail"]["error"]["code"] == "UNCONFIGURED"

    def test_ask_without_document(self, client):
        client.put("/api-key", json={"api_key": "gsk_test"})

        response = client.post("/ask", json={"question": "Jaké je napětí?"})

        assert response.status_code == 409
        assert response.json()["detail"]["error"]["code"] == "EMPTY_DOCUMENT"

    def test_invalid_history_role(self, client):
        response = client.post("/ask", json={
            "question": "Jaké je napětí?",
            "history": [{"role": "system", "content": "x"}]
        })
        assert response.status_code == 422

    def test_rate_limited(self, client, llm_client):
        from services.llm_client import LLMClientError, LLMError

        self._prepare(client)
        llm_client.generate.side_effect = LLMClientError(LLMError(
            code=LLMClientError.RATE_LIMITED,
            message="Rate limit exceeded. Please try again in a few moments.",
            details={"attempts": 3}
        ))

        response = client.post("/ask", json={"question": "Jaké je napětí?"})

        assert response.status_code == 429
        error = response.json()["detail"]["error"]
        assert error["code"] == "RATE_LIMITED"
        assert error["details"]["attempts"] == 3

    def test_upstream_failure(self, client, llm_client):
        from services.llm_client import LLMClientError, LLMError

        self._prepare(client)
        llm_client.generate.side_effect = LLMClientError(LLMError(
            code=LLMClientError.UPSTREAM_FAILURE,
            message="Groq API error: boom",
            details={}
        ))

        response = client.post("/ask", json={"question": "Jaké je napětí?"})

        assert response.status_code == 503
        assert response.json()["detail"]["error"]["code"] == "UPSTREAM_FAILURE"


def _loop_running_here() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class TestBlockingWorkOffEventLoop:

    def test_completion_runs_in_worker_thread(self, client, llm_client):
        from services.llm_client import LLMResponse

        seen = []

        def generate(*args):
            seen.append(_loop_running_here())
            return LLMResponse(
                text="Napětí je 230 V.",
                tokens_input=1,
                tokens_output=1,
                latency_ms=1,
                model_used="llama-3.3-70b-versatile"
            )

        llm_client.generate.side_effect = generate
        client.put("/api-key", json={"api_key": "gsk_test"})
        client.post("/documents", files={"file": ("navod.txt", MANUAL.encode("utf-8"), "text/plain")})

        response = client.post("/ask", json={"question": "Jaké je napětí?"})

        assert response.status_code == 200
        assert seen == [False]

    def test_document_parsing_runs_in_worker_thread(self, client, tmp_path):
        import main

        seen = []
        original_load = main.assistant.document_loader.load_bytes

        def load_bytes(data, filename):
            seen.append(_loop_running_here())
            return original_load(data, filename)

        main.assistant.document_loader.load_bytes = load_bytes
        path = tmp_path / "navod.txt"
        path.write_text(MANUAL, encoding="utf-8")

        upload = client.post("/documents", files={"file": ("navod.txt", MANUAL.encode("utf-8"), "text/plain")})
        from_path = client.post("/documents/path", json={"path": str(path)})

        assert upload.status_code == 200
        assert from_path.status_code == 200
        assert seen == [False, False]
