from fastapi.testclient import TestClient

from dialogue_generator import __version__
from dialogue_generator.dependencies import get_dialogue_service
from dialogue_generator.exceptions import ConfigurationError, ProviderError


class DummyDialogueService:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[str] = []

    async def generate(self, context: str) -> str:
        self.calls.append(context)
        if self.error is not None:
            raise self.error
        return "MAYA: You came back."


def get_test_client(app, service: DummyDialogueService) -> TestClient:
    app.dependency_overrides[get_dialogue_service] = lambda: service
    return TestClient(app)


def test_healthz_and_version(app) -> None:
    client = TestClient(app)

    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/version").json() == {
        "version": __version__,
        "environment": "test",
        "model": "gemini-1.5-flash",
        "api_key_configured": True,
    }


def test_pages_render(app) -> None:
    client = TestClient(app)

    home = client.get("/")
    about = client.get("/about")

    assert home.status_code == 200
    assert "text/html" in home.headers["content-type"]
    assert "AI Dialogue Generator" in home.text
    assert about.status_code == 200
    assert "About Us" in about.text


def test_home_page_sanitizes_rendered_dialogue(app) -> None:
    page = TestClient(app).get("/").text

    assert "purify.min.js" in page
    assert "DOMPurify.sanitize(marked.parse(state.dialogue))" in page


def test_one_shot_generation(app) -> None:
    service = DummyDialogueService()
    client = get_test_client(app, service)

    response = client.post(
        "/api/dialogue", json={"context": "Two old friends meet at a cafe after 10 years"}
    )

    assert response.status_code == 200
    assert response.json() == {"dialogue": "MAYA: You came back."}
    assert service.calls == ["Two old friends meet at a cafe after 10 years"]


def test_one_shot_blank_context_is_no_op(app) -> None:
    service = DummyDialogueService()
    client = get_test_client(app, service)

    response = client.post("/api/dialogue", json={"context": "   "})

    assert response.status_code == 204
    assert response.content == b""
    assert service.calls == []


def test_one_shot_configuration_error(app) -> None:
    service = DummyDialogueService(error=ConfigurationError("API key not configured."))
    client = get_test_client(app, service)

    response = client.post("/api/dialogue", json={"context": "hello"})

    assert response.status_code == 503
    assert response.json() == {"error": "configuration_error", "detail": "API key not configured."}


def test_one_shot_provider_error(app) -> None:
    service = DummyDialogueService(error=ProviderError("Generation service timed out"))
    client = get_test_client(app, service)

    response = client.post("/api/dialogue", json={"context": "hello"})

    assert response.status_code == 502
    assert response.json()["error"] == "provider_error"


def test_one_shot_rejects_missing_context(app) -> None:
    client = get_test_client(app, DummyDialogueService())

    response = client.post("/api/dialogue", json={})

    assert response.status_code == 422
