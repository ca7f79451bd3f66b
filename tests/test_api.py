"""
API tests for the QC endpoints using FastAPI's TestClient.
"""
import pytest
from fastapi.testclient import TestClient

from main import app
from pdfqc.api.routes import qc
from pdfqc.core.config import settings
from pdfqc.services.cache import InMemoryTTLCache
from pdfqc.services.qc_orchestrator import QCOrchestrator
from pdfqc.services.text_qc import TextAnalysisService
from tests.helpers import create_blank_pdf, create_text_pdf


def element(text, x, y, width=100, height=12, font_size=12):
    return {"text": text, "x": x, "y": y, "width": width, "height": height, "font_size": font_size}


@pytest.fixture
def client(monkeypatch):
    # Relax auth and keep every collaborator local
    monkeypatch.setattr(settings, "REQUIRE_API_KEY", False)
    monkeypatch.setattr(settings, "MISTRAL_API_KEY", None)
    orchestrator = QCOrchestrator(cache=InMemoryTTLCache(ttl_seconds=60), text_service=TextAnalysisService())
    monkeypatch.setattr(qc, "get_qc_orchestrator", lambda: orchestrator)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def text_pdf(tmp_path):
    return create_text_pdf(tmp_path / "report.pdf", [["We recieved the samples.", "The assay was repeated."]]).read_bytes()


@pytest.fixture
def blank_pdf(tmp_path):
    return create_blank_pdf(tmp_path / "scan.pdf").read_bytes()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["text_provider"] in ("rules", "azure-openai")
    assert data["thresholds"]["margin"] == settings.MARGIN_THRESHOLD


def test_visual_qc_elements(client):
    payload = {
        "pages": [
            {
                "width": 612,
                "elements": [
                    element("Heading A", 50, 99),
                    element("Heading B", 200, 100),
                    element("Heading C", 350, 102.4),
                    element("Stray", 2, 600),
                    element("Big", 72, 700, width=50, font_size=30),
                ],
            }
        ]
    }

    response = client.post("/visual-qc/elements", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["file_type"] == "text-based"
    assert [issue["type"] for issue in data["issues"]] == ["alignment", "margin", "typography"]
    assert data["summary"]["total_issues"] == 3
    assert data["summary"]["by_severity"] == {"high": 2, "medium": 1, "low": 0}
    assert data["summary"]["by_page"] == {"1": 3}


def test_visual_qc_elements_threshold_override(client):
    payload = {
        "pages": [{"elements": [element("Heading A", 50, 99), element("Heading B", 200, 102.4)]}],
        "thresholds": {"alignment": 5},
    }

    response = client.post("/visual-qc/elements", json=payload)

    assert response.status_code == 200
    assert response.json()["issues"] == []


def test_visual_qc_elements_image_based(client):
    response = client.post("/visual-qc/elements", json={"pages": [{"elements": []}, {"elements": []}]})

    assert response.status_code == 200
    data = response.json()
    assert data["file_type"] == "image-based"
    assert data["page_count"] == 2
    assert data["message"]


def test_visual_qc_elements_require_text_based(client):
    payload = {"pages": [{"elements": []}], "require_text_based": True}

    response = client.post("/visual-qc/elements", json=payload)

    assert response.status_code == 422
    assert response.json()["success"] is False


def test_visual_qc_elements_skips_bad_element(client):
    payload = {"pages": [{"elements": [element("Body", 72, 100, font_size=0)]}]}

    response = client.post("/visual-qc/elements", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert data["file_type"] == "image-based"
    assert data["skipped_elements"] == 1


def test_visual_qc_elements_negative_width_is_skipped(client):
    payload = {
        "pages": [{"elements": [element("Body text", 72, 100), element("Broken", 72, 130, width=-5)]}]
    }

    response = client.post("/visual-qc/elements", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["file_type"] == "text-based"
    assert data["skipped_elements"] == 1
    assert data["issues"] == []


def test_visual_qc_elements_rejects_non_numeric_geometry(client):
    payload = {"pages": [{"elements": [element("Body", "left", 100)]}]}

    response = client.post("/visual-qc/elements", json=payload)

    assert response.status_code == 422
    assert response.json()["error"] == "Request validation failed"


def test_visual_qc_elements_rejects_duplicate_pages(client):
    payload = {"pages": [{"page_number": 1, "elements": []}, {"page_number": 1, "elements": []}]}
    assert client.post("/visual-qc/elements", json=payload).status_code == 422


def test_visual_qc_upload(client, text_pdf):
    files = {"file": ("report.pdf", text_pdf, "application/pdf")}

    first = client.post("/visual-qc", files=files)
    second = client.post("/visual-qc", files=files)

    assert first.status_code == 200
    data = first.json()
    assert data["filename"] == "report.pdf"
    assert data["file_type"] == "text-based"
    assert data["text_element_count"] == 2
    assert data["cached"] is False
    assert second.json()["cached"] is True


def test_visual_qc_upload_invalid_threshold(client, text_pdf):
    files = {"file": ("report.pdf", text_pdf, "application/pdf")}
    response = client.post("/visual-qc", files=files, params={"margin_threshold": 0})
    assert response.status_code == 422


def test_visual_qc_upload_requires_text_layer(client, blank_pdf):
    files = {"file": ("scan.pdf", blank_pdf, "application/pdf")}

    lenient = client.post("/visual-qc", files=files)
    strict = client.post("/visual-qc", files=files, params={"require_text_based": "true"})

    assert lenient.status_code == 200
    assert lenient.json()["file_type"] == "image-based"
    assert strict.status_code == 422


def test_visual_qc_rejects_non_pdf(client):
    files = {"file": ("notes.txt", b"hello", "text/plain")}

    response = client.post("/visual-qc", files=files)

    assert response.status_code == 400
    assert "PDF" in response.json()["error"]


def test_visual_qc_disabled(client, monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_VISUAL_QC", False)
    payload = {"pages": [{"elements": [element("Body", 72, 100)]}]}

    assert client.post("/visual-qc/elements", json=payload).status_code == 403


def test_analyze_text(client):
    response = client.post("/analyze-text", json={"text": "We recieved teh samples.  the end."})

    assert response.status_code == 200
    data = response.json()
    assert data["provider"] == "rules"
    assert data["source"] == "request"
    assert data["issue_stats"] == {"spelling": 2, "grammar": 2, "style": 0}
    starts = [issue["location"]["start"] for issue in data["issues"]]
    assert starts == sorted(starts)
    assert data["issues"][0]["location"]["error_word"] == "recieved"


def test_analyze_text_rejects_blank(client):
    assert client.post("/analyze-text", json={"text": "   "}).status_code == 422


def test_analyze_full_report(client, text_pdf):
    files = {"file": ("report.pdf", text_pdf, "application/pdf")}

    response = client.post("/analyze", files=files)

    assert response.status_code == 200
    data = response.json()
    assert data["filename"] == "report.pdf"
    assert data["page_count"] == 1
    assert len(data["content_hash"]) == 64
    assert data["errors"] == {}
    assert data["visual_analysis"]["file_type"] == "text-based"
    assert data["text_analysis"]["issue_stats"]["spelling"] == 1


def test_analyze_partial_failure(client, blank_pdf):
    files = {"file": ("scan.pdf", blank_pdf, "application/pdf")}

    response = client.post("/analyze", files=files)

    assert response.status_code == 200
    data = response.json()
    assert data["text_analysis"] is None
    assert "text" in data["errors"]
    assert data["visual_analysis"]["file_type"] == "image-based"


def test_analyze_nothing_requested(client, text_pdf):
    files = {"file": ("report.pdf", text_pdf, "application/pdf")}

    response = client.post("/analyze", files=files, params={"text_qc": "false", "visual_qc": "false"})

    assert response.status_code == 400


def test_api_key_required(monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_API_KEY", True)
    monkeypatch.setattr(settings, "API_KEY", "test_key_12345")
    orchestrator = QCOrchestrator(cache=None, text_service=TextAnalysisService())
    monkeypatch.setattr(qc, "get_qc_orchestrator", lambda: orchestrator)

    with TestClient(app) as test_client:
        missing = test_client.post("/analyze-text", json={"text": "Some text."})
        wrong = test_client.post(
            "/analyze-text",
            json={"text": "Some text."},
            headers={"Authorization": "Bearer wrong_key"}
        )
        header_key = test_client.post(
            "/analyze-text",
            json={"text": "Some text."},
            headers={"X-API-Key": "test_key_12345"}
        )

    assert missing.status_code == 401
    assert wrong.status_code == 403
    assert header_key.status_code == 200
