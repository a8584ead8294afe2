"""Tests for the HTTP PDF endpoint."""

import pytest

from conftest import make_settings, read_pdf
from reportpdf.server import create_app


def client_for(**overrides):
    app = create_app(make_settings(**overrides))
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def client():
    return client_for()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_generate_pdf_returns_attachment(client):
    response = client.post(
        "/api/generate-pdf",
        json={"report": "PERIPHERAL BLOOD SMEARS:\nMarked anemia noted.", "filename": "smear-review"},
    )

    assert response.status_code == 200
    assert response.mimetype == "application/pdf"
    assert response.headers["Content-Disposition"] == 'attachment; filename="smear-review.pdf"'
    reader = read_pdf(response.data)
    assert len(reader.pages) == 1
    text = reader.pages[0].extract_text()
    assert "Marked anemia noted." in text
    assert "Page 1 of 1" in text


def test_generate_pdf_suggests_filename(client):
    response = client.post("/api/generate-pdf", json={"report": "Platelets: low"})

    disposition = response.headers["Content-Disposition"]
    assert disposition.startswith('attachment; filename="medical-report-')
    assert disposition.endswith('.pdf"')


@pytest.mark.parametrize(
    "payload",
    [{}, {"report": None}, {"report": 123}, {"report": ""}, {"report": "  \n "}],
)
def test_generate_pdf_rejects_missing_report(client, payload):
    response = client.post("/api/generate-pdf", json=payload)

    assert response.status_code == 400
    assert response.get_json() == {"error": "Report text is required"}


def test_generate_pdf_rejects_invalid_json(client):
    response = client.post("/api/generate-pdf", data="not json", content_type="application/json")

    assert response.status_code == 400
    assert response.get_json() == {"error": "Invalid JSON request"}


def test_generate_pdf_rejects_oversized_report():
    client = client_for(max_report_chars=20)

    response = client.post("/api/generate-pdf", json={"report": "x" * 21})

    assert response.status_code == 400
    assert "too long" in response.get_json()["error"]


def test_generate_pdf_reports_layout_overflow():
    client = client_for(pdf_margin_top=380, pdf_margin_bottom=390, pdf_body_font_size=40)

    response = client.post("/api/generate-pdf", json={"report": "Too tall."})

    assert response.status_code == 422
    assert response.get_json()["error"] == "Report cannot be laid out"


def test_get_is_not_allowed(client):
    response = client.get("/api/generate-pdf")

    assert response.status_code == 405
    assert response.get_json() == {"error": "Method not allowed"}


def test_cors_headers(client):
    response = client.post(
        "/api/generate-pdf",
        json={"report": "Platelets: low"},
        headers={"Origin": "http://localhost:5173"},
    )

    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_banner_included_when_enabled():
    client = client_for(pdf_include_banner=True)

    response = client.post("/api/generate-pdf", json={"report": "DIAGNOSIS:\nBenign."})

    text = read_pdf(response.data).pages[0].extract_text()
    assert "PATHOLOGY REPORT" in text
    assert "Generated:" in text


def test_generate_pdf_sanitizes_header_breaking_filename(client):
    response = client.post(
        "/api/generate-pdf",
        json={"report": "Body.", "filename": "smear\r\nX-Evil: 1"},
    )

    assert response.status_code == 200
    assert response.headers["Content-Disposition"] == 'attachment; filename="smearX-Evil: 1.pdf"'
    assert "X-Evil" not in response.headers


def test_unknown_route_returns_json(client):
    response = client.get("/api/missing")

    assert response.status_code == 404
    assert response.get_json() == {"error": "Route not found"}


def test_health_reports_timestamp(client):
    payload = client.get("/health").get_json()

    assert payload["service"] == "Dictated Report PDF Service"
    assert "T" in payload["timestamp"]
