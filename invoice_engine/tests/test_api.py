from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from invoice_engine.app.api.deps import get_engine_config, get_template_store
from invoice_engine.app.config import EngineConfig
from invoice_engine.app.main import app
from invoice_engine.app.registry.presets import TEMPLATE_PRESETS
from invoice_engine.app.services.template_store import InMemoryTemplateStore

from invoice_engine.tests.fixtures.documents import (
    client_payload,
    invoice_payload,
    issuer_payload,
    numbered_items,
)


# ---------------------------------------------------------------------------
# Test helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def store():
    return InMemoryTemplateStore()


@pytest.fixture
def make_client(store):
    def _make(**config_overrides):
        config = EngineConfig(**config_overrides)
        app.dependency_overrides[get_engine_config] = lambda: config
        app.dependency_overrides[get_template_store] = lambda: store
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client):
    return make_client()


def _generate_body(**overrides):
    body = {
        "document": invoice_payload(),
        "client": client_payload(),
        "issuer": issuer_payload(),
    }
    body.update(overrides)
    return body


# ---------------------------------------------------------------------------
# POST /generate
# ---------------------------------------------------------------------------

def test_generate_document_returns_tree_and_headers(client):
    response = client.post("/generate", json=_generate_body(template="classique"))

    assert response.status_code == 200
    body = response.json()
    assert response.headers["X-Document-Hash"] == body["document_hash"]
    assert response.headers["X-Architecture"] == "formal"
    assert response.headers["X-Architecture-Fallback"] == "false"
    assert response.headers["X-Delivery-Ready"] == "true"
    assert response.headers["X-Generation-Mode"] == "document"
    assert len(body["document"]["pages"]) >= 1
    assert body["readiness"]["delivery_ready"] is True


def test_preview_and_document_share_the_hash(client):
    body = _generate_body(template="studio")

    document = client.post("/generate", json=body)
    preview = client.post("/generate?mode=preview", json=body)

    assert preview.status_code == 200
    assert preview.headers["content-type"].startswith("text/html")
    assert preview.headers["X-Generation-Mode"] == "preview"
    assert preview.headers["X-Document-Hash"] == document.headers["X-Document-Hash"]
    assert document.headers["X-Document-Hash"] in preview.text


def test_unknown_architecture_falls_back(client):
    response = client.post("/generate", json=_generate_body(architecture="spiral"))

    assert response.status_code == 200
    assert response.headers["X-Architecture"] == "sidebar"
    assert response.headers["X-Architecture-Fallback"] == "true"


def test_unknown_template_is_404(client):
    response = client.post("/generate", json=_generate_body(template="inconnu"))

    assert response.status_code == 404


def test_unknown_mode_is_422(client):
    response = client.post("/generate?mode=pdf", json=_generate_body())

    assert response.status_code == 422


def test_missing_issue_date_is_422(client):
    document = invoice_payload()
    document.pop("issueDate")

    response = client.post("/generate", json=_generate_body(document=document))

    assert response.status_code == 422


def test_unknown_request_field_is_422(client):
    response = client.post("/generate", json=_generate_body(pdf=True))

    assert response.status_code == 422


def test_too_many_line_items_is_422(make_client):
    client = make_client(MAX_LINE_ITEMS=5)
    document = invoice_payload(items=numbered_items(6))

    response = client.post("/generate", json=_generate_body(document=document))

    assert response.status_code == 422
    assert "limit is 5" in response.json()["detail"]


def test_delivery_gate_rejects_incomplete_document(make_client):
    client = make_client(ENABLE_DELIVERY_GATE=True)
    body = _generate_body(configuration={"sections": {"legalMentions": False}})

    response = client.post("/generate", json=body)

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert [f["finding_id"] for f in detail["findings"]] == ["LEGAL-CRIT-001"]
    assert response.headers["X-Delivery-Ready"] == "false"


def test_delivery_gate_never_blocks_preview(make_client):
    client = make_client(ENABLE_DELIVERY_GATE=True)
    body = _generate_body(configuration={"sections": {"legalMentions": False}})

    response = client.post("/generate?mode=preview", json=body)

    assert response.status_code == 200
    assert "LEGAL-CRIT-001" in response.text


def test_gate_disabled_reports_but_delivers(client):
    body = _generate_body(configuration={"sections": {"legalMentions": False}})

    response = client.post("/generate", json=body)

    assert response.status_code == 200
    assert response.headers["X-Delivery-Ready"] == "false"
    assert response.json()["readiness"]["findings"][0]["finding_id"] == "LEGAL-CRIT-001"


def test_generate_with_saved_template(client):
    client.put(
        "/templates/users/u-1/honoraires",
        json={
            "name": "Honoraires",
            "preset": "tech",
            "configuration": {"customText": {"invoiceTitle": "HONORAIRES"}},
        },
    )

    response = client.post(
        "/generate",
        json=_generate_body(
            saved_template={"user_id": "u-1", "template_id": "honoraires"}
        ),
    )

    assert response.status_code == 200
    assert response.headers["X-Architecture"] == TEMPLATE_PRESETS["tech"].architecture
    assert "HONORAIRES" in response.text


def _legal_lines(body):
    return [
        line["text"]
        for page in body["document"]["pages"]
        for block in page["blocks"]
        if block["role"] == "legal_mentions"
        for line in block["lines"]
    ]


def test_saved_legal_mentions_survive_a_legal_form_change(client):
    put = client.put(
        "/templates/users/u-1/societe",
        json={"name": "Société", "preset": "moderne", "issuer": issuer_payload()},
    )
    saved_text = put.json()["overrides"]["custom_text"]["legal_mentions"]
    assert "Inscrite au RCS de Lyon" in saved_text

    saved = {"user_id": "u-1", "template_id": "societe"}
    before = client.post("/generate", json=_generate_body(saved_template=saved))
    after = client.post(
        "/generate",
        json=_generate_body(
            saved_template=saved,
            issuer=issuer_payload(legalForm="Auto-entrepreneur"),
        ),
    )

    assert after.status_code == 200
    assert _legal_lines(after.json()) == _legal_lines(before.json())
    assert "293 B" not in "\n".join(_legal_lines(after.json()))


def test_generate_with_missing_saved_template_is_404(client):
    response = client.post(
        "/generate",
        json=_generate_body(
            saved_template={"user_id": "u-1", "template_id": "absent"}
        ),
    )

    assert response.status_code == 404


# ---------------------------------------------------------------------------
# /templates
# ---------------------------------------------------------------------------

def test_list_templates(client):
    response = client.get("/templates")

    assert response.status_code == 200
    slugs = {item["slug"] for item in response.json()}
    assert slugs == set(TEMPLATE_PRESETS)


def test_template_detail(client):
    response = client.get("/templates/classique")

    assert response.status_code == 200
    body = response.json()
    assert body["architecture"] == "formal"
    assert "customText" in body["configuration"]
    assert "legalMentions" in body["configuration"]["sections"]


def test_template_detail_unknown_is_404(client):
    assert client.get("/templates/inconnu").status_code == 404


def test_configuration_schema(client):
    response = client.get("/templates/schema")

    assert response.status_code == 200
    schema = response.json()
    assert set(schema["properties"]) == {
        "colors",
        "fonts",
        "layout",
        "sections",
        "customText",
    }


def test_user_default_falls_back_to_engine_default(make_client):
    client = make_client(DEFAULT_PRESET="compact")

    response = client.get("/templates/users/u-9/default")

    assert response.status_code == 200
    body = response.json()
    assert body["template_id"] is None
    assert body["preset"] == "compact"
    assert body["is_default"] is True


def test_user_template_lifecycle(client):
    put = client.put(
        "/templates/users/u-1/mensuel",
        json={
            "name": "Facture mensuelle",
            "preset": "elegant",
            "configuration": {"colors": {"primary": "#112233"}},
            "is_default": True,
        },
    )
    assert put.status_code == 200
    overrides = put.json()["overrides"]
    assert overrides["colors"] == {"primary": "#112233"}
    assert overrides["custom_text"]["legal_mentions"]
    assert put.json()["configuration"]["colors"]["primary"] == "#112233"

    default = client.get("/templates/users/u-1/default").json()
    assert default["template_id"] == "mensuel"

    listing = client.get("/templates/users/u-1").json()
    assert [t["template_id"] for t in listing] == ["mensuel"]

    assert client.get("/templates/users/u-1/mensuel").status_code == 200
    assert client.delete("/templates/users/u-1/mensuel").status_code == 204
    assert client.get("/templates/users/u-1/mensuel").status_code == 404
    assert client.delete("/templates/users/u-1/mensuel").status_code == 404


def test_put_user_template_with_unknown_preset_is_422(client):
    response = client.put(
        "/templates/users/u-1/x",
        json={"name": "X", "preset": "inconnu"},
    )

    assert response.status_code == 422


# ---------------------------------------------------------------------------
# /legal-mentions
# ---------------------------------------------------------------------------

def test_list_legal_mentions_presets(client):
    response = client.get("/legal-mentions")

    assert response.status_code == 200
    ids = {preset["id"] for preset in response.json()}
    assert {"micro-entreprise", "societe-standard", "personnalise"} <= ids


def test_get_legal_mentions_preset(client):
    assert client.get("/legal-mentions/micro-entreprise").status_code == 200
    assert client.get("/legal-mentions/inconnu").status_code == 404


def test_resolve_legal_mentions_from_issuer(client):
    response = client.post(
        "/legal-mentions/resolve",
        json={"issuer": issuer_payload()},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["preset_id"] == "societe-standard"
    assert "Inscrite au RCS de Lyon" in body["text"]
    assert body["unresolved_placeholders"] == []


def test_resolve_with_forced_preset(client):
    response = client.post(
        "/legal-mentions/resolve",
        json={"issuer": issuer_payload(), "preset_id": "micro-entreprise"},
    )

    assert response.json()["preset_id"] == "micro-entreprise"
    assert "293 B" in response.json()["text"]


def test_resolve_with_unknown_preset_is_404(client):
    response = client.post(
        "/legal-mentions/resolve",
        json={"preset_id": "inconnu"},
    )

    assert response.status_code == 404


# ---------------------------------------------------------------------------
# /tax
# ---------------------------------------------------------------------------

def test_tax_aggregate(client):
    response = client.post(
        "/tax/aggregate",
        json={
            "items": [
                {"quantity": "2", "unitPrice": "100", "taxRate": "20"},
                {"quantity": "1", "unitPrice": "abc", "taxRate": "20"},
                {"quantity": "10", "unitPrice": "25", "taxRate": "5,5"},
            ]
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert [Decimal(b["rate"]) for b in body["buckets"]] == [Decimal("5.5"), Decimal("20")]
    assert Decimal(body["subtotal"]) == Decimal("450")
    assert Decimal(body["tax_amount"]) == Decimal("53.75")
    assert Decimal(body["total"]) == Decimal("503.75")


def test_tax_aggregate_respects_item_limit(make_client):
    client = make_client(MAX_LINE_ITEMS=2)

    response = client.post(
        "/tax/aggregate",
        json={"items": [{"quantity": 1, "unitPrice": 1}] * 3},
    )

    assert response.status_code == 422
