from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from services.application import QuotationWriter


def test_health_reports_logger_levels(client) -> None:
    resp = client.get("/api/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["currency"] == "INR"
    assert "services.application.quotation_writer" in body["loggers"]


def test_create_and_fetch_quotation(client, quotation_payload) -> None:
    resp = client.post("/api/quotations", json=quotation_payload(validUntil="2026-11-30T00:00:00Z"))

    assert resp.status_code == 201
    created = resp.json()
    assert created["status"] == "DRAFT"
    assert created["validUntil"] == "2026-11-30T00:00:00"

    fetched = client.get(f"/api/quotations/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["quotationNumber"] == created["quotationNumber"]


def test_empty_items_is_a_400_with_error_body(client, quotation_payload) -> None:
    resp = client.post("/api/quotations", json=quotation_payload(items=[]))

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "At least one item is required"
    assert body["code"] == "validation_error"
    assert body["field"] == "items"
    assert client.get("/api/quotations").json()["pagination"]["total"] == 0


def test_malformed_body_is_a_400(client, quotation_payload) -> None:
    payload = quotation_payload()
    payload["items"][0]["quantity"] = "ten"

    resp = client.post("/api/quotations", json=payload)

    assert resp.status_code == 400
    assert resp.json()["code"] == "validation_error"
    assert "items.0.quantity" in resp.json()["field"]


def test_unknown_quotation_is_404(client) -> None:
    resp = client.get("/api/quotations/missing")

    assert resp.status_code == 404
    assert resp.json()["entityType"] == "Quotation"


def test_status_patch(client, quotation_payload) -> None:
    created = client.post("/api/quotations", json=quotation_payload()).json()
    url = f"/api/quotations/{created['id']}/status"

    ok = client.patch(url, json={"status": "SENT"})
    assert ok.status_code == 200
    assert ok.json()["status"] == "SENT"

    bad = client.patch(url, json={"status": "CANCELLED"})
    assert bad.status_code == 400
    assert "Invalid status" in bad.json()["error"]
    assert client.get(f"/api/quotations/{created['id']}").json()["status"] == "SENT"


def test_update_and_delete_quotation(client, quotation_payload) -> None:
    created = client.post("/api/quotations", json=quotation_payload()).json()

    resp = client.put(
        f"/api/quotations/{created['id']}",
        json=quotation_payload(
            items=[{"isCustom": True, "customName": "Delivery", "quantity": 1, "unitPrice": 100, "lineTotal": 100}],
            subtotal=100, taxRate=18, taxAmount=18, totalAmount=118,
        ),
    )
    assert resp.status_code == 200
    assert len(resp.json()["items"]) == 1

    assert client.delete(f"/api/quotations/{created['id']}").status_code == 200
    assert client.get(f"/api/quotations/{created['id']}").status_code == 404


def test_list_query_parameters(client, quotation_payload) -> None:
    for n in range(3):
        client.post("/api/quotations", json=quotation_payload(title=f"Job {n}"))

    resp = client.get("/api/quotations", params={"page": 2, "limit": 2, "sortBy": "createdAt", "sortOrder": "asc"})

    body = resp.json()
    assert resp.status_code == 200
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}
    assert len(body["quotations"]) == 1
    assert body["summary"]["statusCounts"] == {"DRAFT": 3}


def test_business_identity_flow(client) -> None:
    alpha = client.post("/api/business-identities", json={"name": "Alpha Traders", "isDefault": True}).json()
    beta = client.post("/api/business-identities", json={"name": "Beta Steel"}).json()

    dup = client.post("/api/business-identities", json={"name": "Alpha Traders"})
    assert dup.status_code == 409

    blank = client.post("/api/business-identities", json={"name": "  "})
    assert blank.status_code == 400

    resp = client.put("/api/business-identities/default", json={"id": beta["id"]})
    assert resp.status_code == 200
    assert resp.json()["isDefault"] is True

    listed = client.get("/api/business-identities").json()
    assert [i["name"] for i in listed] == ["Beta Steel", "Alpha Traders"]
    assert client.get("/api/business-identities/default").json()["id"] == beta["id"]
    assert client.get(f"/api/business-identities/{alpha['id']}").json()["isDefault"] is False


def test_business_identity_delete_soft_when_used(client, quotation_payload) -> None:
    used = client.post("/api/business-identities", json={"name": "Used Co", "isDefault": True}).json()
    unused = client.post("/api/business-identities", json={"name": "Unused Co"}).json()
    client.post("/api/quotations", json=quotation_payload(businessIdentityId=used["id"]))

    soft = client.delete(f"/api/business-identities/{used['id']}").json()
    assert soft["deactivated"] is True
    assert soft["businessIdentity"]["isActive"] is False
    assert soft["businessIdentity"]["isDefault"] is False

    hard = client.delete(f"/api/business-identities/{unused['id']}").json()
    assert hard["deactivated"] is False
    assert client.get(f"/api/business-identities/{unused['id']}").status_code == 404

    assert client.get("/api/business-identities").json() == []
    assert len(client.get("/api/business-identities", params={"includeInactive": "true"}).json()) == 1


def test_customer_crud(client, quotation_payload) -> None:
    created = client.post("/api/customers", json={"name": " Zen Interiors ", "email": "z@zen.test"})
    assert created.status_code == 201
    customer = created.json()
    assert customer["name"] == "Zen Interiors"

    dup = client.post("/api/customers", json={"name": "Zen Interiors", "email": "z@zen.test"})
    assert dup.status_code == 409

    updated = client.put(f"/api/customers/{customer['id']}", json={"name": "Zen Interiors", "phone": "123"})
    assert updated.json()["phone"] == "123"
    assert updated.json()["email"] is None

    removable = client.delete(f"/api/customers/{customer['id']}")
    assert removable.status_code == 200
    assert client.get(f"/api/customers/{customer['id']}").status_code == 404


def test_customer_with_quotations_cannot_be_deleted(client, quotation_payload) -> None:
    quotation = client.post("/api/quotations", json=quotation_payload()).json()

    resp = client.delete(f"/api/customers/{quotation['customerId']}")

    assert resp.status_code == 409
    assert resp.json()["quotationCount"] == 1
    details = client.get(f"/api/customers/{quotation['customerId']}").json()
    assert details["quotationCount"] == 1
    assert details["quotations"][0]["quotationNumber"] == quotation["quotationNumber"]


def test_unexpected_errors_are_500(monkeypatch) -> None:
    from app import app

    def _boom(self, quotation_id):
        raise RuntimeError("database on fire")

    monkeypatch.setattr(QuotationWriter, "get", _boom)
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.get("/api/quotations/anything")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error", "code": "unexpected_error"}


def test_list_query_filters_and_sort_validation(client, quotation_payload) -> None:
    client.post("/api/quotations", json=quotation_payload(customerInfo={"name": "Zen Interiors"}))
    client.post("/api/quotations", json=quotation_payload(customerInfo={"name": "Acme Builders"}))

    resp = client.get("/api/quotations", params={
        "sortBy": "customerName", "sortOrder": "asc", "minAmount": 1000, "maxAmount": 2000,
        "dateFrom": "2000-01-01", "dateTo": "2999-12-31",
    })
    assert resp.status_code == 200
    assert [q["customer"]["name"] for q in resp.json()["quotations"]] == ["Acme Builders", "Zen Interiors"]

    assert client.get("/api/quotations", params={"minAmount": 5000}).json()["pagination"]["total"] == 0

    bad_sort = client.get("/api/quotations", params={"sortBy": "profit"})
    assert bad_sort.status_code == 400
    assert bad_sort.json()["field"] == "sortBy"

    bad_date = client.get("/api/quotations", params={"dateTo": "yesterday"})
    assert bad_date.status_code == 400
    assert bad_date.json()["field"] == "dateTo"


def test_customer_list_search_and_paging(client, quotation_payload) -> None:
    client.post("/api/quotations", json=quotation_payload())
    client.post("/api/customers", json={"name": "Zen Interiors", "phone": "044 1234"})
    client.post("/api/customers", json={"name": "Metro Homes", "email": "hello@metro.test"})

    listed = client.get("/api/customers").json()
    assert [c["name"] for c in listed["customers"]] == ["Acme Builders", "Metro Homes", "Zen Interiors"]
    assert [c["quotationCount"] for c in listed["customers"]] == [1, 0, 0]
    assert listed["pagination"] == {"page": 1, "limit": 50, "total": 3, "pages": 1}

    by_phone = client.get("/api/customers", params={"search": "1234"}).json()
    assert [c["name"] for c in by_phone["customers"]] == ["Zen Interiors"]

    page_two = client.get("/api/customers", params={"page": 2, "limit": 2}).json()
    assert [c["name"] for c in page_two["customers"]] == ["Zen Interiors"]


def test_error_detail_keys_are_camel_case(client) -> None:
    body = client.get("/api/customers/missing").json()

    assert body["entityType"] == "Customer"
    assert "entity_type" not in body
