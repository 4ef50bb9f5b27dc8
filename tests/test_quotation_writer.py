from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import pytest

from core.db import session_scope
from core.models import Customer, Product, Quotation, QuotationItem
from services.application import BusinessIdentityService, QuotationWriter
from shared.exceptions import NotFoundError, ValidationError

NUMBER = re.compile(r"^QUO-\d{8}-\d{3}$")


def _counts():
    with session_scope() as session:
        return (
            session.query(Quotation).count(),
            session.query(QuotationItem).count(),
            session.query(Customer).count(),
        )


def test_create_persists_the_aggregate(quotation_payload, catalog) -> None:
    result = QuotationWriter().create(quotation_payload())

    assert NUMBER.match(result["quotationNumber"])
    assert result["status"] == "DRAFT"
    assert result["customer"]["name"] == "Acme Builders"
    assert result["businessIdentity"] is None
    assert result["totalAmount"] == 1091.5

    catalog_item, custom_item = result["items"]
    assert catalog_item["isCustom"] is False
    assert catalog_item["productId"] == catalog.bar_id
    assert catalog_item["unit"] == "kg"
    assert catalog_item["product"]["category"]["name"] == "Steel"
    assert catalog_item["customName"] is None
    assert custom_item["isCustom"] is True
    assert custom_item["productId"] is None
    assert custom_item["customName"] == "Cutting and bending"
    assert custom_item["customUnit"] == "job"
    assert [i["position"] for i in result["items"]] == [0, 1]


def test_create_with_no_items_persists_nothing(quotation_payload) -> None:
    with pytest.raises(ValidationError):
        QuotationWriter().create(quotation_payload(items=[]))

    assert _counts() == (0, 0, 0)


def test_create_rejects_unbalanced_totals(quotation_payload) -> None:
    with pytest.raises(ValidationError) as info:
        QuotationWriter().create(quotation_payload(totalAmount=1100.0))

    assert info.value.field == "totalAmount"
    assert _counts() == (0, 0, 0)


def test_unknown_product_rolls_back_the_resolved_customer(quotation_payload) -> None:
    payload = quotation_payload()
    payload["items"][0]["productId"] = "no-such-product"

    with pytest.raises(NotFoundError):
        QuotationWriter().create(payload)

    assert _counts() == (0, 0, 0)


def test_inactive_product_is_still_quotable(quotation_payload, catalog) -> None:
    payload = quotation_payload(
        items=[{"productId": catalog.wire_id, "quantity": 1, "unitPrice": 450, "lineTotal": 450}],
        subtotal=450, taxRate=18, taxAmount=81, totalAmount=531,
    )

    result = QuotationWriter().create(payload)

    assert result["items"][0]["unit"] == "bundle"
    assert result["items"][0]["product"]["isActive"] is False


def test_item_keeps_unit_and_price_after_catalog_edit(quotation_payload, catalog) -> None:
    writer = QuotationWriter()
    created = writer.create(quotation_payload())

    with session_scope() as session:
        product = session.get(Product, catalog.bar_id)
        product.unit = "tonne"
        product.unit_price = 70000.0

    item = writer.get(created["id"])["items"][0]
    assert item["unit"] == "kg"
    assert item["unitPrice"] == 62.5


def test_save_customer_twice_reuses_the_customer(quotation_payload) -> None:
    writer = QuotationWriter()

    first = writer.create(quotation_payload())
    second = writer.create(quotation_payload(customerInfo={"name": "Acme Builders", "email": "buy@acme.test"}))

    assert first["customerId"] == second["customerId"]
    assert second["customer"]["phone"] == "+91 98000 00000"
    assert _counts()[2] == 1


def test_unsaved_customer_is_created_each_time(quotation_payload) -> None:
    writer = QuotationWriter()

    first = writer.create(quotation_payload(saveCustomer=False))
    second = writer.create(quotation_payload(saveCustomer=False))

    assert first["customerId"] != second["customerId"]


def test_selected_customer_is_used_as_is(quotation_payload) -> None:
    writer = QuotationWriter()
    first = writer.create(quotation_payload())

    second = writer.create(quotation_payload(
        selectedCustomerId=first["customerId"],
        customerInfo={"name": "Typed over", "phone": "000"},
    ))

    assert second["customerId"] == first["customerId"]
    assert second["customer"]["name"] == "Acme Builders"


def test_update_replaces_every_item(quotation_payload) -> None:
    writer = QuotationWriter()
    created = writer.create(quotation_payload())

    updated = writer.update(created["id"], quotation_payload(
        items=[{"isCustom": True, "customName": "Site visit", "quantity": 1, "unitPrice": 500, "lineTotal": 500}],
        subtotal=500, taxRate=5, taxAmount=25, totalAmount=525,
        title="Revised",
    ))

    assert updated["quotationNumber"] == created["quotationNumber"]
    assert updated["title"] == "Revised"
    assert [i["customName"] for i in updated["items"]] == ["Site visit"]
    assert {i["id"] for i in updated["items"]}.isdisjoint({i["id"] for i in created["items"]})
    with session_scope() as session:
        assert session.query(QuotationItem).count() == 1


def test_failed_update_keeps_previous_items(quotation_payload) -> None:
    writer = QuotationWriter()
    created = writer.create(quotation_payload())
    payload = quotation_payload()
    payload["items"][0]["productId"] = "gone"

    with pytest.raises(NotFoundError):
        writer.update(created["id"], payload)

    assert len(writer.get(created["id"])["items"]) == 2


def test_update_unknown_quotation_is_not_found(quotation_payload) -> None:
    with pytest.raises(NotFoundError):
        QuotationWriter().update("missing", quotation_payload())


def test_update_keeps_identity_unless_given(quotation_payload, make_identity) -> None:
    alpha = make_identity("Alpha Traders")
    beta = make_identity("Beta Steel")
    writer = QuotationWriter()
    created = writer.create(quotation_payload(businessIdentityId=alpha))

    kept = writer.update(created["id"], quotation_payload())
    assert kept["businessIdentityId"] == alpha

    moved = writer.update(created["id"], quotation_payload(businessIdentityId=beta))
    assert moved["businessIdentity"]["name"] == "Beta Steel"

    cleared = writer.update(created["id"], quotation_payload(businessIdentityId=None))
    assert cleared["businessIdentityId"] is None


def test_create_can_nominate_the_default_identity(quotation_payload, make_identity) -> None:
    make_identity("Alpha Traders", is_default=True)
    beta = make_identity("Beta Steel")

    result = QuotationWriter().create(quotation_payload(businessIdentityId=beta, setAsDefaultIdentity=True))

    assert result["businessIdentity"]["isDefault"] is True


def test_inactive_identity_is_rejected(quotation_payload, make_identity) -> None:
    retired = make_identity("Retired Co", is_active=False)

    with pytest.raises(ValidationError):
        QuotationWriter().create(quotation_payload(businessIdentityId=retired))

    assert _counts() == (0, 0, 0)


def test_unknown_identity_is_not_found(quotation_payload) -> None:
    with pytest.raises(NotFoundError):
        QuotationWriter().create(quotation_payload(businessIdentityId="missing"))


def test_concurrent_creates_get_unique_numbers(quotation_payload) -> None:
    writer = QuotationWriter()
    payload = quotation_payload(saveCustomer=False)

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda _: writer.create(payload), range(50)))

    numbers = [r["quotationNumber"] for r in results]
    assert len(set(numbers)) == 50
    assert _counts()[0] == 50


def test_delete_removes_items(quotation_payload) -> None:
    writer = QuotationWriter()
    created = writer.create(quotation_payload())

    writer.delete(created["id"])

    assert _counts()[:2] == (0, 0)
    with pytest.raises(NotFoundError):
        writer.get(created["id"])


def test_list_filters_and_summarises(quotation_payload) -> None:
    writer = QuotationWriter()
    first = writer.create(quotation_payload())
    writer.create(quotation_payload(customerInfo={"name": "Zen Interiors"}, title="Lobby"))
    writer.change_status(first["id"], "SENT")

    everything = writer.list()
    assert everything["pagination"] == {"page": 1, "limit": 20, "total": 2, "pages": 1}
    assert everything["summary"]["statusCounts"] == {"SENT": 1, "DRAFT": 1}
    assert everything["summary"]["totalValue"] == pytest.approx(2183.0)

    sent = writer.list(status="SENT")
    assert [q["id"] for q in sent["quotations"]] == [first["id"]]
    assert sent["summary"]["statusCounts"] == {"SENT": 1, "DRAFT": 1}
    assert sent["summary"]["totalValue"] == pytest.approx(1091.5)

    searched = writer.list(search="zen")
    assert [q["customer"]["name"] for q in searched["quotations"]] == ["Zen Interiors"]

    with pytest.raises(ValidationError):
        writer.list(status="CANCELLED")


def test_missing_tax_rate_falls_back_to_configured_default(quotation_payload) -> None:
    payload = quotation_payload()
    del payload["taxRate"]

    result = QuotationWriter().create(payload)

    assert result["taxRate"] == 18.0


def test_update_keeps_its_own_deactivated_identity(quotation_payload, make_identity) -> None:
    alpha = make_identity("Alpha Traders")
    writer = QuotationWriter()
    created = writer.create(quotation_payload(businessIdentityId=alpha))
    assert BusinessIdentityService().delete(alpha)["deactivated"] is True

    edited = writer.update(created["id"], quotation_payload(businessIdentityId=alpha, title="Edited"))

    assert edited["title"] == "Edited"
    assert edited["businessIdentityId"] == alpha
    assert edited["businessIdentity"]["isActive"] is False


def test_update_cannot_switch_to_another_inactive_identity(quotation_payload, make_identity) -> None:
    alpha = make_identity("Alpha Traders")
    retired = make_identity("Retired Co", is_active=False)
    writer = QuotationWriter()
    created = writer.create(quotation_payload(businessIdentityId=alpha))

    with pytest.raises(ValidationError) as info:
        writer.update(created["id"], quotation_payload(businessIdentityId=retired, title="Edited"))

    assert info.value.field == "businessIdentityId"
    assert writer.get(created["id"])["title"] == "Site 4 rebar"


def test_default_flag_without_identity_is_rejected(quotation_payload) -> None:
    with pytest.raises(ValidationError) as info:
        QuotationWriter().create(quotation_payload(setAsDefaultIdentity=True))

    assert info.value.field == "setAsDefaultIdentity"
    assert _counts() == (0, 0, 0)


def test_subtotal_must_match_the_line_totals(quotation_payload) -> None:
    with pytest.raises(ValidationError) as info:
        QuotationWriter().create(quotation_payload(subtotal=10.0, taxAmount=1.8, totalAmount=11.8))

    assert info.value.field == "subtotal"
    assert info.value.details["expected"] == 925.0
    assert _counts() == (0, 0, 0)


def _backdate(quotation_id: str, when: datetime) -> None:
    with session_scope() as session:
        session.get(Quotation, quotation_id).created_at = when


def test_list_filters_by_creation_date(quotation_payload) -> None:
    writer = QuotationWriter()
    early = writer.create(quotation_payload(title="Early"))
    late_in_day = writer.create(quotation_payload(title="Late in day"))
    next_day = writer.create(quotation_payload(title="Next day"))
    _backdate(early["id"], datetime(2026, 10, 1, 9, 0))
    _backdate(late_in_day["id"], datetime(2026, 10, 15, 23, 30))
    _backdate(next_day["id"], datetime(2026, 10, 16, 0, 0))

    result = writer.list(date_from="2026-10-02", date_to="2026-10-15")

    assert [q["title"] for q in result["quotations"]] == ["Late in day"]
    assert result["summary"]["statusCounts"] == {"DRAFT": 1}

    since = writer.list(date_from="2026-10-15T12:00:00Z", sort_by="createdAt", sort_order="asc")
    assert [q["title"] for q in since["quotations"]] == ["Late in day", "Next day"]

    with pytest.raises(ValidationError) as info:
        writer.list(date_from="15/10/2026")
    assert info.value.field == "dateFrom"

    with pytest.raises(ValidationError):
        writer.list(date_from="2026-10-16", date_to="2026-10-15")


def test_list_filters_by_amount_range(quotation_payload) -> None:
    writer = QuotationWriter()
    writer.create(quotation_payload())
    writer.create(quotation_payload(
        items=[{"isCustom": True, "customName": "Site visit", "quantity": 1, "unitPrice": 500, "lineTotal": 500}],
        subtotal=500, taxRate=5, taxAmount=25, totalAmount=525,
    ))

    small = writer.list(max_amount=525)
    assert [q["totalAmount"] for q in small["quotations"]] == [525.0]
    assert small["summary"]["totalValue"] == pytest.approx(525.0)

    large = writer.list(min_amount=1000)
    assert [q["totalAmount"] for q in large["quotations"]] == [1091.5]

    assert writer.list(min_amount=525, max_amount=1091.5)["pagination"]["total"] == 2

    with pytest.raises(ValidationError) as info:
        writer.list(min_amount=2000, max_amount=100)
    assert info.value.field == "minAmount"


def test_list_sorts_by_customer_name(quotation_payload) -> None:
    writer = QuotationWriter()
    for name in ("Zen Interiors", "Acme Builders", "Metro Homes"):
        writer.create(quotation_payload(customerInfo={"name": name}))

    ascending = writer.list(sort_by="customerName", sort_order="asc")
    descending = writer.list(sort_by="customerName", sort_order="desc")

    names = ["Acme Builders", "Metro Homes", "Zen Interiors"]
    assert [q["customer"]["name"] for q in ascending["quotations"]] == names
    assert [q["customer"]["name"] for q in descending["quotations"]] == names[::-1]


def test_list_rejects_unknown_sort_field() -> None:
    with pytest.raises(ValidationError) as info:
        QuotationWriter().list(sort_by="profit")

    assert info.value.field == "sortBy"
    assert "customerName" in info.value.details["allowed"]
