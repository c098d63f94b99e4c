"""
Integration tests for the JSON routes using the Flask test client.
"""

import pytest


ADMIN = {"X-Actor-Role": "admin"}


# Fixtures

@pytest.fixture
def badge_order(client):
    """Order for 10 badges (350,000) with a 50,000 advance, created over HTTP."""
    client.post("/draft/items", json={"material_key": "badge", "quantity": 10})
    response = client.post("/orders", json={
        "customer_name": "<b>Acme</b>",
        "phone_number": "+998 90 123 45 67",
        "payment_method": "click",
        "baseline_advance": 50000,
    })
    assert response.status_code == 201
    return response.get_json()["order"]


class TestApiRoutes:
    """Health and catalog."""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "ok"
        assert data["environment"] == "testing"

    def test_catalog_filtered_by_category(self, client):
        response = client.get("/api/catalog?category=linear")

        materials = response.get_json()["materials"]
        assert materials
        assert all(m["category"] == "linear" for m in materials)

    def test_catalog_bad_category(self, client):
        response = client.get("/api/catalog?category=weight")

        assert response.status_code == 400
        assert response.get_json()["error"] == "validation_error"

    def test_material_price_edit(self, client):
        response = client.put(
            "/api/catalog/materials/badge",
            json={"unit_price": 40000, "waste_unit_price": 6000},
            headers=ADMIN,
        )

        assert response.status_code == 200
        material = response.get_json()["material"]
        assert material["unit_price"] == 40000
        assert material["waste_unit_price"] == 6000

    def test_material_price_edit_is_all_or_nothing(self, client):
        response = client.put(
            "/api/catalog/materials/badge",
            json={"unit_price": 40000, "waste_unit_price": -1},
            headers=ADMIN,
        )

        assert response.status_code == 400
        materials = client.get("/api/catalog?category=per-unit").get_json()["materials"]
        badge = next(m for m in materials if m["key"] == "badge")
        assert badge["unit_price"] == 35000

    def test_service_price_edit(self, client):
        response = client.put(
            "/api/catalog/services/old_sign_removal", json={"unit_price": "175000"}, headers=ADMIN
        )

        assert response.status_code == 200
        assert response.get_json()["service"]["unit_price"] == 175000

    def test_price_edits_require_privilege(self, client):
        material = client.put("/api/catalog/materials/badge", json={"unit_price": 1})
        service = client.put("/api/catalog/services/old_sign_removal", json={"unit_price": 1})

        assert material.status_code == 403
        assert service.status_code == 403

    def test_price_edit_unknown_key(self, client):
        response = client.put("/api/catalog/materials/gold_leaf", json={"unit_price": 1}, headers=ADMIN)

        assert response.status_code == 404


class TestDraftRoutes:
    """Session-held draft."""

    def test_empty_draft(self, client):
        data = client.get("/draft").get_json()

        assert data["item_count"] == 0

    def test_add_and_price(self, client):
        response = client.post("/draft/items", json={"material_key": "badge", "quantity": 10})
        assert response.status_code == 201

        price = client.get("/draft/price").get_json()

        assert price["display"]["final_cost"] == 350000
        assert price["display"]["total_print_area"] == 0

    def test_toggle_remove_and_clear(self, client):
        item = client.post("/draft/items", json={"material_key": "badge"}).get_json()["item"]

        toggled = client.post(f"/draft/items/{item['id']}/toggle").get_json()
        assert toggled["draft"]["items"][0]["visible"] is False
        assert client.get("/draft/price").get_json()["display"]["final_cost"] == 0

        removed = client.delete(f"/draft/items/{item['id']}").get_json()
        assert removed["item_count"] == 0

        client.post("/draft/items", json={"material_key": "badge"})
        assert client.delete("/draft").get_json()["item_count"] == 0

    def test_discount(self, client):
        client.post("/draft/items", json={"material_key": "badge", "quantity": 10})

        assert client.put("/draft/discount", json={"discount_percent": 10}).status_code == 200
        assert client.get("/draft/price").get_json()["display"]["final_cost"] == 315000

    def test_discount_out_of_range(self, client):
        response = client.put("/draft/discount", json={"discount_percent": 150})

        assert response.status_code == 400

    def test_invalid_item_is_not_stored(self, client):
        response = client.post("/draft/items", json={"material_key": "banner", "width": 0, "height": 1})

        assert response.status_code == 400
        assert response.get_json()["details"]["field"] == "width"
        assert client.get("/draft").get_json()["item_count"] == 0

    def test_unknown_material(self, client):
        response = client.post("/draft/items", json={"material_key": "gold_leaf"})

        assert response.status_code == 404
        assert response.get_json()["error"] == "unknown_reference"

    def test_item_limit(self, app, client):
        app.config["MAX_LINE_ITEMS"] = 1
        client.post("/draft/items", json={"material_key": "badge"})

        response = client.post("/draft/items", json={"material_key": "badge"})

        assert response.status_code == 400

    def test_unknown_item(self, client):
        assert client.delete("/draft/items/missing").status_code == 404


class TestOrderRoutes:
    """Orders and expenses."""

    def test_create_order(self, client, badge_order):
        assert badge_order["customer_name"] == "Acme"
        assert badge_order["total_amount"] == 350000
        assert badge_order["payment_method"] == "digital_wallet"
        assert badge_order["remaining_balance"] == 300000
        assert client.get("/draft").get_json()["item_count"] == 0

    def test_get_order(self, client, badge_order):
        response = client.get(f"/orders/{badge_order['id']}")

        assert response.get_json()["order"]["id"] == badge_order["id"]

    def test_empty_draft_cannot_be_ordered(self, client):
        response = client.post("/orders", json={"customer_name": "Acme"})

        assert response.status_code == 400

    def test_advance_exceeding_total(self, client):
        client.post("/draft/items", json={"material_key": "badge"})

        response = client.post("/orders", json={"customer_name": "Acme", "baseline_advance": 999999})

        assert response.status_code == 400
        assert client.get("/draft").get_json()["item_count"] == 1

    def test_expense(self, client):
        response = client.post("/expenses", json={
            "name": "Rent", "total_amount": 600000, "payment_method": "bank_transfer",
        })
        assert response.status_code == 201
        expense = response.get_json()["expense"]

        fetched = client.get(f"/expenses/{expense['id']}").get_json()["expense"]
        assert fetched["remaining_balance"] == 600000

    def test_order_id_is_not_an_expense(self, client, badge_order):
        assert client.get(f"/expenses/{badge_order['id']}").status_code == 404

    def test_unknown_order(self, client):
        assert client.get("/orders/missing").status_code == 404

    def test_list_orders(self, client, badge_order):
        orders = client.get("/orders").get_json()["orders"]

        assert [o["id"] for o in orders] == [badge_order["id"]]

    def test_edit_order_recomputes_balance(self, client, badge_order):
        order_id = badge_order["id"]
        client.post(f"/ledger/{order_id}/entries", json={"amount": 100000}, headers=ADMIN)

        response = client.put(f"/orders/{order_id}", json={
            "customer_name": "<i>Globex</i>", "total_amount": 400000,
        })

        assert response.status_code == 200
        order = response.get_json()["order"]
        assert order["customer_name"] == "Globex"
        assert order["baseline_advance"] == 50000
        assert order["remaining_balance"] == 250000

    def test_edit_order_advance_above_total(self, client, badge_order):
        response = client.put(f"/orders/{badge_order['id']}", json={"baseline_advance": 400000})

        assert response.status_code == 400
        fetched = client.get(f"/orders/{badge_order['id']}").get_json()["order"]
        assert fetched["baseline_advance"] == 50000

    def test_delete_order_removes_ledger(self, client, store, badge_order):
        order_id = badge_order["id"]
        client.post(f"/ledger/{order_id}/entries", json={"amount": 100000})

        response = client.delete(f"/orders/{order_id}")

        assert response.get_json()["entries_removed"] == 1
        assert client.get(f"/orders/{order_id}").status_code == 404
        assert store.list_entries() == []

    def test_clear_orders_requires_privilege(self, client, badge_order):
        assert client.delete("/orders").status_code == 403

        response = client.delete("/orders", headers=ADMIN)

        assert response.get_json()["deleted"] == 1
        assert client.get("/orders").get_json()["orders"] == []

    def test_edit_and_delete_expense(self, client):
        expense = client.post("/expenses", json={
            "name": "Rent", "total_amount": 600000, "baseline_advance": 100000,
        }).get_json()["expense"]

        edited = client.put(f"/expenses/{expense['id']}", json={"total_amount": 700000})
        assert edited.get_json()["expense"]["remaining_balance"] == 600000
        assert [e["id"] for e in client.get("/expenses").get_json()["expenses"]] == [expense["id"]]

        assert client.delete(f"/expenses/{expense['id']}").status_code == 200
        assert client.get(f"/expenses/{expense['id']}").status_code == 404

    def test_order_routes_check_parent_kind(self, client, badge_order):
        assert client.put(f"/expenses/{badge_order['id']}", json={"name": "x"}).status_code == 404
        assert client.delete(f"/expenses/{badge_order['id']}").status_code == 404


class TestLedgerRoutes:
    """Ledger entries over HTTP."""

    def test_pending_then_approved(self, client, badge_order):
        order_id = badge_order["id"]

        response = client.post(f"/ledger/{order_id}/entries", json={"amount": 100000})
        assert response.status_code == 201
        entry = response.get_json()["entry"]
        assert entry["status"] == "pending"
        assert response.get_json()["remaining_balance"] == 300000

        assert client.get("/ledger/pending").get_json()["count"] == 1

        forbidden = client.post(f"/ledger/entries/{entry['id']}/status", json={"status": "approved"})
        assert forbidden.status_code == 403

        approved = client.post(
            f"/ledger/entries/{entry['id']}/status", json={"status": "approved"}, headers=ADMIN
        )
        assert approved.get_json()["remaining_balance"] == 200000

        again = client.post(
            f"/ledger/entries/{entry['id']}/status", json={"status": "rejected"}, headers=ADMIN
        )
        assert again.status_code == 409

    def test_privileged_entry_and_history(self, client, badge_order):
        order_id = badge_order["id"]
        client.post(
            f"/ledger/{order_id}/entries",
            json={"amount": 150000, "method": "cash", "description": "<script>x</script>second"},
            headers=ADMIN,
        )

        history = client.get(f"/ledger/{order_id}").get_json()

        assert history["remaining_balance"] == 150000
        assert history["entries"][0]["is_baseline"] is True
        assert history["entries"][1]["status"] == "approved"
        assert "<script>" not in history["entries"][1]["description"]

    def test_delete_entry_and_baseline(self, client, badge_order):
        order_id = badge_order["id"]
        entry = client.post(
            f"/ledger/{order_id}/entries", json={"amount": 100000}, headers=ADMIN
        ).get_json()["entry"]

        deleted = client.delete(f"/ledger/entries/{entry['id']}")
        assert deleted.get_json()["remaining_balance"] == 300000

        baseline = client.delete(f"/ledger/entries/{order_id}:baseline")
        assert baseline.status_code == 409
        assert baseline.get_json()["error"] == "invalid_transition"

    def test_bad_amount(self, client, badge_order):
        response = client.post(f"/ledger/{badge_order['id']}/entries", json={"amount": -5})

        assert response.status_code == 400

    def test_unknown_parent(self, client):
        assert client.post("/ledger/missing/entries", json={"amount": 1}).status_code == 404

    @pytest.mark.parametrize("body", [
        {"amount": 1000, "method": ["cash"]},
        {"amount": 1000, "method": {"cash": True}},
        {"amount": 1000, "kind": {"payment": 1}},
    ])
    def test_non_string_enum_values(self, client, badge_order, body):
        response = client.post(f"/ledger/{badge_order['id']}/entries", json=body)

        assert response.status_code == 400
        assert response.get_json()["error"] == "validation_error"

    def test_non_string_status(self, client, badge_order):
        entry = client.post(
            f"/ledger/{badge_order['id']}/entries", json={"amount": 1000}
        ).get_json()["entry"]

        response = client.post(
            f"/ledger/entries/{entry['id']}/status", json={"status": {"approved": 1}}, headers=ADMIN
        )

        assert response.status_code == 400


class TestReportRoutes:
    """Payment totals across orders and expenses."""

    def test_payment_report(self, client, badge_order):
        order_id = badge_order["id"]
        client.post(f"/ledger/{order_id}/entries", json={"amount": 100000}, headers=ADMIN)
        client.post(f"/ledger/{order_id}/entries", json={"amount": 20000})
        client.post("/expenses", json={
            "name": "Rent", "total_amount": 600000,
            "payment_method": "bank_transfer", "baseline_advance": 100000,
        })

        report = client.get("/api/reports/payments").get_json()

        orders = report["orders"]
        assert orders["count"] == 1
        assert orders["by_method"]["digital_wallet"] == {"amount": 50000, "count": 1}
        assert orders["by_method"]["cash"] == {"amount": 100000, "count": 1}
        assert orders["outstanding"] == 200000

        expenses = report["expenses"]
        assert expenses["by_method"]["bank_transfer"] == {"amount": 100000, "count": 1}
        assert expenses["by_method"]["cash"] == {"amount": 0, "count": 0}
        assert expenses["outstanding"] == 500000

    def test_empty_report(self, client):
        report = client.get("/api/reports/payments").get_json()

        assert report["orders"]["outstanding"] == 0
        assert report["expenses"]["count"] == 0
