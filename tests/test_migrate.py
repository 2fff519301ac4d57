from __future__ import annotations

import pytest

from zenspend import models, schemas
from zenspend.services import MigrationService, SettingsService


def _payload():
    return {
        "categories": [
            {"id": "groceries", "name": "Groceries", "weeklyBudget": 800, "period": "weekly", "color": "#10b981"},
            {"id": "misc", "name": "Misc", "budget": 200, "period": "monthly", "color": "#6366f1"},
        ],
        "transactions": [
            {
                "id": "t-1", "date": "2025-02-03", "amount": 45, "categoryId": "groceries",
                "description": "Market", "type": "expense", "isFixed": False, "groupId": None,
            },
            {
                "id": "t-2", "date": "2025-02-15", "amount": 1200, "categoryId": "fixed",
                "description": "Rent", "type": "expense", "isFixed": True, "groupId": "g-rent",
                "createdAt": "2025-01-01T10:00:00",
            },
        ],
        "settings": {
            "monthlyIncome": 7000, "currency": "£", "showFixedCosts": False,
            "checkingBalance": 2500, "creditCardBalance": 150,
        },
    }


def test_import_then_export(client):
    r = client.post("/api/migrate/import", json=_payload())
    assert r.status_code == 200, r.text
    assert r.json()["data"] == {
        "categoriesImported": 2,
        "transactionsImported": 2,
        "settingsUpdated": True,
    }

    r = client.get("/api/migrate/export")
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert {c["id"] for c in data["categories"]} == {"groceries", "misc"}
    assert [t["id"] for t in data["transactions"]] == ["t-1", "t-2"]
    rent = data["transactions"][1]
    assert rent["groupId"] == "g-rent"
    assert rent["createdAt"].startswith("2025-01-01T10:00")
    assert data["settings"]["currency"] == "£"
    assert data["settings"]["monthlyIncome"] == 7000
    assert data["exportedAt"]


def test_import_skips_existing_ids(client):
    client.post("/api/migrate/import", json=_payload())
    again = _payload()
    again["transactions"][0]["description"] = "Changed"
    again["settings"]["currency"] = "$"

    r = client.post("/api/migrate/import", json=again)
    assert r.status_code == 200
    assert r.json()["data"]["categoriesImported"] == 0
    assert r.json()["data"]["transactionsImported"] == 0

    tx = client.get("/api/transactions/t-1").json()["data"]
    assert tx["description"] == "Market"
    assert client.get("/api/settings").json()["data"]["currency"] == "$"


def test_import_rejects_malformed_payload_atomically(client):
    bad = _payload()
    bad["transactions"][1]["amount"] = -3
    r = client.post("/api/migrate/import", json=bad)
    assert r.status_code == 400
    assert client.get("/api/categories").json()["data"] == []
    assert client.get("/api/transactions").json()["data"] == []


def test_export_empty_database(client):
    data = client.get("/api/migrate/export").json()["data"]
    assert data["categories"] == []
    assert data["transactions"] == []
    assert data["settings"]["monthlyIncome"] == 8000


def test_export_reimports_cleanly_under_new_ids(client, make_transaction):
    make_transaction(amount=0.0001, description="Rounding guard")
    make_transaction(amount=12.3456, description="Four places")
    exported = client.get("/api/migrate/export").json()["data"]
    assert [t["amount"] for t in exported["transactions"]] == [0.0001, 12.3456]

    for tx in exported["transactions"]:
        tx["id"] = f"copy-{tx['id']}"
    r = client.post("/api/migrate/import", json=exported)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["transactionsImported"] == 2


def test_import_rejects_amount_finer_than_storage(client):
    bad = _payload()
    bad["transactions"][0]["amount"] = 45.00001
    r = client.post("/api/migrate/import", json=bad)
    assert r.status_code == 400
    assert r.json()["error"]["details"][0]["loc"][-1] == "amount"


def test_import_failure_midway_rolls_back_everything(db_session, monkeypatch):
    SettingsService(db_session).update({"currency": "€"})
    payload = schemas.ImportRequest.model_validate(_payload())

    original = models.Transaction.__init__
    calls = {"count": 0}

    def flaky_init(self, *args, **kwargs):
        calls["count"] += 1
        if calls["count"] == 2:
            raise RuntimeError("storage failure")
        original(self, *args, **kwargs)

    monkeypatch.setattr(models.Transaction, "__init__", flaky_init)
    with pytest.raises(RuntimeError):
        MigrationService(db_session).import_data(payload)
    monkeypatch.undo()

    assert db_session.query(models.Category).count() == 0
    assert db_session.query(models.Transaction).count() == 0
    assert db_session.get(models.UserSettings, models.SETTINGS_ID).currency == "€"
