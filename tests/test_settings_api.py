from sqlalchemy.orm import sessionmaker

from zenspend import models
from zenspend.services import SettingsService


def test_settings_created_with_defaults(client):
    r = client.get("/api/settings")
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["monthlyIncome"] == 8000
    assert data["currency"] == "$"
    assert data["showFixedCosts"] is True
    assert data["checkingBalance"] == 0
    assert data["creditCardBalance"] == 0
    assert data["balanceAsOf"]


def test_settings_partial_update(client):
    client.get("/api/settings")
    r = client.put("/api/settings", json={"monthlyIncome": 9500, "showFixedCosts": False})
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["monthlyIncome"] == 9500
    assert data["showFixedCosts"] is False
    assert data["currency"] == "$"


def test_settings_balance_as_of_is_stored(client):
    r = client.put("/api/settings", json={
        "checkingBalance": 1500.5,
        "creditCardBalance": 320,
        "balanceAsOf": "2025-03-01T09:30:00",
    })
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["checkingBalance"] == 1500.5
    assert data["balanceAsOf"].startswith("2025-03-01T09:30")


def test_settings_rejects_invalid_values(client):
    assert client.put("/api/settings", json={"monthlyIncome": -1}).status_code == 400
    assert client.put("/api/settings", json={"currency": None}).status_code == 400
    assert client.put("/api/settings", json={"currency": ""}).status_code == 400


def test_settings_singleton(client, db_session):
    client.get("/api/settings")
    client.put("/api/settings", json={"currency": "€"})
    client.get("/api/settings")
    assert db_session.query(models.UserSettings).count() == 1


def test_settings_get_or_create_survives_concurrent_insert(db_session, engine, monkeypatch):
    original_get = db_session.get
    calls = {"count": 0}

    def racing_get(entity, ident, **kwargs):
        calls["count"] += 1
        if calls["count"] == 1:
            # a second request inserts the singleton right after our read
            other = sessionmaker(bind=engine)()
            try:
                values = {**SettingsService(other).defaults(), "currency": "€"}
                other.add(models.UserSettings(id=models.SETTINGS_ID, **values))
                other.commit()
            finally:
                other.close()
            return None
        return original_get(entity, ident, **kwargs)

    monkeypatch.setattr(db_session, "get", racing_get)
    row = SettingsService(db_session).get_or_create()
    monkeypatch.undo()

    assert row.currency == "€"
    assert db_session.query(models.UserSettings).count() == 1
