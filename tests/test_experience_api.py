from datetime import date

import pytest

from core.models import Experience

from factories import make_experience

pytestmark = pytest.mark.django_db

URL = "/api/experience/"


def test_current_position_drops_end_date(admin_client):
    resp = admin_client.post(URL, {
        "company": "Initech",
        "role": "Engineer",
        "start_date": "2022-03-01",
        "end_date": "2023-01-01",
        "current": True,
        "description": "Maintained the TPS report pipeline.",
    }, format="json")
    assert resp.status_code == 201
    assert resp.json()["data"]["end_date"] is None


def test_switching_to_current_clears_stored_end_date(admin_client):
    exp = make_experience(end_date=date(2021, 6, 30))

    resp = admin_client.patch(f"{URL}{exp.pk}/", {"current": True}, format="json")
    assert resp.status_code == 200
    exp.refresh_from_db()
    assert exp.current is True
    assert exp.end_date is None


def test_model_save_enforces_current_rule():
    exp = make_experience(current=True, end_date=date(2024, 1, 1))
    assert Experience.objects.get(pk=exp.pk).end_date is None


def test_end_before_start_is_rejected(admin_client):
    resp = admin_client.post(URL, {
        "company": "Initech",
        "role": "Engineer",
        "start_date": "2022-03-01",
        "end_date": "2021-01-01",
        "description": "Backwards in time.",
    }, format="json")
    assert resp.status_code == 400
    assert "end_date" in resp.json()["errors"]


def test_filter_current_and_default_order(api_client):
    make_experience(company="Old", start_date=date(2015, 1, 1), end_date=date(2018, 1, 1))
    make_experience(company="Now", start_date=date(2020, 1, 1), current=True)

    body = api_client.get(URL).json()
    assert [e["company"] for e in body["data"]] == ["Now", "Old"]
    body = api_client.get(URL, {"current": "true"}).json()
    assert [e["company"] for e in body["data"]] == ["Now"]
