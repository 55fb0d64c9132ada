import pytest
from django.core import mail

from core import notifications
from core.models import ContactMessage

from factories import make_message

pytestmark = pytest.mark.django_db

URL = "/api/messages/"

FORM = {
    "name": "Grace",
    "email": "grace@example.com",
    "subject": "Collaboration",
    "message": "Would you like to work on something together?",
}


def test_empty_subject_is_rejected(api_client):
    resp = api_client.post(URL, {**FORM, "subject": ""}, format="json")
    assert resp.status_code == 400
    assert "subject" in resp.json()["errors"]
    assert ContactMessage.objects.count() == 0


def test_public_submission_then_admin_read(api_client, admin_client):
    resp = api_client.post(URL, FORM, format="json")
    assert resp.status_code == 201
    receipt = resp.json()["data"]
    assert "read" not in receipt
    assert ContactMessage.objects.get(pk=receipt["id"]).read is False

    data = admin_client.get(f"{URL}{receipt['id']}/").json()["data"]
    assert data["read"] is True
    assert ContactMessage.objects.get(pk=receipt["id"]).read is True


def test_sender_cannot_set_read_flag(api_client):
    resp = api_client.post(URL, {**FORM, "read": True}, format="json")
    assert ContactMessage.objects.get(pk=resp.json()["data"]["id"]).read is False


def test_listing_is_admin_only(api_client, admin_client):
    make_message()
    make_message(read=True)

    assert api_client.get(URL).status_code == 401
    body = admin_client.get(URL).json()
    assert body["total"] == 2
    assert body["unread"] == 1
    assert admin_client.get(URL, {"read": "true"}).json()["total"] == 1


def test_mark_unread_and_bulk_read(admin_client):
    a = make_message(read=True)
    b = make_message()

    resp = admin_client.put(f"{URL}{a.pk}/unread/")
    assert resp.json()["data"]["read"] is False

    resp = admin_client.put(f"{URL}bulk/read/", {"ids": [a.pk, b.pk]}, format="json")
    assert resp.json()["updated"] == 2
    assert ContactMessage.objects.filter(read=False).count() == 0


def test_bulk_delete(admin_client):
    a, b = make_message(), make_message()

    resp = admin_client.delete(f"{URL}bulk/delete/", {"ids": [a.pk, b.pk, 12345]}, format="json")
    assert resp.json()["deleted"] == 2


def test_notification_is_sent_when_receiver_configured(api_client, settings):
    settings.CONTACT_RECEIVER_EMAIL = "owner@example.com"

    api_client.post(URL, FORM, format="json")
    assert len(mail.outbox) == 1
    assert mail.outbox[0].subject == "New Contact: Collaboration"
    assert mail.outbox[0].to == ["owner@example.com"]


def test_notification_failure_does_not_fail_submission(api_client, settings, monkeypatch):
    settings.CONTACT_RECEIVER_EMAIL = "owner@example.com"

    def broken(**kwargs):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(notifications, "send_mail", broken)

    resp = api_client.post(URL, FORM, format="json")
    assert resp.status_code == 201
    assert ContactMessage.objects.count() == 1


def test_no_receiver_skips_notification(api_client):
    api_client.post(URL, FORM, format="json")
    assert mail.outbox == []


def test_stats(admin_client):
    make_message()
    make_message(read=True)

    data = admin_client.get(f"{URL}stats/summary/").json()["data"]
    assert data["total_messages"] == 2
    assert data["unread_messages"] == 1
    assert data["recent_messages"] == 2
