import pytest

from core.models import Project

from factories import make_project

pytestmark = pytest.mark.django_db

URL = "/api/projects/"

NEW_PROJECT = {
    "title": "Issue tracker",
    "description": "Tracks issues across several repositories.",
    "short_description": "Small issue tracker",
    "image": "projects/tracker.png",
    "technologies": ["Django", "Django", " HTMX "],
    "category": "Web App",
}


def test_public_listing_envelope(api_client):
    make_project(title="One")
    make_project(title="Two")

    body = api_client.get(URL, {"limit": 1}).json()
    assert body["success"] is True
    assert body["count"] == 1
    assert body["total"] == 2
    assert len(body["data"]) == 1


def test_create_requires_admin(api_client, user_client, admin_client):
    assert api_client.post(URL, NEW_PROJECT, format="json").status_code == 401
    assert user_client.post(URL, NEW_PROJECT, format="json").status_code == 403

    resp = admin_client.post(URL, NEW_PROJECT, format="json")
    assert resp.status_code == 201
    assert resp.json()["message"] == "Project created successfully"
    assert resp.json()["data"]["technologies"] == ["Django", "HTMX"]


def test_create_then_fetch_round_trip(api_client, admin_client):
    created = admin_client.post(URL, NEW_PROJECT, format="json").json()["data"]

    fetched = api_client.get(f"{URL}{created['id']}/").json()["data"]
    assert fetched == created


def test_create_reports_field_errors(admin_client):
    resp = admin_client.post(URL, {"title": "ab", "technologies": []}, format="json")
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Validation failed"
    for key in ("title", "description", "short_description", "technologies"):
        assert key in body["errors"]


def test_duplicate_title_is_rejected(admin_client):
    make_project(title=NEW_PROJECT["title"])
    resp = admin_client.post(URL, NEW_PROJECT, format="json")
    assert resp.status_code == 400
    assert "title" in resp.json()["errors"]


def test_missing_and_malformed_ids_are_404(api_client):
    resp = api_client.get(f"{URL}999/")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Project not found"

    resp = api_client.get(f"{URL}not-an-id/")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_partial_update_and_delete(admin_client):
    project = make_project()

    resp = admin_client.patch(f"{URL}{project.pk}/", {"status": "archived"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "archived"

    resp = admin_client.delete(f"{URL}{project.pk}/")
    assert resp.status_code == 200
    assert resp.json()["data"] == {}
    assert not Project.objects.filter(pk=project.pk).exists()


def test_toggle_featured_and_featured_list(api_client, admin_client):
    project = make_project()
    make_project(title="Other")

    resp = admin_client.put(f"{URL}{project.pk}/toggle-featured/")
    assert resp.json()["data"]["featured"] is True

    body = api_client.get(f"{URL}featured/list/").json()
    assert [p["id"] for p in body["data"]] == [project.pk]


def test_by_category(api_client):
    make_project(title="A", category="Web App")
    make_project(title="B", category="Backend")

    body = api_client.get(f"{URL}category/Web App/").json()
    assert body["category"] == "Web App"
    assert [p["title"] for p in body["data"]] == ["A"]


def test_bulk_delete(admin_client):
    a, b, c = (make_project(title=t) for t in ("A", "B", "C"))

    resp = admin_client.delete(f"{URL}bulk/delete/", {"ids": [a.pk, b.pk]}, format="json")
    assert resp.json()["deleted"] == 2
    assert list(Project.objects.values_list("pk", flat=True)) == [c.pk]

    resp = admin_client.delete(f"{URL}bulk/delete/", {"ids": []}, format="json")
    assert resp.status_code == 400


def test_reorder_rejects_unknown_ids_without_writing(admin_client):
    a = make_project(title="A", order=1)

    resp = admin_client.put(
        f"{URL}reorder/bulk/",
        {"items": [{"id": a.pk, "order": 5}, {"id": 9999, "order": 1}]},
        format="json",
    )
    assert resp.status_code == 400
    assert "items" in resp.json()["errors"]
    a.refresh_from_db()
    assert a.order == 1


def test_reorder(admin_client):
    a = make_project(title="A", order=1)
    b = make_project(title="B", order=2)

    resp = admin_client.put(
        f"{URL}reorder/bulk/",
        {"items": [{"id": a.pk, "order": 2}, {"id": b.pk, "order": 1}]},
        format="json",
    )
    assert resp.status_code == 200
    assert [p["title"] for p in resp.json()["data"]] == ["B", "A"]


def test_stats(api_client):
    make_project(title="A", technologies=["Django", "React"], featured=True)
    make_project(title="B", technologies=["Django"])

    data = api_client.get(f"{URL}stats/summary/").json()["data"]
    assert data["total_projects"] == 2
    assert data["featured_projects"] == 1
    assert data["total_technologies"] == 2
    assert data["top_technologies"][0] == {"name": "Django", "count": 2}


def test_huge_limit_is_a_normal_listing(api_client):
    make_project()

    resp = api_client.get(URL, {"limit": "99999999999999999999"})
    assert resp.status_code == 200
    assert resp.json()["count"] == 1


def test_search_follows_technology_updates(api_client, admin_client):
    project = make_project(technologies=["Flask"])

    admin_client.patch(f"{URL}{project.pk}/", {"technologies": ["Café"]}, format="json")
    assert api_client.get(URL, {"search": "café"}).json()["total"] == 1
    assert api_client.get(URL, {"search": "flask"}).json()["total"] == 0


def test_malformed_id_is_json_404_in_debug(api_client, settings):
    settings.DEBUG = True

    resp = api_client.get(f"{URL}not-an-id/")
    assert resp.status_code == 404
    assert resp.json()["reason"] == "not_found"
