import base64
import os

from conftest import pdf_file, stored_files, upload_dir


def test_create_box_defaults(client, alice):
    r = client.post("/api/boxes", json={"name": "  Taxes 2024  "}, headers=alice["headers"])
    assert r.status_code == 201
    body = r.json()
    assert body["name"] == "Taxes 2024"
    assert body["status"] == "active"
    assert body["retentionDate"] is None
    assert body["pdfCount"] == 0
    assert body["createdAt"]


def test_create_box_with_retention_and_status(client, alice):
    r = client.post(
        "/api/boxes",
        json={"name": "Lease", "retentionDate": "2031-01-31", "status": "borrowed"},
        headers=alice["headers"],
    )
    assert r.status_code == 201
    assert r.json()["retentionDate"] == "2031-01-31"
    assert r.json()["status"] == "borrowed"


def test_blank_name_is_rejected(client, alice):
    r = client.post("/api/boxes", json={"name": "   "}, headers=alice["headers"])
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid box name"


def test_unknown_status_is_rejected(client, alice):
    r = client.post("/api/boxes", json={"name": "X", "status": "archived"}, headers=alice["headers"])
    assert r.status_code == 400


def test_boxes_require_authentication(client):
    assert client.get("/api/boxes").status_code == 401


def test_list_is_scoped_to_owner_and_counts_entries(client, alice, bob, box):
    client.post("/api/boxes", json={"name": "Bob's"}, headers=bob["headers"])

    listed = client.get("/api/boxes", headers=alice["headers"]).json()
    assert [b["id"] for b in listed] == [box["id"]]
    assert listed[0]["pdfCount"] == 0

    created = client.post(
        f"/api/boxes/{box['id']}/titles", json={"title": "Receipt"}, headers=alice["headers"]
    ).json()
    assert client.get("/api/boxes", headers=alice["headers"]).json()[0]["pdfCount"] == 1

    client.delete(f"/api/boxes/{box['id']}/pdfs/{created['id']}", headers=alice["headers"])
    assert client.get("/api/boxes", headers=alice["headers"]).json()[0]["pdfCount"] == 0


def test_update_is_full_replace(client, alice):
    created = client.post(
        "/api/boxes",
        json={"name": "Lease", "retentionDate": "2031-01-31", "status": "restricted"},
        headers=alice["headers"],
    ).json()

    r = client.put(f"/api/boxes/{created['id']}", json={"name": "Lease 2"}, headers=alice["headers"])
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "Lease 2"
    assert body["retentionDate"] is None
    assert body["status"] == "active"
    assert body["pdfCount"] == 0


def test_update_rejects_blank_name(client, alice, box):
    r = client.put(f"/api/boxes/{box['id']}", json={"name": ""}, headers=alice["headers"])
    assert r.status_code == 400


def test_other_users_box_is_not_found(client, alice, bob, box):
    paths = [
        ("get", f"/api/boxes/{box['id']}", None),
        ("put", f"/api/boxes/{box['id']}", {"name": "mine now"}),
        ("delete", f"/api/boxes/{box['id']}", None),
        ("get", f"/api/boxes/{box['id']}/qr", None),
        ("post", f"/api/boxes/{box['id']}/titles", {"title": "x"}),
    ]
    for method, url, body in paths:
        kwargs = {"headers": bob["headers"]}
        if body is not None:
            kwargs["json"] = body
        r = getattr(client, method)(url, **kwargs)
        assert r.status_code == 404, (method, url, r.text)
        assert r.json()["error"] == "Box not found"

    # Same answer for a box that does not exist at all.
    assert client.get("/api/boxes/does-not-exist", headers=bob["headers"]).status_code == 404
    # And the box is untouched.
    assert client.get(f"/api/boxes/{box['id']}", headers=alice["headers"]).json()["name"] == "Taxes 2024"


def test_delete_box_removes_entries_and_files(client, alice, box):
    r = client.post(
        f"/api/boxes/{box['id']}/pdfs",
        files=[pdf_file("a.pdf"), pdf_file("b.pdf")],
        data={"titles": ["A", "B", "C"]},
        headers=alice["headers"],
    )
    assert r.status_code == 201
    assert len(r.json()) == 3
    assert len(stored_files()) == 2

    r = client.delete(f"/api/boxes/{box['id']}", headers=alice["headers"])
    assert r.status_code == 200
    assert stored_files() == []
    assert client.get(f"/api/boxes/{box['id']}", headers=alice["headers"]).status_code == 404

    from boxcloud.database.config.connection_engine import connection_engine
    from sqlalchemy import text

    with connection_engine.connect() as conn:
        remaining = conn.execute(text("SELECT COUNT(*) FROM pdfs WHERE box_id = :b"), {"b": box["id"]}).scalar()
    assert remaining == 0


def test_delete_box_tolerates_missing_files(client, alice, box):
    r = client.post(
        f"/api/boxes/{box['id']}/pdfs", files=[pdf_file()], data={"title": "A"}, headers=alice["headers"]
    )
    os.remove(os.path.join(upload_dir(), r.json()[0]["path"]))

    assert client.delete(f"/api/boxes/{box['id']}", headers=alice["headers"]).status_code == 200


def test_qr_code(client, alice, box):
    r = client.get(f"/api/boxes/{box['id']}/qr", headers=alice["headers"])
    assert r.status_code == 200
    body = r.json()
    assert body["url"] == f"http://testserver.local/view/{box['id']}"
    prefix = "data:image/png;base64,"
    assert body["qrCode"].startswith(prefix)
    assert base64.b64decode(body["qrCode"][len(prefix):]).startswith(b"\x89PNG")
