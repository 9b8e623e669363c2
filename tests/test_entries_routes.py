import os

import pytest
from sqlalchemy import text

from boxcloud.database.config.connection_engine import connection_engine
from boxcloud.database.core.entry_funcs import expand_titles, normalize_titles, pair_title
from boxcloud.api.errors import InvalidInput

from conftest import PDF_BYTES, pdf_file, stored_files, upload_dir


def _upload(client, user, box_id, files=None, data=None):
    return client.post(f"/api/boxes/{box_id}/pdfs", files=files, data=data, headers=user["headers"])


def _row_count(box_id):
    with connection_engine.connect() as conn:
        return conn.execute(text("SELECT COUNT(*) FROM pdfs WHERE box_id = :b"), {"b": box_id}).scalar()


def test_alice_w2_scenario(client, alice, box):
    content = b"%PDF-1.4\n" + b"0" * (2 * 1024 * 1024 - 9)
    assert len(content) == 2097152

    r = _upload(client, alice, box["id"], files=[pdf_file("w2.pdf", content)], data={"title": "W2 Form"})
    assert r.status_code == 201

    detail = client.get(f"/api/boxes/{box['id']}", headers=alice["headers"]).json()
    assert detail["pdfCount"] == 1
    [entry] = detail["pdfs"]
    assert entry["title"] == "W2 Form"
    assert entry["hasFile"] is True
    assert entry["size"] == 2097152
    assert entry["originalName"] == "w2.pdf"
    assert entry["filename"] == entry["path"]
    assert entry["path"].endswith(".pdf")
    stored = os.path.join(upload_dir(), entry["path"])
    assert os.path.isfile(stored)

    r = client.delete(f"/api/boxes/{box['id']}/pdfs/{entry['id']}", headers=alice["headers"])
    assert r.status_code == 200

    detail = client.get(f"/api/boxes/{box['id']}", headers=alice["headers"]).json()
    assert detail["pdfs"] == []
    assert detail["pdfCount"] == 0
    assert not os.path.exists(stored)


def test_single_title_for_many_files_is_numbered(client, alice, box):
    files = [pdf_file(f"f{i}.pdf", PDF_BYTES + bytes([i])) for i in range(3)]
    r = _upload(client, alice, box["id"], files=files, data={"title": "Invoice"})
    assert r.status_code == 201
    created = r.json()
    assert [e["title"] for e in created] == ["Invoice (1)", "Invoice (2)", "Invoice (3)"]
    assert [e["originalName"] for e in created] == ["f0.pdf", "f1.pdf", "f2.pdf"]
    assert all(e["hasFile"] for e in created)


def test_titles_take_precedence_and_extra_titles_become_title_only(client, alice, box):
    r = _upload(
        client,
        alice,
        box["id"],
        files=[pdf_file("a.pdf")],
        data={"title": "ignored", "titles": ["First", "Second"]},
    )
    assert r.status_code == 201
    created = r.json()
    assert [e["title"] for e in created] == ["First", "Second"]
    assert created[0]["hasFile"] is True
    assert created[1]["hasFile"] is False
    assert created[1]["size"] == 0
    assert created[1]["filename"] is None


def test_blank_title_keeps_later_titles_on_their_files(client, alice, box):
    files = [pdf_file("a.pdf"), pdf_file("b.pdf"), pdf_file("c.pdf")]
    r = _upload(client, alice, box["id"], files=files, data={"titles": ["A", " ", "C"]})
    assert r.status_code == 201
    assert [(e["originalName"], e["title"]) for e in r.json()] == [
        ("a.pdf", "A"),
        ("b.pdf", "A"),
        ("c.pdf", "C"),
    ]


def test_all_blank_titles_are_rejected(client, alice, box):
    r = _upload(client, alice, box["id"], files=[pdf_file()], data={"titles": [" ", ""]})
    assert r.status_code == 400
    assert r.json()["error"] == "Title required"
    assert stored_files() == []


def test_more_files_than_titles_reuse_first_title(client, alice, box):
    files = [pdf_file("a.pdf"), pdf_file("b.pdf"), pdf_file("c.pdf")]
    r = _upload(client, alice, box["id"], files=files, data={"titles": ["One", "Two"]})
    assert [e["title"] for e in r.json()] == ["One", "Two", "One"]


def test_titles_without_files(client, alice, box):
    r = _upload(client, alice, box["id"], data={"titles": ["Passport", "Visa"]})
    assert r.status_code == 201
    assert [e["title"] for e in r.json()] == ["Passport", "Visa"]
    assert not any(e["hasFile"] for e in r.json())


def test_upload_requires_a_title(client, alice, box):
    r = _upload(client, alice, box["id"], files=[pdf_file()], data={"title": "   "})
    assert r.status_code == 400
    assert r.json()["message"] == "Please provide at least one title"
    assert stored_files() == []


def test_non_pdf_rejects_whole_request(client, alice, box):
    files = [pdf_file("ok.pdf"), pdf_file("notes.txt", b"hello", "text/plain")]
    r = _upload(client, alice, box["id"], files=files, data={"titles": ["A", "B"]})
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid file type"
    assert stored_files() == []
    assert _row_count(box["id"]) == 0


def test_too_many_files(client, alice, box, monkeypatch):
    from boxcloud.database.config.config import settings

    monkeypatch.setattr(settings, "MAX_FILES_PER_UPLOAD", 2)
    files = [pdf_file(f"{i}.pdf") for i in range(3)]
    r = _upload(client, alice, box["id"], files=files, data={"title": "T"})
    assert r.status_code == 400
    assert stored_files() == []


def test_oversized_file_is_413_and_leaves_nothing(client, alice, box, monkeypatch):
    from boxcloud.database.config.config import settings

    monkeypatch.setattr(settings, "MAX_FILE_SIZE", 64)
    files = [pdf_file("small.pdf", b"%PDF" + b"1" * 10), pdf_file("big.pdf", b"%PDF" + b"2" * 500)]
    r = _upload(client, alice, box["id"], files=files, data={"titles": ["S", "B"]})
    assert r.status_code == 413
    assert stored_files() == []
    assert _row_count(box["id"]) == 0


def test_insert_failure_removes_staged_files(client, alice, box, monkeypatch):
    from boxcloud.database.daos.pdf_dao import PdfDao

    calls = {"n": 0}
    original = PdfDao.createEntry

    def flaky(self, session, entry):
        calls["n"] += 1
        if calls["n"] == 2:
            raise RuntimeError("disk on fire")
        return original(self, session, entry)

    monkeypatch.setattr(PdfDao, "createEntry", flaky)
    r = _upload(client, alice, box["id"], files=[pdf_file("a.pdf"), pdf_file("b.pdf")], data={"titles": ["A", "B"]})
    assert r.status_code == 500
    assert r.json()["error"] == "Failed to upload entries"
    assert stored_files() == []
    assert _row_count(box["id"]) == 0


def test_upload_into_other_users_box(client, alice, bob, box):
    r = _upload(client, bob, box["id"], files=[pdf_file()], data={"title": "x"})
    assert r.status_code == 404
    assert stored_files() == []


def test_title_only_entry(client, alice, box):
    r = client.post(f"/api/boxes/{box['id']}/titles", json={"title": "  Birth certificate "}, headers=alice["headers"])
    assert r.status_code == 201
    entry = r.json()
    assert entry["title"] == "Birth certificate"
    assert entry["hasFile"] is False
    assert entry["size"] == 0
    assert entry["filename"] is None and entry["path"] is None and entry["originalName"] is None


def test_title_only_entry_requires_title(client, alice, box):
    r = client.post(f"/api/boxes/{box['id']}/titles", json={"title": " "}, headers=alice["headers"])
    assert r.status_code == 400


def test_title_only_on_missing_box_is_404_before_title_check(client, alice):
    r = client.post("/api/boxes/nope/titles", json={"title": ""}, headers=alice["headers"])
    assert r.status_code == 404


def test_delete_entry_not_in_box(client, alice, box):
    other = client.post("/api/boxes", json={"name": "Other"}, headers=alice["headers"]).json()
    entry = client.post(f"/api/boxes/{other['id']}/titles", json={"title": "x"}, headers=alice["headers"]).json()

    r = client.delete(f"/api/boxes/{box['id']}/pdfs/{entry['id']}", headers=alice["headers"])
    assert r.status_code == 404
    assert r.json()["error"] == "Entry not found"


def test_title_only_entry_on_legacy_not_null_schema(client, alice, box):
    with connection_engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE pdfs")
        conn.exec_driver_sql(
            """
            CREATE TABLE pdfs (
                id VARCHAR(36) PRIMARY KEY,
                title TEXT NOT NULL,
                filename TEXT NOT NULL,
                original_name TEXT NOT NULL,
                path TEXT NOT NULL,
                size INTEGER NOT NULL DEFAULT 0,
                box_id VARCHAR(36) NOT NULL REFERENCES boxes (id) ON DELETE CASCADE,
                upload_date DATETIME DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    r = client.post(f"/api/boxes/{box['id']}/titles", json={"title": "Legacy"}, headers=alice["headers"])
    assert r.status_code == 201
    assert r.json()["hasFile"] is False
    assert r.json()["filename"] is None

    with connection_engine.connect() as conn:
        row = conn.execute(text("SELECT filename, path, size FROM pdfs")).one()
    assert tuple(row) == ("", "", 0)


class TestTitleHelpers:
    def test_titles_win_over_title(self):
        assert normalize_titles("a", ["b", "c"]) == ["b", "c"]

    def test_single_string_titles(self):
        assert normalize_titles(None, " b ") == ["b"]

    def test_blank_slots_take_first_title(self):
        assert normalize_titles(None, [" ", "B", "", " C "]) == ["B", "B", "B", "C"]

    def test_no_title_raises(self):
        with pytest.raises(InvalidInput):
            normalize_titles(" ", None)

    def test_expand(self):
        assert expand_titles(["T"], 2) == ["T (1)", "T (2)"]
        assert expand_titles(["T"], 1) == ["T"]
        assert expand_titles(["A", "B"], 3) == ["A", "B"]

    def test_pairing_fallbacks(self):
        assert pair_title(["A", "B"], 1) == "B"
        assert pair_title(["A"], 4) == "A"
        assert pair_title([], 2) == "Untitled 3"
