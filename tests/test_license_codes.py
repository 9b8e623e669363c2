import json
import logging

from starlette.testclient import TestClient

from boxcloud.database.config.config import settings
from boxcloud.database.core.funcs import add_license_code, get_license_code, import_license_codes
from boxcloud.main import create_app


def test_import_license_codes_from_file(tmp_path):
    path = tmp_path / "license-codes.json"
    path.write_text(
        json.dumps(
            {
                "licenseCodes": {
                    "ALPHA-2024": {"maxUses": 5, "currentUses": 2},
                    "BETA-2024": {"maxUses": 1},
                }
            }
        )
    )

    assert import_license_codes(str(path)) == 2
    assert get_license_code(code="ALPHA-2024") == {"code": "ALPHA-2024", "maxUses": 5, "currentUses": 2}
    assert get_license_code(code="BETA-2024")["currentUses"] == 0


def test_import_keeps_existing_counters(tmp_path):
    add_license_code(code="ALPHA-2024", max_uses=5, current_uses=4)
    path = tmp_path / "codes.json"
    path.write_text(json.dumps({"licenseCodes": {"ALPHA-2024": {"maxUses": 50, "currentUses": 0}}}))

    assert import_license_codes(str(path)) == 0
    assert get_license_code(code="ALPHA-2024")["currentUses"] == 4


def test_missing_file_imports_nothing(tmp_path):
    assert import_license_codes(str(tmp_path / "absent.json")) == 0


def test_add_license_code_is_idempotent():
    assert add_license_code(code="X") is True
    assert add_license_code(code="X") is False


def test_malformed_file_is_logged_and_imports_nothing(tmp_path, caplog):
    path = tmp_path / "codes.json"
    path.write_text("{not json")

    with caplog.at_level(logging.ERROR, logger="boxcloud.database.core.funcs"):
        assert import_license_codes(str(path)) == 0
    assert "Could not read license codes" in caplog.text


def test_wrongly_shaped_file_imports_nothing(tmp_path):
    path = tmp_path / "codes.json"
    path.write_text(json.dumps({"licenseCodes": ["ALPHA-2024"]}))
    assert import_license_codes(str(path)) == 0
    assert get_license_code(code="ALPHA-2024") is None


def test_app_starts_with_malformed_license_file(tmp_path, monkeypatch):
    path = tmp_path / "codes.json"
    path.write_text("{not json")
    monkeypatch.setattr(settings, "LICENSE_CODES_FILE", str(path))

    with TestClient(create_app()) as c:
        assert c.get("/api/health").status_code == 200
