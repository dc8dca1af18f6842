from __future__ import annotations

import json

from fleetmap.app.key_store import ApiKeyStore, configured_key_from_env


def test_configured_key_env_precedence(monkeypatch):
    assert configured_key_from_env() == ""
    monkeypatch.setenv("ORS_API_KEY", "generic")
    assert configured_key_from_env() == "generic"
    monkeypatch.setenv("FLEETMAP_ORS_API_KEY", " app-specific ")
    assert configured_key_from_env() == "app-specific"


def test_override_takes_precedence_and_persists(tmp_path):
    path = tmp_path / "nested" / "key.json"
    store = ApiKeyStore(configured_key="configured", override_path=path)
    assert store.current() == "configured"
    assert store.source == "configured"

    store.save("  user-key ")

    assert store.current() == "user-key"
    assert store.source == "override"
    assert json.loads(path.read_text(encoding="utf-8")) == {"ors_api_key": "user-key"}
    assert ApiKeyStore(override_path=path).current() == "user-key"


def test_clear_falls_back_to_configured(tmp_path):
    path = tmp_path / "key.json"
    store = ApiKeyStore(configured_key="configured", override_path=path)
    store.save("user-key")

    store.clear()

    assert store.current() == "configured"
    assert ApiKeyStore(override_path=path).source == "none"


def test_save_without_persist_keeps_file_untouched(tmp_path):
    path = tmp_path / "key.json"
    store = ApiKeyStore(override_path=path)

    store.save("session-only", persist=False)

    assert store.current() == "session-only"
    assert not path.exists()


def test_corrupt_file_is_ignored(tmp_path):
    path = tmp_path / "key.json"
    path.write_text("{not json", encoding="utf-8")

    store = ApiKeyStore(configured_key="configured", override_path=path)

    assert store.current() == "configured"


def test_from_env_uses_key_file_variable(monkeypatch, tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"ors_api_key": "from-file"}), encoding="utf-8")
    monkeypatch.setenv("FLEETMAP_KEY_FILE", str(path))
    monkeypatch.setenv("ORS_API_KEY", "from-env")

    store = ApiKeyStore.from_env()

    assert store.current() == "from-file"
    assert store.configured_key == "from-env"
