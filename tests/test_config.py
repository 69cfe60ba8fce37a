import json

import pytest

from wstest_runner.config import (
    DEFAULT_SETTINGS,
    load_settings,
    resolve_settings_path,
    write_default_suite_config,
)


def test_defaults_without_settings_file():
    settings = load_settings(None)
    assert settings == DEFAULT_SETTINGS
    settings["image"] = "changed"
    assert DEFAULT_SETTINGS["image"] == "crossbario/autobahn-testsuite"


def test_resolve_settings_path_prefers_cli(tmp_path):
    (tmp_path / "wstest_runner.json").write_text("{}", encoding="utf-8")
    assert resolve_settings_path("custom.json", tmp_path).name == "custom.json"
    assert resolve_settings_path(None, tmp_path) == tmp_path / "wstest_runner.json"


def test_resolve_settings_path_missing(tmp_path):
    assert resolve_settings_path(None, tmp_path) is None


def test_load_settings_expands_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("WSTEST_IMAGE", "registry.local/autobahn")
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"image": "${WSTEST_IMAGE}"}), encoding="utf-8")
    settings = load_settings(path)
    assert settings["image"] == "registry.local/autobahn"
    assert settings["container_name"] == "ws-testsuite"


def test_load_settings_rejects_unknown_keys(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"imgae": "typo"}), encoding="utf-8")
    with pytest.raises(ValueError, match="imgae"):
        load_settings(path)


def test_load_settings_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "absent.json")


@pytest.mark.parametrize(
    "overrides",
    [{"config_dir": 5}, {"image": None}, {"interactive": "false"}, {"remove": 0}],
)
def test_load_settings_rejects_mistyped_values(tmp_path, overrides):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(overrides), encoding="utf-8")
    with pytest.raises(ValueError, match="must be of type"):
        load_settings(path)


def test_load_settings_overrides_only_given_keys(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"interactive": False, "network": "bridge"}), encoding="utf-8")
    settings = load_settings(path)
    assert settings == dict(DEFAULT_SETTINGS, interactive=False, network="bridge")


def test_client_starter_config_lists_servers(tmp_path):
    target = tmp_path / "config" / "fuzzingclient.json"
    write_default_suite_config(target, "client")
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["outdir"] == "./reports/servers"
    assert data["servers"][0]["url"].startswith("ws://")
