import argparse
import json

import pytest

from diarias.config import load_base_url, load_default_credentials
from diarias.core.models import Level, WorkDayType
from diarias.core.months import Month
from diarias.core.reconcile import DaySelection
from diarias.main import build_parser, main, parse_day_specs, parse_level
from diarias.services.api_client import APIClient


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("DIARIAS_HOME", str(tmp_path))
    for name in ("DIARIAS_API_BASE_URL", "DIARIAS_API_USERNAME", "DIARIAS_API_PASSWORD", "DIARIAS_API_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def test_day_specs():
    selections = parse_day_specs(Month(2024, 3), ["5", "12f", "20+2", "21F+1"])

    assert selections == {
        "2024-03-05": DaySelection(WorkDayType.COMUM, 0),
        "2024-03-12": DaySelection(WorkDayType.FESTA, 0),
        "2024-03-20": DaySelection(WorkDayType.COMUM, 2),
        "2024-03-21": DaySelection(WorkDayType.FESTA, 1),
    }


@pytest.mark.parametrize("spec", ["x", "5g", "5+", "-1"])
def test_bad_day_spec(spec):
    with pytest.raises(ValueError):
        parse_day_specs(Month(2024, 3), [spec])


def test_day_beyond_month_end():
    with pytest.raises(ValueError):
        parse_day_specs(Month(2023, 2), ["29"])


def test_level_accepts_label_or_name():
    assert parse_level("recreador(a) experiente") is Level.RECREADOR_EXPERIENTE
    assert parse_level("COORDENADOR") is Level.COORDENADOR
    with pytest.raises(argparse.ArgumentTypeError):
        parse_level("Chefe")


def test_parser_rejects_unknown_sort():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["list", "--sort", "salary"])


def test_base_url_priority(home, monkeypatch):
    assert load_base_url() == "http://127.0.0.1:8000"

    (home / "config.json").write_text(json.dumps({"api_base_url": "http://store.local:9000/"}), encoding="utf-8")
    assert load_base_url() == "http://store.local:9000"

    monkeypatch.setenv("DIARIAS_API_BASE_URL", "https://diarias.example")
    assert load_base_url() == "https://diarias.example"


def test_credentials_from_config_file(home):
    (home / "config.json").write_text(
        json.dumps({"api_username": "ana", "api_password": "segredo"}), encoding="utf-8"
    )

    assert load_default_credentials() == {"username": "ana", "password": "segredo", "access_token": None}


def test_unreadable_config_is_ignored(home):
    (home / "config.json").write_text("{oops", encoding="utf-8")
    assert load_base_url() == "http://127.0.0.1:8000"


@pytest.mark.parametrize(
    "base_url, expected",
    [("http://127.0.0.1:8000", "ws://127.0.0.1:8000/ws"), ("https://diarias.example/", "wss://diarias.example/ws")],
)
def test_websocket_url(base_url, expected):
    assert APIClient(base_url=base_url).websocket_url == expected


def test_prefs_command_writes_to_the_data_dir(home, capsys):
    assert main(["prefs", "--view", "list"]) == 0
    assert main(["prefs", "--toggle-theme"]) == 0

    saved = json.loads((home / "preferences.json").read_text(encoding="utf-8"))
    assert saved == {"theme": "dark", "view_mode": "list"}
    assert "tema=dark" in capsys.readouterr().out


def test_session_command_without_login_fails_cleanly(home, capsys):
    assert main(["list"]) == 1
    assert "Não autenticado" in capsys.readouterr().err
