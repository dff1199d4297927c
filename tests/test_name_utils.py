import json

from parlay_picker.modeling import name_utils


def test_normalize_player_name_strips_accents_and_suffixes(monkeypatch):
    monkeypatch.setattr(name_utils, "_OVERRIDES", {})
    assert name_utils.normalize_player_name("Nikola Jokić") == "nikola jokic"
    assert name_utils.normalize_player_name("Jaren Jackson Jr.") == "jaren jackson"
    assert name_utils.normalize_player_name(None) == ""


def test_normalize_player_name_applies_overrides(tmp_path, monkeypatch):
    overrides = tmp_path / "overrides.json"
    overrides.write_text(json.dumps({"herb jones": "herbert jones"}), encoding="utf-8")
    monkeypatch.setattr(name_utils.settings, "player_name_overrides_path", str(overrides))
    monkeypatch.setattr(name_utils, "_OVERRIDES", None)
    assert name_utils.normalize_player_name("Herb Jones") == "herbert jones"


def test_abbreviate_player_name():
    assert name_utils.abbreviate_player_name("LeBron James") == "L. James"
    assert name_utils.abbreviate_player_name("Karl-Anthony Towns") == "K. Towns"
    assert name_utils.abbreviate_player_name("Nene") == "Nene"
    assert name_utils.abbreviate_player_name("") == ""
