import pytest

from pick_regrade.config import ConfigError, load_config, normalize_sports


def test_load_config_defaults(tmp_path, monkeypatch):
    for name in ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY", "CFB_SUPABASE_URL", "CFB_SUPABASE_ANON_KEY"):
        monkeypatch.delenv(name, raising=False)
    config = load_config(tmp_path / "missing.yaml")

    assert config.settings.sports == ["nba", "ncaab"]
    assert config.settings.leagues == {"nba": "NBA", "ncaab": "NCAAB"}
    assert config.settings.changed_sample_limit == 500
    assert config.picks_store.table == "avatar_picks"
    assert config.picks_store.rpc == "recalculate_avatar_performance"
    assert config.results_store.table == "all_game_results"
    assert not config.picks_store.configured
    with pytest.raises(ConfigError, match="SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY"):
        config.picks_store.require()


def test_load_config_reads_env_and_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://main.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service")
    monkeypatch.setenv("CFB_SUPABASE_URL", "https://cfb.supabase.co")
    monkeypatch.setenv("CFB_SUPABASE_ANON_KEY", "anon")
    settings = tmp_path / "settings.yaml"
    settings.write_text(
        "sports: [NBA, ' wnba ']\n"
        "leagues:\n  nba: nba\n  wnba: WNBA\n"
        "changed_sample_limit: 50\n"
        "unrelated: true\n",
        encoding="utf-8",
    )

    config = load_config(settings)

    assert config.picks_store.require() is config.picks_store
    assert config.results_store.configured
    assert config.settings.sports == ["nba", "wnba"]
    assert config.settings.leagues == {"nba": "NBA", "wnba": "WNBA"}
    assert config.settings.league_for(" WNBA ") == "WNBA"
    assert config.settings.league_for("nfl") is None
    assert config.settings.changed_sample_limit == 50
    assert config.settings.timezone == "America/New_York"


def test_settings_file_must_be_mapping(tmp_path):
    settings = tmp_path / "settings.yaml"
    settings.write_text("- nba\n- ncaab\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(settings)


def test_normalize_sports():
    assert normalize_sports("NBA, ncaab,,nba") == ["nba", "ncaab"]
    assert normalize_sports([" NBA ", ""]) == ["nba"]
    assert normalize_sports(None) == []
