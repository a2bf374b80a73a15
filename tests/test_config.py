import pytest

from matching.configs import load_config, validate_config, get_config_value
from matching.entities import MatchConfig, DEFAULT_MATCH_CONFIG


def test_default_config_is_valid(default_config_path):
    config = load_config(str(default_config_path))
    assert validate_config(config) == []
    assert MatchConfig.from_config(config) == DEFAULT_MATCH_CONFIG


def test_missing_config_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


def test_empty_config_file_raises(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_validate_reports_issues():
    config = {
        "global": {},
        "matching": {"cooldown_seconds": -1, "max_wait_seconds": 10, "min_wait_seconds": 20},
        "pool_generation": {"blacklist_probability": 1.5},
        "batch": {"n_jobs": 0},
    }
    issues = validate_config(config)

    assert "Missing required section: report" in issues
    assert any("cooldown_seconds" in issue for issue in issues)
    assert any("max_wait_seconds" in issue for issue in issues)
    assert any("blacklist_probability" in issue for issue in issues)
    assert any("n_jobs" in issue for issue in issues)
    assert any("random_seed" in issue for issue in issues)


def test_get_config_value_dot_path():
    config = {"matching": {"cooldown_seconds": 600}}
    assert get_config_value(config, "matching.cooldown_seconds") == 600
    assert get_config_value(config, "matching.unknown", default=7) == 7
    assert get_config_value(config, "missing.path") is None


def test_match_config_defaults():
    assert DEFAULT_MATCH_CONFIG.cooldown_seconds == 600
    assert DEFAULT_MATCH_CONFIG.max_wait_seconds == 300
    assert DEFAULT_MATCH_CONFIG.min_wait_seconds == 20


def test_match_config_validation():
    with pytest.raises(ValueError):
        MatchConfig(cooldown_seconds=-5).validate()
    with pytest.raises(ValueError):
        MatchConfig(max_wait_seconds=10, min_wait_seconds=20).validate()


def test_match_config_save_and_load(tmp_path):
    path = tmp_path / "match_config.json"
    config = MatchConfig(cooldown_seconds=120, max_wait_seconds=240, min_wait_seconds=15)
    config.save(str(path))
    assert MatchConfig.load(str(path)) == config
