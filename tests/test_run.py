import json

import yaml

from matching.run import run_demo, main


def test_run_demo_writes_outputs(tmp_path, default_config_path):
    result = run_demo(str(default_config_path), pool_size=30, n_seekers=3, seed=7,
                      output_dir=str(tmp_path))

    assert result["success"]
    assert result["statistics"]["total"] == 30
    assert set(result["batch_results"]) <= {"seeker_001", "seeker_002", "seeker_003"}
    assert (tmp_path / "match_report.json").exists()
    assert (tmp_path / "match_details.csv").exists()

    saved = json.loads((tmp_path / "match_report.json").read_text())
    assert saved["selected_id"] == result["selected_id"]


def test_run_demo_falls_back_to_configured_output_dir(tmp_path, default_config_path):
    config = yaml.safe_load(default_config_path.read_text())
    config["global"]["output_dir"] = str(tmp_path / "from_config")
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump(config))

    run_demo(str(config_path), pool_size=10, n_seekers=0, seed=1)

    assert (tmp_path / "from_config" / "match_report.json").exists()
    assert (tmp_path / "from_config" / "match_config.json").exists()


def test_run_demo_is_reproducible(tmp_path, default_config_path):
    first = run_demo(str(default_config_path), pool_size=50, n_seekers=0, seed=3,
                     output_dir=str(tmp_path / "first"))
    second = run_demo(str(default_config_path), pool_size=50, n_seekers=0, seed=3,
                      output_dir=str(tmp_path / "second"))
    assert first["statistics"] == second["statistics"]


def test_main_returns_error_code_for_missing_config(tmp_path, monkeypatch):
    monkeypatch.setattr("sys.argv", ["run", "--config", str(tmp_path / "nope.yaml")])
    assert main() == 1
