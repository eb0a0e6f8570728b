import json

import pandas as pd
import pytest
import yaml
from click.testing import CliRunner

from regionrisk.cli import cli


@pytest.fixture
def input_files(tmp_path, make_participant):
    participants = [
        make_participant("P-1", "Zakarpattia", "A").to_dict(),
        make_participant("P-2", "Lviv", "AA").to_dict(),
    ]
    (tmp_path / "participants.json").write_text(json.dumps(participants), encoding="utf-8")
    pd.DataFrame([
        {"region_id": "Zakarpattia", "safety_level": "average"},
        {"region_id": "Lviv", "safety_level": "above_average"},
    ]).to_csv(tmp_path / "experts.csv", index=False)
    (tmp_path / "visits.json").write_text(
        json.dumps({"Zakarpattia": 0.75, "Lviv": 0.78}), encoding="utf-8"
    )
    return tmp_path


def _compute_args(base, *extra):
    return [
        "compute",
        "--participants", str(base / "participants.json"),
        "--experts", str(base / "experts.csv"),
        "--repeat-visits", str(base / "visits.json"),
        *extra,
    ]


def test_compute_pretty_report(input_files):
    result = CliRunner().invoke(cli, _compute_args(input_files, "--show-participants"))
    assert result.exit_code == 0, result.output
    assert "REGIONAL RISK REPORT" in result.output
    assert "Loaded 2 participant(s)" in result.output
    assert "Zakarpattia" in result.output
    assert "MEDIUM" in result.output
    assert "P-2" in result.output
    assert result.output.index("Lviv") < result.output.index("Zakarpattia")


def test_compute_json_output(input_files):
    result = CliRunner().invoke(cli, _compute_args(input_files, "--output", "json"))
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert [r["regionId"] for r in data["results"]] == ["Lviv", "Zakarpattia"]
    zakarpattia = data["results"][1]
    assert zakarpattia["riskIndex"] == pytest.approx(0.54875)
    assert zakarpattia["riskLabel"] == "medium"
    assert data["manifest"]["participant_count"] == 2


def test_compute_region_filter(input_files):
    result = CliRunner().invoke(
        cli, _compute_args(input_files, "--output", "json", "--region", "Lviv")
    )
    assert result.exit_code == 0, result.output
    assert [r["regionId"] for r in json.loads(result.stdout)["results"]] == ["Lviv"]


def test_compute_export_and_manifest(input_files):
    export = input_files / "out.csv"
    manifest = input_files / "manifest.json"
    result = CliRunner().invoke(
        cli,
        _compute_args(input_files, "--export", str(export), "--save-manifest", str(manifest)),
    )
    assert result.exit_code == 0, result.output

    df = pd.read_csv(export)
    assert list(df["region_id"]) == ["Lviv", "Zakarpattia"]
    assert set(df["risk_label"]) <= {"very_high", "high", "medium", "low", "very_low"}

    saved = json.loads(manifest.read_text(encoding="utf-8"))
    assert saved["regions_computed"] == ["Lviv", "Zakarpattia"]
    assert len(saved["config_hash"]) == 64


def test_compute_missing_expert_fails(input_files):
    pd.DataFrame([{"region_id": "Zakarpattia", "safety_level": "average"}]).to_csv(
        input_files / "experts.csv", index=False
    )
    result = CliRunner().invoke(cli, _compute_args(input_files))
    assert result.exit_code == 1
    assert "Computation failed" in result.output
    assert "Lviv" in result.output


def test_compute_bad_input_fails(input_files):
    (input_files / "visits.json").write_text("{broken", encoding="utf-8")
    result = CliRunner().invoke(cli, _compute_args(input_files))
    assert result.exit_code == 1
    assert "Could not load input" in result.output


def test_compute_with_config_file(input_files):
    config_path = input_files / "model.yaml"
    config_path.write_text(
        yaml.safe_dump({"version": 5, "thresholds": {
            "veryHighMax": 0.1, "highMax": 0.2, "mediumMax": 0.3, "lowMax": 0.5,
        }}),
        encoding="utf-8",
    )
    result = CliRunner().invoke(
        cli, _compute_args(input_files, "--config", str(config_path), "--output", "json")
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["configVersion"] == 5
    assert data["results"][1]["riskLabel"] == "very_low"


def test_config_show_default():
    result = CliRunner().invoke(cli, ["config", "show"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert len(data["config_hash"]) == 64
    assert data["config"]["criteriaGroups"]["medical"][0] == "K13"


def test_config_validate(tmp_path):
    good = tmp_path / "good.yaml"
    good.write_text(yaml.safe_dump({"linguisticScale": {"l1": 1, "l2": 2}}), encoding="utf-8")
    result = CliRunner().invoke(cli, ["config", "validate", str(good)])
    assert result.exit_code == 0
    assert "Configuration is valid" in result.output

    bad = tmp_path / "bad.yaml"
    bad.write_text(yaml.safe_dump({"expertScale": {"breakpoints": [0, 1]}}), encoding="utf-8")
    result = CliRunner().invoke(cli, ["config", "validate", str(bad)])
    assert result.exit_code == 1
    assert "Could not load config" in result.output
