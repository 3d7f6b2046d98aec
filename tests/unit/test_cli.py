"""Tests for the pedigree CLI."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from kennel_pedigree.cli import app
from tests.unit.fakes import write_source

runner = CliRunner()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Import the sample kennel and return the data dir."""
    source = tmp_path / "source"
    write_source(source)
    data = tmp_path / "data"

    result = runner.invoke(app, ["import", "--source-dir", str(source), "--data-dir", str(data)])
    assert result.exit_code == 0, result.output
    return data


def test_import_command_creates_database(data_dir: Path) -> None:
    assert (data_dir / "pedigree.db").exists()


def test_import_reports_counts(tmp_path: Path) -> None:
    source = tmp_path / "source"
    write_source(source)
    args = ["import", "--source-dir", str(source), "--data-dir", str(tmp_path / "data")]

    first = runner.invoke(app, args)
    assert "Imported 2 files (7 dogs), skipped 0" in first.output
    second = runner.invoke(app, args)
    assert "Imported 0 files (0 dogs), skipped 2" in second.output


def test_import_missing_source_dir(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["import", "--source-dir", str(tmp_path / "nope"), "--data-dir", str(tmp_path)]
    )
    assert result.exit_code == 1


def test_commands_require_database(tmp_path: Path) -> None:
    result = runner.invoke(app, ["coi", "rex", "--data-dir", str(tmp_path)])
    assert result.exit_code == 1


def test_show_renders_chart(data_dir: Path) -> None:
    result = runner.invoke(app, ["show", "rex", "-g", "2", "--data-dir", str(data_dir)])
    assert result.exit_code == 0, result.output
    assert "- Subject: **Rex** ♂ (KC-100, Beagle, 2021-04-02)" in result.output
    assert "        - Maternal granddam: unknown" in result.output
    assert "Completeness: 83%" in result.output
    assert "COI: 12.50% (high)" in result.output


def test_show_unknown_dog(data_dir: Path) -> None:
    result = runner.invoke(app, ["show", "nobody", "--data-dir", str(data_dir)])
    assert result.exit_code == 1


def test_generation_json(data_dir: Path) -> None:
    result = runner.invoke(
        app, ["generation", "rex", "2", "--json", "--data-dir", str(data_dir)]
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [slot["position"] for slot in data] == [
        "paternal grandsire",
        "paternal granddam",
        "maternal grandsire",
        "maternal granddam",
    ]
    assert [slot["dog"] and slot["dog"]["id"] for slot in data] == [
        "duke",
        "bella",
        "duke",
        None,
    ]


def test_coi_text(data_dir: Path) -> None:
    result = runner.invoke(app, ["coi", "rex", "--data-dir", str(data_dir)])
    assert result.exit_code == 0, result.output
    assert "COI: 12.50% (high)" in result.output
    assert "Duke [id=duke]" in result.output
    assert "Sire → Sire" in result.output
    assert "Dam → Sire" in result.output


def test_coi_json(data_dir: Path) -> None:
    result = runner.invoke(app, ["coi", "rex", "--json", "--data-dir", str(data_dir)])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["coefficient"] == 0.125
    assert data["risk_level"] == "high"
    assert data["common_ancestors"][0]["dog"]["id"] == "duke"
    assert data["common_ancestors"][0]["occurrences"] == 2


def test_coi_outbred_dog(data_dir: Path) -> None:
    result = runner.invoke(app, ["coi", "pup", "--data-dir", str(data_dir)])
    assert result.exit_code == 0, result.output
    assert "No common ancestors found." in result.output


def test_mating(data_dir: Path) -> None:
    result = runner.invoke(app, ["mating", "max", "luna", "--data-dir", str(data_dir)])
    assert result.exit_code == 0, result.output
    assert "COI: 12.50% (high)" in result.output


def test_mating_wrong_gender(data_dir: Path) -> None:
    result = runner.invoke(app, ["mating", "luna", "max", "--data-dir", str(data_dir)])
    assert result.exit_code == 1


def test_completeness(data_dir: Path) -> None:
    result = runner.invoke(app, ["completeness", "rex", "-g", "1", "--data-dir", str(data_dir)])
    assert result.exit_code == 0, result.output
    assert "100%" in result.output


def test_link_as_admin(data_dir: Path) -> None:
    result = runner.invoke(
        app,
        ["link", "solo", "--sire", "duke", "--dam", "bella", "--role", "admin",
         "--data-dir", str(data_dir)],
    )
    assert result.exit_code == 0, result.output
    assert "Linked solo: sire=duke dam=bella" in result.output

    shown = runner.invoke(app, ["generation", "solo", "1", "--data-dir", str(data_dir)])
    assert "sire: Duke [id=duke]" in shown.output
    assert "dam: Bella [id=bella]" in shown.output


def test_link_denied_for_viewer(data_dir: Path) -> None:
    result = runner.invoke(
        app, ["link", "solo", "--sire", "duke", "--data-dir", str(data_dir)]
    )
    assert result.exit_code == 1


def test_link_rejects_descendant(data_dir: Path) -> None:
    result = runner.invoke(
        app,
        ["link", "max", "--sire", "pup", "--role", "breeder", "--data-dir", str(data_dir)],
    )
    assert result.exit_code == 1


def test_link_requires_a_parent(data_dir: Path) -> None:
    result = runner.invoke(
        app, ["link", "solo", "--role", "admin", "--data-dir", str(data_dir)]
    )
    assert result.exit_code == 1
