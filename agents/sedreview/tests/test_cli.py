from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest
from typer.testing import CliRunner

from agents.sedreview.app import schemas
from agents.sedreview.app.cli import SUMMARY_FILENAME, app
from agents.sedreview.app.pipeline import check_all, load_samples


runner = CliRunner()


def _write_export(path: Path, frame: pd.DataFrame) -> Path:
    frame.to_csv(path, index=False)
    return path


def test_help_output() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "review" in result.output


def test_csv_export_keeps_code_columns_as_text(tmp_path: Path, make_samples, clean_results) -> None:
    source = _write_export(
        tmp_path / "samples.csv", make_samples([{"UID": "S1", "results": clean_results}])
    )

    data = load_samples(source)

    assert schemas.DISCHARGE_INSTANT in set(data["PARM_CD"])
    assert data["SITE_NO"].iloc[0] == "01"
    assert pd.api.types.is_datetime64_any_dtype(data["SAMPLE_START_DT"])


def test_parquet_export_round_trips(tmp_path: Path, make_samples, clean_results) -> None:
    source = tmp_path / "samples.parquet"
    make_samples([{"UID": "S1", "DB_NO": "02", "results": clean_results}]).to_parquet(
        source, index=False
    )

    data = load_samples(source)

    assert set(data["SITE_NO"]) == {"01"}
    assert set(data["DB_NO"]) == {"02"}
    assert schemas.DISCHARGE_INSTANT in set(data["PARM_CD"])
    assert check_all(data)["UID"].tolist() == ["S1"]


def test_unsupported_export_format(tmp_path: Path) -> None:
    source = tmp_path / "samples.txt"
    source.write_text("UID\nS1\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported sample file format"):
        load_samples(source)


def test_review_command_writes_artifacts(tmp_path: Path, make_samples, clean_results) -> None:
    source = _write_export(
        tmp_path / "samples.csv",
        make_samples(
            [
                {"UID": "S1", "results": clean_results},
                {
                    "UID": "S2",
                    "SAMPLE_START_DT": "2024-01-02 10:00",
                    "results": {**clean_results, schemas.SEDIMENT_MASS: 1.0},
                },
            ]
        ),
    )
    output_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        ["review", "--input", str(source), "--output-dir", str(output_dir), "--all-tables"],
    )

    assert result.exit_code == 1, result.output
    assert "1 flagged samples" in result.output
    flagged = pd.read_csv(output_dir / "flagged_samples.csv", dtype=str)
    assert flagged["UID"].tolist() == ["S2"]
    assert (output_dir / "conc_sand_fine.csv").exists()
    assert (output_dir / "outliers" / "01.csv").exists()
    summary = json.loads((output_dir / SUMMARY_FILENAME).read_text(encoding="utf-8"))
    assert summary["flagged_count"] == 1
    assert summary["flagged_samples"][0]["UID"] == "S2"


def test_clean_export_exits_successfully(
    monkeypatch, tmp_path: Path, make_samples, clean_results
) -> None:  # type: ignore[no-untyped-def]
    source = _write_export(
        tmp_path / "samples.csv",
        make_samples(
            [
                {"UID": "S1", "results": clean_results},
                {"UID": "S2", "SAMPLE_START_DT": "2024-01-02 10:00", "results": clean_results},
            ]
        ),
    )
    monkeypatch.setenv("SEDREVIEW_ARTIFACTS_DIR", str(tmp_path / "artifacts"))

    result = runner.invoke(app, ["review", "-i", str(source), "--summary-only"])

    assert result.exit_code == 0, result.output
    assert "0 flagged samples" in result.output
    assert sorted(path.name for path in (tmp_path / "artifacts").iterdir()) == [
        "flagged_samples.csv",
        SUMMARY_FILENAME,
    ]


def test_invalid_qa_db_is_rejected(tmp_path: Path, make_samples, clean_results) -> None:
    source = _write_export(
        tmp_path / "samples.csv", make_samples([{"UID": "S1", "results": clean_results}])
    )

    result = runner.invoke(
        app, ["review", "-i", str(source), "--qa-db", "2", "-o", str(tmp_path / "out")]
    )

    assert result.exit_code == 2
    assert not (tmp_path / "out").exists()
