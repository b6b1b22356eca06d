from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from agents.sedreview.app.config import ReviewSettings, get_settings


@pytest.fixture(autouse=True)
def _clear_environment(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    for name in ("QA_DB", "INCLUDE_UV", "RETURN_ALL_TABLES", "ARTIFACTS_DIR", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"SEDREVIEW_{name}", raising=False)


def test_defaults() -> None:
    settings = get_settings()

    assert settings.qa_db == "02"
    assert settings.include_uv is False
    assert settings.return_all_tables is False
    assert settings.artifacts_dir == Path("artifacts")


def test_prefixed_and_bare_environment_names(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setenv("SEDREVIEW_INCLUDE_UV", "true")
    monkeypatch.setenv("QA_DB", "05")

    settings = get_settings()

    assert settings.include_uv is True
    assert settings.qa_db == "05"


def test_field_names_are_accepted() -> None:
    settings = ReviewSettings.model_validate({"qa_db": " 07 ", "return_all_tables": True})

    assert settings.qa_db == "07"
    assert settings.return_all_tables is True


@pytest.mark.parametrize("qa_db", ["2", "002", "ab"])
def test_qa_db_must_be_two_digits(qa_db: str) -> None:
    with pytest.raises(ValidationError):
        ReviewSettings.model_validate({"qa_db": qa_db})


def test_resolved_artifacts_dir_is_created(tmp_path: Path) -> None:
    settings = ReviewSettings.model_validate({"artifacts_dir": tmp_path / "nested" / "out"})

    assert settings.resolved_artifacts_dir.is_dir()


def test_log_level_is_normalised() -> None:
    settings = ReviewSettings.model_validate({"log_level": " debug "})

    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("log_level", ["verbose", "", "TRACE"])
def test_unknown_log_level_is_rejected(log_level: str) -> None:
    with pytest.raises(ValidationError):
        ReviewSettings.model_validate({"log_level": log_level})
