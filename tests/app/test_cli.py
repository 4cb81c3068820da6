from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from catalog_import.app import ImportRunResult
from catalog_import.config import ChannelConfig, ImportConfig
from catalog_import.domain.importing import SourceFormatError, ValidationSummary
from catalog_import.ui import cli as cli_module

if TYPE_CHECKING:
    from catalog_import.domain.importing import SkipRecord


def test_cli_passes_flags_to_import(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_import(path: Path, **kwargs: object) -> ImportRunResult:
        captured["path"] = path
        captured.update(kwargs)
        return ImportRunResult()

    monkeypatch.setattr(cli_module, "import_category_file", fake_import)

    cli_module.main(
        [
            "categories",
            "categories.csv",
            "--batch-size",
            "50",
            "--allowed-errors",
            "3",
            "--root-category-id",
            "1",
            "--locale",
            "fr",
        ]
    )

    assert captured["path"] == Path("categories.csv")
    assert captured["import_config"] == ImportConfig(batch_size=50, allowed_errors=3)
    assert captured["channel"] == ChannelConfig(root_category_id=1, locale="fr")


def test_cli_uses_environment_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_import(path: Path, **kwargs: object) -> ImportRunResult:
        _ = path
        captured.update(kwargs)
        return ImportRunResult()

    monkeypatch.setattr(cli_module, "import_category_file", fake_import)
    monkeypatch.setenv("CATALOG_IMPORT_BATCH_SIZE", "20")
    monkeypatch.delenv("CATALOG_IMPORT_ALLOWED_ERRORS", raising=False)
    monkeypatch.delenv("CATALOG_ROOT_CATEGORY_ID", raising=False)
    monkeypatch.setenv("CATALOG_LOCALE", "nl")

    cli_module.main(["categories", "categories.csv"])

    assert captured["import_config"] == ImportConfig(batch_size=20)
    assert captured["channel"] == ChannelConfig(locale="nl")


def test_cli_validate_only(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[Path] = []

    def fake_validate(
        path: Path, **_: object
    ) -> tuple[ValidationSummary, tuple[SkipRecord, ...]]:
        calls.append(path)
        return ValidationSummary(processed_rows=2, invalid_rows=0, error_count=0), ()

    def fail_import(*_: object, **__: object) -> ImportRunResult:
        raise AssertionError("import must not run")

    monkeypatch.setattr(cli_module, "validate_category_file", fake_validate)
    monkeypatch.setattr(cli_module, "import_category_file", fail_import)

    cli_module.main(["categories", "categories.csv", "--validate-only"])

    assert calls == [Path("categories.csv")]


def test_cli_invalid_batch_size_exits_with_2(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "import_category_file", lambda *_, **__: ImportRunResult())

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["categories", "categories.csv", "--batch-size", "0"])

    assert excinfo.value.code == 2


def test_cli_malformed_environment_exits_with_2(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CATALOG_ROOT_CATEGORY_ID", "root")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["categories", "categories.csv"])

    assert excinfo.value.code == 2


def test_cli_fatal_error_exits_with_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_import(*_: object, **__: object) -> ImportRunResult:
        raise SourceFormatError("categories.csv is missing required columns: status")

    monkeypatch.setattr(cli_module, "import_category_file", fake_import)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["categories", "categories.csv"])

    assert excinfo.value.code == 1
