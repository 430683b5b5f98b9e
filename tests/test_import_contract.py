#!filepath: tests/test_import_contract.py
from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True, slots=True)
class ImportContract:
    """A list of import targets that must remain stable.

    Args:
        targets: Import strings to validate.
    """

    targets: tuple[str, ...]


def _contract() -> ImportContract:
    return ImportContract(
        targets=(
            "azstore_app",
            "azstore_app.cli",
            "azstore_app.catalog",
            "azstore_app.storage",
            "azstore_app.storage.azurite",
            "azstore_app.tui",
            "azstore_app.tui.app",
            "azstore_app.tui.pipeline",
            "azstore_app.tui.navigation",
            "azstore_app.tui.render",
        )
    )


def _import_all(targets: Iterable[str]) -> None:
    for t in targets:
        importlib.import_module(t)


def test_import_contract() -> None:
    """Validate that stable import targets remain importable."""
    _import_all(_contract().targets)
