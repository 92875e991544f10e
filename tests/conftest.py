# tests/conftest.py
from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Iterable

import pytest

from patron_registry.config import Config
from patron_registry.domain.patron import Patron
from patron_registry.repositories.directory import PatronDirectory
from patron_registry.services.patron_service import PatronService

SAMPLE_LINES = [
    "1234567-Jane Doe-123 Pine St Apt #2-12.50",
    "1245789-Sarah Jones-1136 Gorden Ave. Orlando, FL 32822-40.54",
    "0070070-James Bond-25 Wellington Square, Apartment 2-B, Chelsea, London-UK-0.07",
]


@pytest.fixture
def test_logger() -> logging.Logger:
    """
    Logger for tests; propagates to the root logger so caplog sees it.
    """
    logger = logging.getLogger("patron_registry")
    logger.handlers.clear()
    logger.propagate = True
    return logger


@pytest.fixture
def directory() -> PatronDirectory:
    return PatronDirectory()


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(patrons_file=str(tmp_path / "Patrons.txt"))


@pytest.fixture
def service(directory: PatronDirectory, config: Config) -> PatronService:
    return PatronService(directory, config)


def make_patron(patron_id: str = "1234567", name: str = "Jane Doe",
                address: str = "123 Pine St", fine: str = "12.50") -> Patron:
    """
    Helper to build a Patron without going through validation.
    """
    return Patron(id=patron_id, name=name, address=address, fine=Decimal(fine))


def write_lines(path: Path, lines: Iterable[str]) -> Path:
    path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
    return path
