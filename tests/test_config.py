from __future__ import annotations

import logging
from decimal import Decimal

import pytest

from patron_registry.config import Config


def test_defaults():
    config = Config()
    assert config.patrons_file == "Patrons.txt"
    assert config.min_fine == Decimal("0.00")
    assert config.max_fine == Decimal("1000.00")
    assert config.log_level_value == logging.INFO


def test_from_env_reads_prefixed_variables():
    config = Config.from_env(
        {
            "PATRON_REGISTRY_PATRONS_FILE": "data/patrons.txt",
            "PATRON_REGISTRY_MAX_FINE": "250.00",
            "PATRON_REGISTRY_LOG_LEVEL": "debug",
            "PATRON_REGISTRY_LOG_TO_FILE": "yes",
            "UNRELATED": "ignored",
        }
    )
    assert config.patrons_file == "data/patrons.txt"
    assert config.max_fine == Decimal("250.00")
    assert config.min_fine == Decimal("0.00")
    assert config.log_level_value == logging.DEBUG
    assert config.log_to_file is True


def test_from_env_empty_values_fall_back_to_defaults():
    config = Config.from_env({"PATRON_REGISTRY_PATRONS_FILE": "  "})
    assert config.patrons_file == "Patrons.txt"


@pytest.mark.parametrize(
    "env",
    [
        {"PATRON_REGISTRY_MAX_FINE": "lots"},
        {"PATRON_REGISTRY_LOG_TO_FILE": "maybe"},
        {"PATRON_REGISTRY_LOG_LEVEL": "LOUD"},
        {"PATRON_REGISTRY_MIN_FINE": "10", "PATRON_REGISTRY_MAX_FINE": "5"},
        {"PATRON_REGISTRY_MIN_FINE": "-1"},
        {"PATRON_REGISTRY_ENCODING": "latin-9x"},
    ],
)
def test_invalid_env_values_raise(env):
    with pytest.raises(ValueError):
        Config.from_env(env)


def test_encoding_aliases_are_accepted():
    assert Config(encoding="latin-1").encoding == "latin-1"
    with pytest.raises(ValueError, match="unknown encoding"):
        Config(encoding="latin-9x")
