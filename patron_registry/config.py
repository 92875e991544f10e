import codecs
import logging
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

ENV_PREFIX = "PATRON_REGISTRY_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Config:
    """Immutable runtime configuration for the patron registry.

    A simple holder of tunables used across the system. Only light sanity
    checks happen in __post_init__; no I/O.
    """

    patrons_file: str = "Patrons.txt"
    min_fine: Decimal = Decimal("0.00")
    max_fine: Decimal = Decimal("1000.00")
    encoding: str = "utf-8"
    temp_suffix: str = ".tmp"
    log_level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"

    def __post_init__(self) -> None:
        if not isinstance(self.patrons_file, str) or not self.patrons_file:
            raise ValueError("patrons_file must be a non-empty string")
        if not isinstance(self.min_fine, Decimal) or not isinstance(self.max_fine, Decimal):
            raise ValueError("min_fine and max_fine must be Decimal values")
        if not self.min_fine.is_finite() or not self.max_fine.is_finite():
            raise ValueError("min_fine and max_fine must be finite")
        if self.min_fine < 0:
            raise ValueError("min_fine must be non-negative")
        if self.min_fine > self.max_fine:
            raise ValueError("min_fine must not be greater than max_fine")
        if not isinstance(self.encoding, str) or not self.encoding:
            raise ValueError("encoding must be a non-empty string")
        try:
            codecs.lookup(self.encoding)
        except LookupError as exc:
            raise ValueError(f"unknown encoding {self.encoding!r}") from exc
        if not isinstance(self.temp_suffix, str) or not self.temp_suffix:
            raise ValueError("temp_suffix must be a non-empty string")
        if not isinstance(self.log_level, str) or not isinstance(
            logging.getLevelName(self.log_level.upper()), int
        ):
            raise ValueError(f"log_level must be a logging level name, got {self.log_level!r}")

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level.upper())

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build a Config from PATRON_REGISTRY_* variables, defaults elsewhere.

        The CLI calls python-dotenv's load_dotenv() first, so a local .env
        file feeds into os.environ before this runs.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            if value is None or not value.strip():
                return None
            return value.strip()

        def money(name: str, default: Decimal) -> Decimal:
            raw = get(name)
            if raw is None:
                return default
            try:
                return Decimal(raw)
            except InvalidOperation as exc:
                raise ValueError(f"{ENV_PREFIX}{name} must be a decimal amount, got {raw!r}") from exc

        def flag(name: str, default: bool) -> bool:
            raw = get(name)
            if raw is None:
                return default
            if raw.lower() in _TRUE:
                return True
            if raw.lower() in _FALSE:
                return False
            raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")

        return cls(
            patrons_file=get("PATRONS_FILE") or defaults.patrons_file,
            min_fine=money("MIN_FINE", defaults.min_fine),
            max_fine=money("MAX_FINE", defaults.max_fine),
            encoding=get("ENCODING") or defaults.encoding,
            temp_suffix=get("TEMP_SUFFIX") or defaults.temp_suffix,
            log_level=get("LOG_LEVEL") or defaults.log_level,
            log_to_file=flag("LOG_TO_FILE", defaults.log_to_file),
            log_dir=get("LOG_DIR") or defaults.log_dir,
        )
