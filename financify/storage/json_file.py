"""
JSON File Data Source

Reads the state document exported by the dashboard front end:

    {
      "currency": "USD",
      "personal": {"accounts": [...], "transactions": [...], "categories": [...]},
      "home": {...},
      ...other keys are ignored...
    }

The file is read once per load() call; nothing is written back.
"""

import asyncio
import json
from pathlib import Path
from typing import Optional, Union

import structlog
from pydantic import ValidationError

from financify.models.finance import UserFinances
from financify.storage.interface import (
    DashboardDataSource,
    DataNotFoundError,
    InvalidDataError,
)


logger = structlog.get_logger(__name__)


class JsonFileDataSource(DashboardDataSource):
    """Loads UserFinances from an exported JSON file."""

    def __init__(self, path: Union[Path, str], default_currency: Optional[str] = None):
        self._path = Path(path)
        self._default_currency = default_currency

    @property
    def name(self) -> str:
        return f"json:{self._path}"

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> UserFinances:
        if not self._path.is_file():
            raise DataNotFoundError(f"Data file not found: {self._path}")

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidDataError(f"Could not read {self._path}: {e}") from e

        if not isinstance(raw, dict):
            raise InvalidDataError(
                f"Expected a JSON object at the top of {self._path}"
            )
        if self._default_currency and not raw.get("currency"):
            raw["currency"] = self._default_currency

        try:
            return UserFinances.model_validate(raw)
        except ValidationError as e:
            raise InvalidDataError(
                f"{self._path} does not match the dashboard format: "
                f"{e.error_count()} error(s)"
            ) from e

    async def load(self) -> UserFinances:
        finances = await asyncio.to_thread(self._read)
        logger.info(
            "data_file_loaded",
            path=str(self._path),
            personal_transactions=len(finances.personal.transactions),
            home_transactions=len(finances.home.transactions),
        )
        return finances
