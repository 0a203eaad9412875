from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError

from .models import Shift

logger = logging.getLogger(__name__)

SHIFT_STATE_KEY = "shift_state"


@dataclass
class ShiftStorage:
    """Durable home of the active shift, one JSON file per data directory."""

    app_name: str = "moonland_pos"
    data_dir: str | Path | None = None
    filename: str = f"{SHIFT_STATE_KEY}.json"

    def _path(self) -> Path:
        base = Path(self.data_dir) if self.data_dir else Path(user_data_dir(self.app_name, "Moonland"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def save(self, shift: Shift) -> None:
        path = self._path()
        path.write_text(json.dumps(shift.model_dump(by_alias=True), indent=2))
        try:
            path.chmod(0o600)
        except OSError:
            pass

    def load(self) -> Shift | None:
        path = self._path()
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            logger.warning("shift_state_corrupt", extra={"path": str(path)})
            self.clear()
            return None
        try:
            return Shift.model_validate(data)
        except ValidationError:
            logger.warning("shift_state_invalid", extra={"path": str(path)})
            self.clear()
            return None

    def clear(self) -> None:
        path = self._path()
        if path.exists():
            path.unlink()

    def exists(self) -> bool:
        return self._path().exists()
