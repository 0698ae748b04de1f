"""JSON persistence for sheets and workbooks"""

import logging
from pathlib import Path
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from config import settings
from core.exceptions import PersistenceError
from core.models import Sheet, WorkbookSnapshot
from grid.store import Workbook

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class JsonSheetStore:
    """Saves sheets and whole workbooks as pydantic JSON documents"""

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir) if base_dir is not None else settings.get_data_path("sheets")

    def _resolve(self, path: Path | str) -> Path:
        path = Path(path)
        if not path.is_absolute() and path.parent == Path("."):
            path = self.base_dir / path
        if not path.suffix:
            path = path.with_suffix(".json")
        return path

    def _write(self, model: BaseModel, path: Path | str) -> Path:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(model.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to save {target}: {e}", str(target)) from e
        logger.info("Saved %s", target)
        return target

    def _read(self, model_type: Type[ModelT], path: Path | str) -> ModelT:
        target = self._resolve(path)
        if not target.exists():
            raise PersistenceError(f"File not found: {target}", str(target))
        try:
            model = model_type.model_validate_json(target.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise PersistenceError(f"Failed to load {target}: {e}", str(target)) from e
        logger.info("Loaded %s", target)
        return model

    def save_sheet(self, sheet: Sheet, path: Path | str | None = None) -> Path:
        return self._write(sheet, path or sheet.id)

    def load_sheet(self, path: Path | str) -> Sheet:
        return self._read(Sheet, path)

    def save_workbook(self, workbook: Workbook, path: Path | str = "workbook") -> Path:
        return self._write(workbook.snapshot(), path)

    def load_workbook(self, path: Path | str = "workbook") -> Workbook:
        snapshot = self._read(WorkbookSnapshot, path)
        if not snapshot.sheets:
            raise PersistenceError(f"No sheets in {path}", str(path))
        return Workbook.from_snapshot(snapshot)
