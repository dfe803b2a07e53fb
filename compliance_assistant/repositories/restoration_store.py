"""Restoration store implementations (in-memory and JSON file)"""
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from compliance_assistant.interfaces.restoration_store import IRestorationStore, RestorationRecord

logger = logging.getLogger(__name__)


class InMemoryRestorationStore(IRestorationStore):
    """Keeps the record for the lifetime of the process only"""

    def __init__(self, record: Optional[RestorationRecord] = None):
        self._record = record

    def load(self) -> Optional[RestorationRecord]:
        return self._record

    def save(self, record: RestorationRecord) -> None:
        self._record = record

    def clear(self) -> None:
        self._record = None


class JsonFileRestorationStore(IRestorationStore):
    """Persists the record as a small JSON document across restarts"""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> Optional[RestorationRecord]:
        """Read the record; a missing or corrupt file reads as no record."""
        try:
            raw = self.path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Could not read restoration record {self.path}: {e}")
            return None

        try:
            return RestorationRecord.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Malformed restoration record at {self.path}: {e.error_count()} errors")
            return None

    def save(self, record: RestorationRecord) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        tmp_path.write_text(record.model_dump_json(), encoding='utf-8')
        tmp_path.replace(self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
