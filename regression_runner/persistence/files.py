"""File-backed storage for execution records."""

import asyncio
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from regression_runner.models.execution import ExecutionRecord
from regression_runner.persistence.base import ExecutionRecordRepository

log = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


@dataclass(frozen=True, kw_only=True)
class JsonFileExecutionRecordRepository(ExecutionRecordRepository):
    """Stores one JSON document per run so summaries survive restarts."""

    directory: Path

    def path_for(self, execution_id: str) -> Path:
        """Return the file holding the record of a run."""
        return self.directory / f"{_UNSAFE_CHARS.sub('_', execution_id)}.json"

    async def save(self, record: ExecutionRecord) -> ExecutionRecord:
        await asyncio.to_thread(self._write, record)
        return record

    async def find(self, execution_id: str) -> ExecutionRecord | None:
        path = self.path_for(execution_id)
        if not path.exists():
            return None
        data = await asyncio.to_thread(path.read_text, encoding="utf-8")
        return ExecutionRecord.model_validate_json(data)

    def _write(self, record: ExecutionRecord) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(record.execution_id)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(record.model_dump_json(indent=2), encoding="utf-8")
        tmp_path.replace(path)
        log.debug("Saved execution record %s to %s", record.execution_id, path)
