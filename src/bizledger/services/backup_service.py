from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from bizledger.domain.errors import PersistenceError, ValidationError

log = logging.getLogger(__name__)

BACKUP_GLOB = "ledger_backup_*.json"


class BackupService:
    def __init__(self, store, repo, backup_dir: Path | str, max_backups: int = 30):
        self.store = store
        self.repo = repo
        self.backup_dir = Path(backup_dir)
        self.max_backups = max_backups

    def create_backup(self) -> Path:
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        target = self.backup_dir / f"ledger_backup_{ts}.json"

        entries = {key: self.store.get(key) for key in self.store.keys()}
        target.write_text(
            json.dumps({"created_at": datetime.now().isoformat(timespec="seconds"), "entries": entries}, ensure_ascii=False),
            encoding="utf-8",
        )
        self._enforce_retention()
        log.info("backup_created path=%s keys=%s", target, len(entries))
        return target

    def restore_backup(self, backup_file: Path | str) -> Path:
        backup_path = Path(backup_file)
        try:
            document = json.loads(backup_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read backup {backup_path.name}.") from e

        entries = document.get("entries") if isinstance(document, dict) else None
        if not isinstance(entries, dict) or not all(isinstance(v, str) for v in entries.values()):
            raise ValidationError("Invalid backup format.")

        self.repo.restore(entries)
        log.warning("backup_restored path=%s", backup_path.name)
        return backup_path

    def list_backups(self) -> list[Path]:
        if not self.backup_dir.exists():
            return []
        return sorted(self.backup_dir.glob(BACKUP_GLOB))

    def restore_latest_backup(self) -> Path:
        files = self.list_backups()
        if not files:
            raise FileNotFoundError("No backups available to restore")
        return self.restore_backup(files[-1])

    def _enforce_retention(self) -> None:
        files = self.list_backups()
        if len(files) <= self.max_backups:
            return
        for old in files[: len(files) - self.max_backups]:
            old.unlink(missing_ok=True)
