"""Ablage der Gruppen-Snapshots: Interface + In-Memory- und JSON-Implementierung."""

import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol

from pydantic import BaseModel

from models.group import Group


class GroupRepository(Protocol):
    """Speicher-Schnittstelle, die der GroupService per Konstruktor erhält."""

    def get(self, group_id: str) -> Optional[Group]: ...

    def list_groups(self) -> list[Group]: ...

    def save(self, group: Group) -> None: ...

    def delete(self, group_id: str) -> bool: ...


class InMemoryGroupRepository:
    """Gruppen im Speicher, Einfügereihenfolge bleibt erhalten."""

    def __init__(self, groups: Optional[list[Group]] = None) -> None:
        self._groups: dict[str, Group] = {g.id: g for g in groups or []}

    def get(self, group_id: str) -> Optional[Group]:
        return self._groups.get(group_id)

    def list_groups(self) -> list[Group]:
        return list(self._groups.values())

    def save(self, group: Group) -> None:
        self._groups[group.id] = group

    def delete(self, group_id: str) -> bool:
        return self._groups.pop(group_id, None) is not None


class GroupDataset(BaseModel):
    """Dateiformat des JSON-Speichers."""

    groups: list[Group] = []
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"


class JsonGroupRepository(InMemoryGroupRepository):
    """Wie InMemoryGroupRepository, schreibt aber nach jeder Änderung die
    komplette Datei neu."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._write_lock = threading.Lock()
        self._created_at: Optional[datetime] = None
        super().__init__()
        if self.path.exists():
            dataset = self.load_json(self.path)
            self._groups = {g.id: g for g in dataset.groups}
            self._created_at = dataset.created_at

    def save(self, group: Group) -> None:
        with self._write_lock:
            super().save(group)
            self._flush()

    def delete(self, group_id: str) -> bool:
        with self._write_lock:
            removed = super().delete(group_id)
            if removed:
                self._flush()
            return removed

    def _flush(self) -> None:
        """Schreibt den aktuellen Stand; nur unter `_write_lock` aufrufen."""
        now = datetime.now(timezone.utc)
        self._created_at = self._created_at or now
        dataset = GroupDataset(
            groups=self.list_groups(),
            created_at=self._created_at,
            modified_at=now,
        )
        self.save_json(dataset, self.path)

    # ─── Persistenz ────────────────────────────────────────────────────────

    @staticmethod
    def save_json(dataset: GroupDataset, path: Path) -> None:
        """Speichert den kompletten Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(dataset.model_dump_json(indent=2))

    @staticmethod
    def load_json(path: Path) -> GroupDataset:
        """Lädt einen Datensatz aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return GroupDataset.model_validate_json(f.read())
