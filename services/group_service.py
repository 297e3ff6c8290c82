"""GroupService – alle Mutationen am Gruppen-Aggregat.

Jede Änderung an Terminen, Abonnements oder Lektions-Zuordnungen läuft unter
der Sperre der jeweiligen Gruppe: aktuellen Snapshot lesen → Änderung
anwenden → abgeleitete Felder (name, start_date/end_date, price) neu
berechnen → neuen Snapshot speichern. Kein Leser sieht je abgeleitete
Felder, die nicht zu den Quellfeldern passen.

Fehler kommen als Err(ConstraintViolation | NotFound) zurück, nie als Exception.
"""

import logging
import math
import threading
import uuid
from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Union

from pydantic import ValidationError

from config.schema import EngineConfig
from engine.assignments import LectureAssignmentTracker
from engine.dates import date_envelope
from engine.naming import generate_group_name
from engine.pricing import PricingEngine, has_subscription_type
from engine.session_validator import SessionValidator
from models.group import DERIVED_FIELDS, IDENTITY_FIELDS, Group, GroupDraft, GroupFilters
from models.lecture_assignment import AssignmentUpdate, LectureStatus
from models.session import Session
from models.subscription import Subscription, SubscriptionType
from services.repository import GroupRepository
from services.results import ConstraintViolation, Err, NotFound, Ok, Result

logger = logging.getLogger(__name__)

SOURCE_FIELDS = frozenset(GroupDraft.model_fields)
# Änderungen an diesen Feldern erzwingen einen neuen Gruppennamen
NAME_INPUTS = frozenset({"sessions", "courses", "total_lectures"})


def _format_validation_errors(exc: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(p) for p in err['loc']) or 'value'}: {err['msg']}"
        for err in exc.errors()
    ]


class GroupService:
    """Einstiegspunkt für UI/CLI: erzeugt und verändert Gruppen."""

    def __init__(
        self,
        repository: GroupRepository,
        config: Optional[EngineConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.repository = repository
        self.config = config or EngineConfig()
        self.validator = SessionValidator(self.config.scheduling)
        self.pricing = PricingEngine(self.config.pricing)
        self.tracker = LectureAssignmentTracker()
        self._clock = clock or datetime.now
        self._locks: dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    # ─── Sperren ────────────────────────────────────────────────────────────

    def _lock_for(self, group_id: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(group_id)
            if lock is None:
                lock = self._locks[group_id] = threading.RLock()
            return lock

    def _mutate(
        self,
        group_id: str,
        change: Callable[[Group], Result],
        expected_version: Optional[int] = None,
    ) -> Result:
        """Lesen → ändern → speichern als eine atomare Einheit pro Gruppe."""
        with self._lock_for(group_id):
            current = self.repository.get(group_id)
            if current is None:
                return Err(NotFound("group", group_id))
            if expected_version is not None and current.version != expected_version:
                return Err(ConstraintViolation(
                    f"Group {group_id} was modified concurrently",
                    [f"expected version {expected_version}, found {current.version}"],
                ))
            result = change(current)
            if result.is_ok:
                self.repository.save(result.value)
            return result

    # ─── Invarianten & Ableitung ────────────────────────────────────────────

    def _check_invariants(
        self, draft: GroupDraft, validate_sessions: bool
    ) -> Optional[ConstraintViolation]:
        if validate_sessions:
            report = self.validator.validate_session_set(draft.sessions)
            if not report.is_valid:
                return ConstraintViolation("Invalid sessions", report.errors)

        types = [s.type for s in draft.subscriptions]
        duplicates = sorted({t.value for t in types if types.count(t) > 1})
        if duplicates:
            return ConstraintViolation(
                "Only one subscription per type is allowed",
                [f"duplicate type: {t}" for t in duplicates],
            )

        out_of_range = self._lectures_out_of_range(
            [a.lecture_number for a in draft.teacher_assignments], draft.total_lectures
        )
        if out_of_range:
            return out_of_range
        return None

    def _lectures_out_of_range(
        self, lecture_numbers: Iterable[int], total_lectures: int
    ) -> Optional[ConstraintViolation]:
        bad = sorted({n for n in lecture_numbers if not 1 <= n <= total_lectures})
        if not bad:
            return None
        return ConstraintViolation(
            f"Lecture numbers must lie between 1 and {total_lectures}",
            [f"lecture {n}" for n in bad],
        )

    def _derive(self, draft: GroupDraft, changed: Iterable[str], now: datetime) -> dict:
        """Berechnet die von `changed` betroffenen abgeleiteten Felder."""
        changed = set(changed)
        derived: dict[str, Any] = {}
        if changed & NAME_INPUTS:
            derived["name"] = generate_group_name(
                draft.sessions, self.config.scheduling.fallback_group_name
            )
        if "sessions" in changed:
            derived["start_date"], derived["end_date"] = date_envelope(draft.sessions, now)
        if "subscriptions" in changed:
            derived["price"] = self.pricing.calculate_total_price(draft.subscriptions)
        return derived

    def _commit(self, current: Group, updates: dict[str, Any]) -> Result:
        """Neuen Snapshot aus `current` + Quellfeld-Änderungen bauen."""
        source = current.model_dump(include=set(SOURCE_FIELDS))
        source.update(updates)
        try:
            draft = GroupDraft.model_validate(source)
        except ValidationError as exc:
            return Err(ConstraintViolation("Invalid group data", _format_validation_errors(exc)))

        violation = self._check_invariants(draft, validate_sessions="sessions" in updates)
        if violation:
            logger.warning(f"Gruppe {current.id}: {violation}")
            return Err(violation)

        now = self._clock()
        data = current.model_dump()
        data.update(draft.model_dump())
        data.update(self._derive(draft, updates.keys(), now))
        data["updated_at"] = now
        data["version"] = current.version + 1
        return Ok(Group.model_validate(data))

    # ─── Gruppen ────────────────────────────────────────────────────────────

    def add_group(self, draft: Union[GroupDraft, dict]) -> Result:
        """Legt eine Gruppe an; name, Start/Ende und Preis werden abgeleitet."""
        try:
            draft = GroupDraft.model_validate(
                draft.model_dump() if isinstance(draft, GroupDraft) else draft
            )
        except ValidationError as exc:
            return Err(ConstraintViolation("Invalid group data", _format_validation_errors(exc)))

        violation = self._check_invariants(draft, validate_sessions=True)
        if violation:
            logger.warning(f"Neue Gruppe abgelehnt: {violation}")
            return Err(violation)

        now = self._clock()
        group_id = f"group_{uuid.uuid4().hex[:12]}"
        data = draft.model_dump()
        data.update(self._derive(draft, SOURCE_FIELDS, now))
        data.update(id=group_id, created_at=now, updated_at=now, version=1)
        group = Group.model_validate(data)

        with self._lock_for(group_id):
            self.repository.save(group)
        logger.info(f"Gruppe angelegt: {group.id} '{group.name}'")
        return Ok(group)

    def update_group(
        self,
        group_id: str,
        updates: dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> Result:
        """Quellfelder ändern; betroffene abgeleitete Felder werden neu berechnet."""
        protected = sorted(set(updates) & (DERIVED_FIELDS | IDENTITY_FIELDS))
        if protected:
            return Err(ConstraintViolation(
                "Derived and identity fields cannot be updated directly", protected
            ))
        unknown = sorted(set(updates) - SOURCE_FIELDS)
        if unknown:
            return Err(ConstraintViolation("Unknown group fields", unknown))

        return self._mutate(
            group_id, lambda current: self._commit(current, dict(updates)), expected_version
        )

    def get_group(self, group_id: str) -> Result:
        group = self.repository.get(group_id)
        if group is None:
            return Err(NotFound("group", group_id))
        return Ok(group)

    def list_groups(self) -> list[Group]:
        return self.repository.list_groups()

    def delete_groups(self, group_ids: Iterable[str]) -> int:
        """Löscht alle angegebenen Gruppen; unbekannte IDs werden ignoriert."""
        deleted = 0
        for group_id in group_ids:
            with self._lock_for(group_id):
                if self.repository.delete(group_id):
                    deleted += 1
            with self._registry_lock:
                self._locks.pop(group_id, None)
        if deleted:
            logger.info(f"{deleted} Gruppe(n) gelöscht")
        return deleted

    # ─── Termine ────────────────────────────────────────────────────────────

    def check_session(
        self,
        group_id: str,
        candidate: Union[Session, dict],
        exclude_session_id: Optional[str] = None,
    ) -> Result:
        """Nur prüfen, nichts speichern. Ok(SessionValidationResult) auch bei Verstößen."""
        group = self.repository.get(group_id)
        if group is None:
            return Err(NotFound("group", group_id))
        try:
            session = Session.model_validate(candidate)
        except ValidationError as exc:
            return Err(ConstraintViolation("Invalid session", _format_validation_errors(exc)))
        return Ok(self.validator.validate_session(session, group.sessions, exclude_session_id))

    def add_session(self, group_id: str, session: Union[Session, dict]) -> Result:
        try:
            session = Session.model_validate(session)
        except ValidationError as exc:
            return Err(ConstraintViolation("Invalid session", _format_validation_errors(exc)))

        def change(current: Group) -> Result:
            report = self.validator.validate_session(session, current.sessions)
            if not report.is_valid:
                return Err(ConstraintViolation("Invalid session", report.errors))
            return self._commit(current, {"sessions": [*current.sessions, session]})

        return self._mutate(group_id, change)

    def update_session(
        self, group_id: str, session_id: str, changes: dict[str, Any]
    ) -> Result:
        """Termin bearbeiten; der Termin selbst zählt nicht als Tageskonflikt."""

        def change(current: Group) -> Result:
            existing = next((s for s in current.sessions if s.id == session_id), None)
            if existing is None:
                return Err(NotFound("session", session_id))
            try:
                edited = Session.model_validate({**existing.model_dump(), **changes, "id": session_id})
            except ValidationError as exc:
                return Err(ConstraintViolation("Invalid session", _format_validation_errors(exc)))
            report = self.validator.validate_session(edited, current.sessions, session_id)
            if not report.is_valid:
                return Err(ConstraintViolation("Invalid session", report.errors))
            sessions = [edited if s.id == session_id else s for s in current.sessions]
            return self._commit(current, {"sessions": sessions})

        return self._mutate(group_id, change)

    def delete_session(self, group_id: str, session_id: str) -> Result:
        def change(current: Group) -> Result:
            if not any(s.id == session_id for s in current.sessions):
                return Err(NotFound("session", session_id))
            sessions = [s for s in current.sessions if s.id != session_id]
            return self._commit(current, {"sessions": sessions})

        return self._mutate(group_id, change)

    # ─── Abonnements ────────────────────────────────────────────────────────

    def add_subscription(self, group_id: str, data: Union[Subscription, dict]) -> Result:
        """Fügt ein Abonnement hinzu. Pro Typ ist nur eines erlaubt."""
        raw = data.model_dump(exclude={"id"}) if isinstance(data, Subscription) else dict(data)
        raw.pop("id", None)

        def change(current: Group) -> Result:
            try:
                sub_type = SubscriptionType(raw.get("type"))
            except ValueError:
                return Err(ConstraintViolation("Invalid subscription", [f"type: {raw.get('type')!r}"]))
            if has_subscription_type(current.subscriptions, sub_type):
                logger.warning(f"Gruppe {group_id} hat bereits ein {sub_type.value}-Abonnement")
                return Err(ConstraintViolation(
                    f"Group already has a {sub_type.value} subscription"
                ))
            sub_id = f"sub_{group_id}_{sub_type.value}_{uuid.uuid4().hex[:6]}"
            try:
                subscription = Subscription.model_validate({**raw, "id": sub_id})
            except ValidationError as exc:
                return Err(ConstraintViolation("Invalid subscription", _format_validation_errors(exc)))
            return self._commit(current, {"subscriptions": [*current.subscriptions, subscription]})

        return self._mutate(group_id, change)

    def update_subscription(
        self, group_id: str, subscription_id: str, updates: dict[str, Any]
    ) -> Result:
        def change(current: Group) -> Result:
            existing = next((s for s in current.subscriptions if s.id == subscription_id), None)
            if existing is None:
                return Err(NotFound("subscription", subscription_id))
            try:
                edited = Subscription.model_validate(
                    {**existing.model_dump(), **updates, "id": subscription_id}
                )
            except ValidationError as exc:
                return Err(ConstraintViolation("Invalid subscription", _format_validation_errors(exc)))
            others = [s for s in current.subscriptions if s.id != subscription_id]
            if has_subscription_type(others, edited.type):
                logger.warning(f"Gruppe {group_id} hat bereits ein {edited.type.value}-Abonnement")
                return Err(ConstraintViolation(
                    f"Group already has a {edited.type.value} subscription"
                ))
            subs = [edited if s.id == subscription_id else s for s in current.subscriptions]
            return self._commit(current, {"subscriptions": subs})

        return self._mutate(group_id, change)

    def delete_subscription(self, group_id: str, subscription_id: str) -> Result:
        def change(current: Group) -> Result:
            if not any(s.id == subscription_id for s in current.subscriptions):
                return Err(NotFound("subscription", subscription_id))
            subs = [s for s in current.subscriptions if s.id != subscription_id]
            return self._commit(current, {"subscriptions": subs})

        return self._mutate(group_id, change)

    def get_group_subscriptions(self, group_id: str) -> Result:
        group = self.repository.get(group_id)
        if group is None:
            return Err(NotFound("group", group_id))
        return Ok(list(group.subscriptions))

    def has_subscription_type(self, group_id: str, sub_type: SubscriptionType) -> bool:
        group = self.repository.get(group_id)
        return group is not None and has_subscription_type(group.subscriptions, sub_type)

    # ─── Lektions-Zuordnungen ───────────────────────────────────────────────

    def update_teacher_assignment(
        self,
        group_id: str,
        lecture_number: int,
        teacher_id: str,
        status: Optional[LectureStatus] = None,
        notes: Optional[str] = None,
    ) -> Result:
        def change(current: Group) -> Result:
            violation = self._lectures_out_of_range([lecture_number], current.total_lectures)
            if violation:
                return Err(violation)
            assignments = self.tracker.update_assignment(
                current.teacher_assignments, lecture_number, teacher_id, status, notes
            )
            return self._commit(current, {"teacher_assignments": assignments})

        return self._mutate(group_id, change)

    def bulk_update_teacher_assignments(
        self, group_id: str, updates: Iterable[Union[AssignmentUpdate, dict]]
    ) -> Result:
        """Sammel-Update; eine einzige ungültige Lektionsnummer verwirft alles."""
        try:
            parsed = [AssignmentUpdate.model_validate(u) for u in updates]
        except ValidationError as exc:
            return Err(ConstraintViolation("Invalid assignment update", _format_validation_errors(exc)))

        def change(current: Group) -> Result:
            violation = self._lectures_out_of_range(
                [u.lecture_number for u in parsed], current.total_lectures
            )
            if violation:
                return Err(violation)
            assignments = self.tracker.bulk_update_assignments(current.teacher_assignments, parsed)
            return self._commit(current, {"teacher_assignments": assignments})

        return self._mutate(group_id, change)

    def get_teacher_assignments(self, group_id: str) -> Result:
        group = self.repository.get(group_id)
        if group is None:
            return Err(NotFound("group", group_id))
        return Ok(list(group.teacher_assignments))

    def get_assignments_by_teacher(self, group_id: str, teacher_id: str) -> Result:
        group = self.repository.get(group_id)
        if group is None:
            return Err(NotFound("group", group_id))
        return Ok(self.tracker.get_assignments_by_teacher(group.teacher_assignments, teacher_id))

    # ─── Listen ─────────────────────────────────────────────────────────────

    def filter_groups(self, filters: Optional[GroupFilters] = None) -> list[Group]:
        filters = filters or GroupFilters()
        return [g for g in self.repository.list_groups() if filters.matches(g)]

    def paginate(
        self, groups: list[Group], page: int, per_page: Optional[int] = None
    ) -> list[Group]:
        """Seite `page` (1-basiert) einer Gruppenliste."""
        per_page = per_page or self.config.listing.items_per_page
        start = (max(page, 1) - 1) * per_page
        return groups[start:start + per_page]

    def total_pages(self, count: int, per_page: Optional[int] = None) -> int:
        per_page = per_page or self.config.listing.items_per_page
        return math.ceil(count / per_page)
