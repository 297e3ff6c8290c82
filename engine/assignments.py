"""Lehrer-Zuordnungen pro Lektion: Einzel- und Sammel-Updates.

Alle Funktionen liefern neue Listen; die übergebene Liste bleibt unverändert.
Eine Prüfung gegen total_lectures der Gruppe findet hier NICHT statt, das
erledigt der GroupService an der Aggregatgrenze.
"""

import logging
from typing import Iterable, Optional

from models.lecture_assignment import AssignmentUpdate, LectureAssignment, LectureStatus

logger = logging.getLogger(__name__)


class LectureAssignmentTracker:
    """Verwaltet die Liste der LectureAssignments einer Gruppe."""

    def update_assignment(
        self,
        assignments: list[LectureAssignment],
        lecture_number: int,
        teacher_id: str,
        status: Optional[LectureStatus] = None,
        notes: Optional[str] = None,
    ) -> list[LectureAssignment]:
        """Lehrkraft für eine Lektion setzen.

        Existiert die Lektion, wird gemergt: teacher_id immer, status/notes nur
        wenn angegeben. Sonst wird ein neuer Eintrag mit Status 'scheduled'
        (oder dem angegebenen) angehängt.
        """
        changes: dict = {"teacher_id": teacher_id}
        if status is not None:
            changes["status"] = status
        if notes is not None:
            changes["notes"] = notes

        result: list[LectureAssignment] = []
        found = False
        for a in assignments:
            if a.lecture_number == lecture_number:
                result.append(a.model_copy(update=changes))
                found = True
            else:
                result.append(a)

        if not found:
            result.append(LectureAssignment(
                lecture_number=lecture_number,
                teacher_id=teacher_id,
                status=status or LectureStatus.SCHEDULED,
                notes=notes or None,
            ))
        return result

    def bulk_update_assignments(
        self,
        assignments: list[LectureAssignment],
        updates: Iterable[AssignmentUpdate],
    ) -> list[LectureAssignment]:
        """Mehrere Teil-Updates nacheinander anwenden.

        Bestehende Lektion → gesetzte Felder übernehmen. Neue Lektion nur mit
        teacher_id; Updates ohne Treffer und ohne teacher_id werden übersprungen.
        """
        result = list(assignments)
        for update in updates:
            idx = next(
                (i for i, a in enumerate(result) if a.lecture_number == update.lecture_number),
                None,
            )
            if idx is not None:
                changes = _supplied_fields(update)
                result[idx] = result[idx].model_copy(update=changes)
            elif update.teacher_id:
                result.append(LectureAssignment(
                    lecture_number=update.lecture_number,
                    teacher_id=update.teacher_id,
                    status=update.status or LectureStatus.SCHEDULED,
                    notes=update.notes or None,
                ))
            else:
                logger.debug(
                    f"Lektion {update.lecture_number}: kein Eintrag und keine Lehrkraft – übersprungen"
                )
        return result

    def get_assignments_by_teacher(
        self, assignments: list[LectureAssignment], teacher_id: str
    ) -> list[LectureAssignment]:
        """Alle Einträge einer Lehrkraft in gespeicherter Reihenfolge."""
        return [a for a in assignments if a.teacher_id == teacher_id]


def _supplied_fields(update: AssignmentUpdate) -> dict:
    """Explizit gesetzte Felder; None zählt nur bei notes (löscht die Notiz)."""
    fields = update.model_dump(exclude_unset=True, exclude={"lecture_number"})
    return {k: v for k, v in fields.items() if v is not None or k == "notes"}
