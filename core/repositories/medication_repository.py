"""Medication cabinet repository."""

from core.models import Medication

from .base import BaseRepository


class MedicationRepository(BaseRepository[Medication]):
    """Medications owned by one user."""

    model = Medication

    def list_for_user(self, user_id: str) -> list[Medication]:
        """Active first, then alphabetical."""
        return (
            self.session.query(Medication)
            .filter(Medication.user_id == user_id)
            .order_by(Medication.is_active.desc(), Medication.name.asc())
            .all()
        )

    def get_for_user(self, medication_id: str, user_id: str) -> Medication | None:
        return (
            self.session.query(Medication)
            .filter(Medication.id == medication_id, Medication.user_id == user_id)
            .first()
        )

    def count_for_user(self, user_id: str) -> int:
        return self.count(user_id=user_id)

    def active_names(self, user_id: str) -> list[str]:
        rows = (
            self.session.query(Medication.name)
            .filter(Medication.user_id == user_id, Medication.is_active.is_(True))
            .order_by(Medication.name.asc())
            .all()
        )
        return [name for (name,) in rows]
