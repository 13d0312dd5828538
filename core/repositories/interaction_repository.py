"""Interaction lookups."""

from sqlalchemy import and_, func, or_

from core.models import Interaction

from .base import BaseRepository


def sort_by_severity(interactions: list[Interaction]) -> list[Interaction]:
    """Most dangerous first; stable for equal severity."""
    return sorted(interactions, key=lambda i: i.severity_rank)


class InteractionRepository(BaseRepository[Interaction]):
    """Read access to the interaction table."""

    model = Interaction

    def find_by_substance(self, substance: str) -> list[Interaction]:
        """Case-insensitive substring match on either side of the pair."""
        needle = substance.lower()
        rows = (
            self.session.query(Interaction)
            .filter(
                or_(
                    func.lower(Interaction.substance_a).contains(needle, autoescape=True),
                    func.lower(Interaction.substance_b).contains(needle, autoescape=True),
                )
            )
            .all()
        )
        return sort_by_severity(rows)

    def find_pair(self, substance_a: str, substance_b: str) -> list[Interaction]:
        """Exact (case-insensitive) match in either order."""
        a, b = substance_a.lower(), substance_b.lower()
        lower_a = func.lower(Interaction.substance_a)
        lower_b = func.lower(Interaction.substance_b)
        rows = (
            self.session.query(Interaction)
            .filter(
                or_(
                    and_(lower_a == a, lower_b == b),
                    and_(lower_a == b, lower_b == a),
                )
            )
            .all()
        )
        return sort_by_severity(rows)
