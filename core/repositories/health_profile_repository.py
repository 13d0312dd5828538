"""Health profile repository."""

from core.models import HEALTH_PROFILE_FIELDS, HealthProfile

from .base import BaseRepository


class HealthProfileRepository(BaseRepository[HealthProfile]):
    model = HealthProfile

    def get_for_user(self, user_id: str) -> HealthProfile | None:
        return self.session.query(HealthProfile).filter(HealthProfile.user_id == user_id).first()

    def upsert(self, user_id: str, **lists: list[str]) -> HealthProfile:
        """Replace the given lists; fields not passed keep their stored value."""
        values = {key: lists[key] for key in HEALTH_PROFILE_FIELDS if key in lists}
        profile = self.get_for_user(user_id)
        if profile is None:
            defaults = {key: [] for key in HEALTH_PROFILE_FIELDS}
            return self.create(user_id=user_id, **{**defaults, **values})

        for key, value in values.items():
            setattr(profile, key, value)
        self.session.flush()
        return profile
