"""
Interaction checker.

Looks up known interactions for one substance, a pair, or every pair in a
list. Results are plain dicts ordered most-severe first and cached in Redis
for an hour.
"""

from itertools import combinations

from core.cache import CacheKeys, cache
from core.logging import get_logger
from core.models import SEVERITY_ORDER, UNKNOWN_SEVERITY_RANK, Interaction
from core.repositories import InteractionRepository

logger = get_logger("service.interactions")


def serialize_interaction(interaction: Interaction) -> dict:
    return {
        "id": interaction.id,
        "substanceA": interaction.substance_a,
        "substanceAType": interaction.substance_a_type,
        "substanceB": interaction.substance_b,
        "substanceBType": interaction.substance_b_type,
        "severity": interaction.severity,
        "description": interaction.description,
        "mechanism": interaction.mechanism,
        "recommendation": interaction.recommendation,
        "evidence": interaction.evidence,
        "sources": list(interaction.sources or []),
    }


def severity_rank(item: dict) -> int:
    return SEVERITY_ORDER.get(item.get("severity", ""), UNKNOWN_SEVERITY_RANK)


def pair_count(n: int) -> int:
    """Unordered pairs among n substances."""
    return n * (n - 1) // 2


class InteractionService:
    """
    Cached interaction lookups.

    Usage:
        with db.session() as session:
            service = InteractionService(InteractionRepository(session))
            hits = service.check_multiple(["warfarin", "ginkgo", "garlic"])
    """

    def __init__(self, repo: InteractionRepository, ttl: int = CacheKeys.TTL_HOUR):
        self.repo = repo
        self.ttl = ttl

    def _cached(self, key: str, compute) -> list[dict]:
        return cache.get_or_set_json(key, compute, self.ttl)  # type: ignore[return-value]

    def find_by_substance(self, substance: str) -> list[dict]:
        return self._cached(
            CacheKeys.interactions_by_substance(substance),
            lambda: [serialize_interaction(i) for i in self.repo.find_by_substance(substance)],
        )

    def check_pair(self, substance_a: str, substance_b: str) -> list[dict]:
        return self._cached(
            CacheKeys.interactions_pair(substance_a, substance_b),
            lambda: [
                serialize_interaction(i) for i in self.repo.find_pair(substance_a, substance_b)
            ],
        )

    def check_multiple(self, substances: list[str]) -> list[dict]:
        """Every unordered pair, deduplicated, most severe first."""
        found: dict[str, dict] = {}
        for a, b in combinations(substances, 2):
            for item in self.check_pair(a, b):
                found.setdefault(item["id"], item)

        results = sorted(found.values(), key=severity_rank)
        logger.debug("interactions_checked", substances=len(substances), found=len(results))
        return results

    def for_remedy(self, remedy_name: str) -> list[dict]:
        return self.find_by_substance(remedy_name)


__all__ = ["InteractionService", "serialize_interaction", "severity_rank", "pair_count"]
