"""
Cache key management.

All Redis keys used for cached lookups are built here so prefixes never
collide with the rate limiter's ``ratelimit:`` keys.
"""


class CacheKeys:
    """
    Centralized cache key definitions.

    Naming convention: {domain}:{entity}:{id}

    Examples:
        - interactions:substance:st. john's wort -> lookup by substance
        - interactions:pair:aspirin|ginkgo -> pair lookup (names sorted)
        - remedy:turmeric:detail -> detailed remedy payload
    """

    TTL_HOUR = 60 * 60
    TTL_DAY = 60 * 60 * 24

    @staticmethod
    def interactions_by_substance(substance: str) -> str:
        return f"interactions:substance:{substance.strip().lower()}"

    @staticmethod
    def interactions_pair(substance_a: str, substance_b: str) -> str:
        """Order-independent key for a pair lookup."""
        a, b = sorted((substance_a.strip().lower(), substance_b.strip().lower()))
        return f"interactions:pair:{a}|{b}"

    @staticmethod
    def remedy_detail(remedy_id: str) -> str:
        return f"remedy:{remedy_id}:detail"

    @staticmethod
    def remedy_categories() -> str:
        return "remedy:categories"
