"""
Remedi Core Library.

Database management, models, repositories, plan rules, services and logging
shared by the API and the scheduler.

Usage:
    # Database
    from core.db import db, get_db
    from core.models import User, Favorite, JournalEntry
    from core.repositories import FavoriteRepository

    # Config
    from core.config import get_settings, Settings

    # Logging
    from core.logging import get_logger, configure_logging
"""

__version__ = "0.1.0"

# Lazy imports to avoid circular dependencies
# Users should import directly from submodules:
#   from core.db import db
#   from core.config import get_settings
#   from core.logging import get_logger
