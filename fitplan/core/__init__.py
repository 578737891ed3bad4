from fitplan.core.config import settings
from fitplan.core.base import Base
from fitplan.core.db import engine, get_db, init_database

__all__ = ["settings", "engine", "Base", "get_db", "init_database"]
