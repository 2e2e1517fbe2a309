"""Settings read from the environment."""
import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./splitledger.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
TOP_EXPENSES_DEFAULT_LIMIT = int(os.getenv("TOP_EXPENSES_DEFAULT_LIMIT", "10"))

_origins_env = os.getenv("ALLOWED_ORIGINS", "")
ALLOWED_ORIGINS = [o.strip() for o in _origins_env.split(",") if o.strip()] if _origins_env else ["*"]
