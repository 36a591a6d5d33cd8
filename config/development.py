import os

from .config import Config

SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = Config.db_config()

STORE_BACKEND = Config.STORE_BACKEND
SUBJECT_POLICY = Config.SUBJECT_POLICY
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create the demo teacher account on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
