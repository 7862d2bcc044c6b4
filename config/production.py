import os

from config.config import *  # noqa: F401,F403
from config.config import env_bool

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
ENABLE_FILE_LOGGING = env_bool("ENABLE_FILE_LOGGING", True)

AUTO_INIT_DB = env_bool("AUTO_INIT_DB", False)
AUTO_SEED_DB = env_bool("AUTO_SEED_DB", False)

ENABLE_BACKUP_SCHEDULER = env_bool("ENABLE_BACKUP_SCHEDULER", True)
