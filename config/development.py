import os

from .config import Config, db_config

SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = db_config()
STORAGE_BACKEND = Config.STORAGE_BACKEND

NOTIFIER = Config.NOTIFIER
SMTP_HOST = Config.SMTP_HOST
SMTP_PORT = Config.SMTP_PORT
SMTP_USER = Config.SMTP_USER
SMTP_PASSWORD = Config.SMTP_PASSWORD
SMTP_FROM = Config.SMTP_FROM
SMTP_FROM_NAME = Config.SMTP_FROM_NAME
DISPATCH_TIMEOUT_SECONDS = Config.DISPATCH_TIMEOUT_SECONDS

DEBUG = True
LOG_LEVEL = "DEBUG"

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
