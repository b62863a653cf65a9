import os

from .config import Config, db_config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DB_CONFIG = db_config()
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")

NOTIFIER = os.getenv("NOTIFIER", "smtp")
SMTP_HOST = Config.SMTP_HOST
SMTP_PORT = Config.SMTP_PORT
SMTP_USER = Config.SMTP_USER
SMTP_PASSWORD = Config.SMTP_PASSWORD
SMTP_FROM = Config.SMTP_FROM
SMTP_FROM_NAME = Config.SMTP_FROM_NAME
DISPATCH_TIMEOUT_SECONDS = Config.DISPATCH_TIMEOUT_SECONDS

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

AUTO_INIT_DB = Config.AUTO_INIT_DB
