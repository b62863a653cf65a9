import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "session-attendance-dev-key"

    # Storage: "memory" keeps everything in-process, "mysql" uses DB_CONFIG
    STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "memory")
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "session_attendance_db")
    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))

    # Notifications: "console" logs messages, "smtp" sends them
    NOTIFIER = os.environ.get("NOTIFIER", "console")
    SMTP_HOST = os.environ.get("SMTP_HOST", "localhost")
    SMTP_PORT = int(os.environ.get("SMTP_PORT", "587"))
    SMTP_USER = os.environ.get("SMTP_USER")
    SMTP_PASSWORD = os.environ.get("SMTP_PASSWORD")
    SMTP_FROM = os.environ.get("SMTP_FROM", "attendance@example.com")
    SMTP_FROM_NAME = os.environ.get("SMTP_FROM_NAME", "")
    DISPATCH_TIMEOUT_SECONDS = float(os.environ.get("DISPATCH_TIMEOUT_SECONDS", "30"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def db_config(cfg=Config) -> dict:
    return {
        "host": cfg.DB_HOST,
        "port": cfg.DB_PORT,
        "user": cfg.DB_USER,
        "password": cfg.DB_PASSWORD,
        "database": cfg.DB_NAME,
    }
