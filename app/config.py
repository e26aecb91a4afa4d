from dotenv import load_dotenv
import os


load_dotenv(dotenv_path="credentials.env")


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


POSTGRES_USER = os.getenv("POSTGRES_USER")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD")
POSTGRES_DB = os.getenv("POSTGRES_DB")
POSTGRES_HOST = os.getenv("POSTGRES_HOST")
POSTGRES_PORT = os.getenv("POSTGRES_PORT")
SECRET_KEY = os.getenv("SECRET_KEY", "your-default-secret-key")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+psycopg2://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}",
)

# Secret dùng chung cho các endpoint cron (Authorization: Bearer <CRON_SECRET>)
CRON_SECRET = os.getenv("CRON_SECRET")

# LINE Messaging API
LINE_CHANNEL_ACCESS_TOKEN = os.getenv("LINE_CHANNEL_ACCESS_TOKEN")
LINE_PUSH_URL = os.getenv("LINE_PUSH_URL", "https://api.line.me/v2/bot/message/push")
LINE_TIMEOUT_SECONDS = float(os.getenv("LINE_TIMEOUT_SECONDS", "10"))

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Bangkok")

# Scheduler nội bộ (thay cho cron bên ngoài nếu cần)
ENABLE_SCHEDULER = _as_bool(os.getenv("ENABLE_SCHEDULER"))
RECONCILE_CRON_HOUR = int(os.getenv("RECONCILE_CRON_HOUR", "0"))
REMINDER_CRON_HOUR = int(os.getenv("REMINDER_CRON_HOUR", "18"))

DEBUG = _as_bool(os.getenv("DEBUG"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost,http://localhost:3000").split(",")
    if origin.strip()
]
