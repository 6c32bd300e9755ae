import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///expense_tracker.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Session cookie signing
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-me")
SESSION_COOKIE = os.getenv("SESSION_COOKIE", "expense_tracker_session")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(14 * 24 * 60 * 60)))  # 14 days

# Number of days shown by the daily chart when no start date is given
DEFAULT_CHART_DAYS = int(os.getenv("DEFAULT_CHART_DAYS", "30"))

# Logging
APP_LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "INFO")
THIRD_PARTY_LOG_LEVEL = os.getenv("THIRD_PARTY_LOG_LEVEL", "WARNING")
LOG_FILE = os.getenv("LOG_FILE")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(2 * 1024 * 1024)))  # 2MB
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "3"))
