import os

from dotenv import load_dotenv  # .env file support

load_dotenv()

# Database connection URL (postgresql+asyncpg://...)
DATABASE_URL = os.getenv("DATABASE_URL")

# Secret key used to sign access tokens and admin sessions
SECRET_KEY = os.getenv("SECRET_KEY", "default_secret_key_for_safety")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))

# Current runtime environment (local / dev / production / test)
ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

# Frontend origins allowed by CORS, comma separated
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# SMTP settings for outgoing mail
EMAIL_HOST = os.getenv("EMAIL_HOST", "smtp.gmail.com")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "587"))
EMAIL_USE_SSL = os.getenv("EMAIL_USE_SSL", str(EMAIL_PORT == 465)) == "True"
EMAIL_HOST_USER = os.getenv("EMAIL_HOST_USER")
EMAIL_HOST_PASSWORD = os.getenv("EMAIL_HOST_PASSWORD")
DEFAULT_FROM_EMAIL = os.getenv("DEFAULT_FROM_EMAIL")
# With mail disabled, messages are logged instead of sent
EMAIL_ENABLED = os.getenv("EMAIL_ENABLED", "True") == "True"
EMAIL_TIMEOUT_SECONDS = int(os.getenv("EMAIL_TIMEOUT_SECONDS", "30"))

# Outbox relay (notification consumer)
OUTBOX_RELAY_INTERVAL_SECONDS = int(os.getenv("OUTBOX_RELAY_INTERVAL_SECONDS", "60"))
OUTBOX_MAX_ATTEMPTS = int(os.getenv("OUTBOX_MAX_ATTEMPTS", "3"))
# a claimed event untouched for this long is assumed abandoned and claimed again
OUTBOX_CLAIM_TIMEOUT_SECONDS = int(os.getenv("OUTBOX_CLAIM_TIMEOUT_SECONDS", "300"))
SCHEDULER_ENABLED = os.getenv("SCHEDULER_ENABLED", "True") == "True"

# First admin account, used by app/scripts/create_admin.py
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
ADMIN_FULL_NAME = os.getenv("ADMIN_FULL_NAME", "Training & Placement Officer")

# Logging
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
