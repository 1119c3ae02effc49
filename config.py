# config.py

import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    # MongoDB Configuration
    MONGO_URI = os.environ.get("MONGO_URI", "mongodb://localhost:27017/nutriplan")
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-this")

    # Google Gemini Configuration
    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY")
    GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")

    # Password reset links expire after this many seconds
    PASSWORD_RESET_MAX_AGE = int(os.environ.get("PASSWORD_RESET_MAX_AGE", 3600))

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Development/Production
    DEBUG = os.environ.get("FLASK_DEBUG", "false").lower() == "true"
    TESTING = os.environ.get("TESTING", "false").lower() == "true"

    # Session Configuration
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours in seconds


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    MONGO_URI = "mongodb://localhost:27017/nutriplan_test"
    SECRET_KEY = "test-secret-key"
    GEMINI_API_KEY = None
    LOG_LEVEL = "WARNING"
