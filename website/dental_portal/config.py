import os

from dotenv import load_dotenv

load_dotenv()

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    API_BASE_URL = os.getenv("CLINIC_API_URL", "http://localhost:3001/api")
    TEMP_SESSION_COOKIE = "tempPatientSession"
    TEMP_SESSION_TTL_HOURS = int(os.getenv("TEMP_SESSION_TTL_HOURS", "24"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    API_BASE_URL = "http://clinic.test/api"
    LOG_LEVEL = "DEBUG"
