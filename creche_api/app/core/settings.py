import os

from dotenv import load_dotenv

# Load variables from a local .env file when present
load_dotenv()


class Settings:
    def __init__(self):
        self.app_name = "Creche Marketplace API"
        self.api_version = "1.0.0"
        self.environment = os.getenv("CRECHE_ENVIRONMENT", "development")
        self.secret_key = os.getenv("CRECHE_SECRET_KEY", "CHANGE_ME")
        self.access_token_expire_minutes = int(os.getenv("CRECHE_ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
        self.jwt_algorithm = "HS256"
        self.database_url = os.getenv("CRECHE_DATABASE_URL", "sqlite:///./creche.db")
        self.log_level = os.getenv("CRECHE_LOG_LEVEL", "INFO")
        self.invite_expiry_days = int(os.getenv("CRECHE_INVITE_EXPIRY_DAYS", "7"))
        self.share_code_length = 8
        self.cors_origins = os.getenv(
            "CRECHE_CORS_ORIGINS", "http://localhost:8081,http://localhost:19006"
        ).split(",")


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
