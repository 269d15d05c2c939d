from pathlib import Path

from pydantic_settings import BaseSettings

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "catalog.yaml"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./cardsplit.db"
    secret_key: str = "change-this-secret-key-in-production"
    secret_key_file: str = "./.secret_key"
    access_token_expire_minutes: int = 1440  # 24 hours
    allowed_origins: str = "http://localhost:3000"
    registration_enabled: bool = True
    catalog_path: str = str(DEFAULT_CATALOG_PATH)
    catalog_reload_interval: int = 30  # seconds, 0 to disable

    model_config = {"env_prefix": "", "case_sensitive": False}


settings = Settings()
