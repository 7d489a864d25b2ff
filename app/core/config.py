## app/core/config.py

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings for the application
    """

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", case_sensitive=False
    )

    environment: str = "development"
    allowed_cors_urls: str = "http://localhost:3000"

    db_host: str = "localhost"
    db_user: str = "fleet"
    db_password: str = ""
    db_database: str = "fleet_backoffice"
    db_port: int = 3306

    # Full SQLAlchemy URL; takes precedence over the db_* parts when set
    database_url: Optional[str] = None
    create_tables_on_startup: bool = False

    secret_key: str = "change-this-secret-key"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    allowed_file_types: str = "csv"
    allowed_file_size: int = 10240

    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def async_db_url(self) -> str:
        """
        Async database URL
        """
        if self.database_url:
            return self.database_url
        return f"mysql+asyncmy://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_database}"


settings = Settings()
