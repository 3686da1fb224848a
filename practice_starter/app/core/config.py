import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from practice_starter import __version__

log = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name (str): Name reported by the info endpoint.
        project_version (str): Version reported by the info endpoint.
        log_level (str): Root logging level.
        database_url (str): SQLAlchemy database URL.
        db_echo (bool): Whether SQLAlchemy logs every statement.
        secret_key (str): Secret key for signing JWT tokens.
            Must be kept secure and changed in production.
        algorithm (str): Algorithm used for JWT token encoding.
        access_token_expire_minutes (int): Lifetime of an access token.
        app_base_url (str): Public base URL, used to build links sent by e-mail.
        mail_host (str | None): SMTP host. Without it e-mails are only logged.
        mail_port (int): SMTP port.
        mail_username (str | None): SMTP user, also used as the sender address.
        mail_password (str | None): SMTP password.
        mail_use_tls (bool): Whether to upgrade the SMTP connection with STARTTLS.

    """

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="practice", validation_alias="APP_NAME")
    project_version: str = Field(
        default=__version__,
        validation_alias="PROJECT_VERSION",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Database settings
    database_url: str = Field(
        default="sqlite:///./practice.db",
        validation_alias="DATABASE_URL",
    )
    db_echo: bool = Field(default=False, validation_alias="DB_ECHO")

    # Security settings
    secret_key: str = Field(
        default="your-secret-key-change-in-production",
        validation_alias="SECRET_KEY",
    )
    algorithm: str = Field(default="HS256", validation_alias="ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60,
        validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Mail settings
    app_base_url: str = Field(
        default="http://localhost:8000",
        validation_alias="APP_BASE_URL",
    )
    mail_host: str | None = Field(default=None, validation_alias="MAIL_HOST")
    mail_port: int = Field(default=587, validation_alias="MAIL_PORT")
    mail_username: str | None = Field(default=None, validation_alias="MAIL_USERNAME")
    mail_password: str | None = Field(default=None, validation_alias="MAIL_PASSWORD")
    mail_use_tls: bool = Field(default=True, validation_alias="MAIL_USE_TLS")


@lru_cache
def get_settings() -> Settings:
    """
    Get the global settings instance.

    Returns:
        Settings: The cached settings instance.

    Raises:
        ValidationError: If an environment variable holds an invalid value.

    Notes:
        1. Reads configuration from environment variables and the .env file.
        2. The instance is cached so the .env file is parsed once.

    """
    return Settings()
