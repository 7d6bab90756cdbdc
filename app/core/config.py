"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Event Ticketing"
    debug: bool = False
    secret_key: str = "change-me-in-production"
    client_base_url: str = "http://localhost:3000"

    # Auth tokens
    token_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./ticketing.db"

    # SMTP (delivery is logged instead of sent unless all four are set)
    smtp_host: str = ""
    smtp_port: int = 465
    smtp_user: str = ""
    smtp_pass: str = ""
    smtp_use_ssl: bool = True
    mail_from_name: str = ""

    # Ticket rendering
    default_timezone: str = "UTC"
    default_currency: str = "USD"
    ticket_template: str = "ticket_email.html"

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_port and self.smtp_user and self.smtp_pass)


settings = Settings()
