"""Application configuration.

Settings are read once at process start and the derived config objects are
passed to the services that need them; nothing reads the environment later.
"""

from functools import lru_cache

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models.config import IndicatorConfig


class ConfigError(ValueError):
    """Raised when a required setting is missing."""


class EmailConfig(BaseModel):
    """SMTP delivery settings."""

    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587
    username: str = ""
    password: str = ""
    from_email: str = ""
    to_emails: list[str] = []

    def missing_fields(self) -> list[str]:
        """Names of the environment variables that still need a value."""
        required = {
            "SMTP_USERNAME": self.username,
            "SMTP_PASSWORD": self.password,
            "FROM_EMAIL": self.from_email,
            "TO_EMAILS": self.to_emails,
        }
        return [name for name, value in required.items() if not value]


class GeminiConfig(BaseModel):
    """Narrative (Gemini) service settings."""

    api_key: str = ""
    model: str = "gemini-pro"
    timeout: float = 60.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Market data providers
    tushare_token: str = ""
    alpha_vantage_api_key: str = ""

    # Gemini
    gemini_api_key: str = ""
    gemini_model: str = "gemini-pro"

    # SMTP
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    from_email: str = ""
    to_emails: str = ""  # comma-separated

    # Indicator periods
    ma_period: int = 20
    ema_period: int = 20
    rsi_period: int = 14
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9

    @property
    def recipients(self) -> list[str]:
        return [e.strip() for e in self.to_emails.split(",") if e.strip()]

    def email_config(self) -> EmailConfig:
        return EmailConfig(
            smtp_server=self.smtp_server,
            smtp_port=self.smtp_port,
            username=self.smtp_username,
            password=self.smtp_password,
            from_email=self.from_email,
            to_emails=self.recipients,
        )

    def gemini_config(self) -> GeminiConfig:
        return GeminiConfig(api_key=self.gemini_api_key, model=self.gemini_model)

    def indicator_config(self) -> IndicatorConfig:
        return IndicatorConfig(
            ma_period=self.ma_period,
            ema_period=self.ema_period,
            rsi_period=self.rsi_period,
            macd_fast=self.macd_fast,
            macd_slow=self.macd_slow,
            macd_signal=self.macd_signal,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
