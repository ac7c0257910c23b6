from pathlib import Path
from urllib.parse import urlparse

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"


class ConfigurationError(Exception):
    """Raised when the store connection cannot be resolved from settings."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False
    LOG_LEVEL: str = "INFO"

    # Supabase settings (optional at load time, checked per request)
    SUPABASE_URL: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
    )
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    STORE_REQUEST_TIMEOUT: float = 10.0

    # Browser origins allowed to call the API
    CORS_ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def store_credentials(self) -> tuple[str, str]:
        """
        Return (url, service_role_key) for the contacts store.

        Raises:
            ConfigurationError: if either value is missing or blank
        """
        missing = []
        if not self.SUPABASE_URL:
            missing.append("SUPABASE_URL")
        if not self.SUPABASE_SERVICE_ROLE_KEY:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")

        if missing:
            raise ConfigurationError(
                f"Missing store configuration: {', '.join(missing)}", missing=missing
            )

        return self.SUPABASE_URL.rstrip("/"), self.SUPABASE_SERVICE_ROLE_KEY

    def project_ref(self) -> str | None:
        """
        Extract the Supabase project ref from SUPABASE_URL host, e.g.
        https://abcd1234.supabase.co -> abcd1234
        """
        if not self.SUPABASE_URL:
            return None
        host = urlparse(self.SUPABASE_URL).hostname or ""
        return host.split(".")[0] or None


settings = Settings()
