# workforce/config.py
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    SECRET_KEY: str = Field("change-me-in-production")
    ALGORITHM: str = Field("HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(30)

    DATABASE_URL: str = Field("sqlite+aiosqlite:///./workforce.db")
    SQL_ECHO: bool = Field(False)
    LOG_LEVEL: str = Field("INFO")

    # The front desk screen regenerates its code every OFFICE_QR_REFRESH_SECONDS;
    # each code stays valid for OFFICE_QR_TTL_SECONDS after issuance.
    OFFICE_QR_TTL_SECONDS: int = Field(30)
    OFFICE_QR_REFRESH_SECONDS: int = Field(30)
    USER_QR_TTL_SECONDS: int = Field(900)
    LEGACY_USER_QR_PREFIX: str = Field("USER:")

    LATE_TOLERANCE_MINUTES: int = Field(15)
    # Used only when no office location has been configured yet
    FALLBACK_GEOFENCE_METERS: float = Field(200.0)

    model_config = {
        "env_file": ".env",
        "extra": "allow",
    }

    @property
    def effective_database_url(self) -> str:
        url = self.DATABASE_URL
        # Ensure asyncpg is used
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url


settings = Settings()
