from __future__ import annotations

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field("dev")
    APP_TITLE: str = "sku-registry-api"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ROOT_PATH: Optional[str] = None
    DISABLE_DOCS: bool = False

    # CORS: "http://localhost:3000,https://example.com" (gol = dezactivat)
    CORS_ORIGINS: str = ""

    # Reguli SKU
    SKU_DEFAULT_STATUS: str = "Active"
    SKU_SERIAL_WIDTH: int = Field(4, ge=1, le=12)
    SKU_CATEGORY_MAX_LENGTH: int = Field(4, ge=1, le=64)

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
