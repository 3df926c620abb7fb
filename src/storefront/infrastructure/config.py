"""Runtime settings, read once from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from storefront.domain.exceptions import ConfigurationError
from storefront.domain.model.value_objects import RateTable

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

BACKEND_JSON = "json"
BACKEND_REMOTE = "remote"


@dataclass(frozen=True)
class Settings:
    backend: str = BACKEND_JSON
    data_dir: Path = _DEFAULT_DATA_DIR

    sanity_project_id: str | None = None
    sanity_dataset: str = "production"
    sanity_read_token: str | None = None
    sanity_api_version: str = "2024-01-01"

    supabase_url: str | None = None
    supabase_service_role_key: str | None = None

    lomi_api_key: str | None = None
    lomi_api_base_url: str = "https://api.lomi.africa"
    lomi_webhook_secret: str | None = None

    app_base_url: str = "http://localhost:3000"
    rate_eur: str = "0.0015"
    rate_usd: str = "0.0016"
    http_timeout_seconds: float = 10.0

    def rate_table(self) -> RateTable:
        return RateTable.with_overrides(EUR=self.rate_eur, USD=self.rate_usd)

    def require(self, *names: str) -> None:
        """Raise ConfigurationError naming every listed setting that is unset."""
        missing = [name for name in names if not getattr(self, name)]
        if missing:
            raise ConfigurationError(
                "Missing required settings: "
                + ", ".join(name.upper() for name in missing)
            )


def load_settings() -> Settings:
    env = os.environ
    return Settings(
        backend=env.get("STOREFRONT_BACKEND", BACKEND_JSON).strip().lower(),
        data_dir=Path(env.get("STOREFRONT_DATA_DIR", str(_DEFAULT_DATA_DIR))),
        sanity_project_id=env.get("SANITY_PROJECT_ID"),
        sanity_dataset=env.get("SANITY_DATASET", "production"),
        sanity_read_token=env.get("SANITY_READ_TOKEN"),
        sanity_api_version=env.get("SANITY_API_VERSION", "2024-01-01"),
        supabase_url=env.get("SUPABASE_URL"),
        supabase_service_role_key=env.get("SUPABASE_SERVICE_ROLE_KEY"),
        lomi_api_key=env.get("LOMI_API_KEY"),
        lomi_api_base_url=env.get("LOMI_API_BASE_URL", "https://api.lomi.africa"),
        lomi_webhook_secret=env.get("LOMI_WEBHOOK_SECRET"),
        app_base_url=env.get("APP_BASE_URL", "http://localhost:3000").rstrip("/"),
        rate_eur=env.get("RATE_EUR", "0.0015"),
        rate_usd=env.get("RATE_USD", "0.0016"),
        http_timeout_seconds=float(env.get("HTTP_TIMEOUT_SECONDS", "10")),
    )
