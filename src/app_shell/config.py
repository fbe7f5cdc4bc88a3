"""
Process configuration from FOLIO_* environment variables.

Behavioral configuration (password policy, upload limits, stats defaults)
lives in rules.yaml; this module only covers deployment settings.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "dev-secret-unsafe"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class Settings:
    data_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("FOLIO_DATA_DIR", "./data"))
    )
    secret_key: str = field(
        default_factory=lambda: os.environ.get("FOLIO_SECRET_KEY", DEV_SECRET_KEY)
    )
    public_base_url: str = field(
        default_factory=lambda: os.environ.get("FOLIO_PUBLIC_BASE_URL", "http://localhost:8000")
    )
    rules_path: Path = field(
        default_factory=lambda: Path(os.environ.get("FOLIO_RULES_PATH", "rules.yaml"))
    )
    bootstrap_email: str | None = field(
        default_factory=lambda: os.environ.get("FOLIO_BOOTSTRAP_EMAIL")
    )
    bootstrap_password: str | None = field(
        default_factory=lambda: os.environ.get("FOLIO_BOOTSTRAP_PASSWORD")
    )

    @property
    def db_path(self) -> str:
        return str(self.data_dir / "folio.db")

    @property
    def storage_dir(self) -> Path:
        return self.data_dir / "storage"

    def warn_if_insecure(self) -> None:
        if self.secret_key == DEV_SECRET_KEY:
            logger.warning("FOLIO_SECRET_KEY is not set; using the development key")


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
