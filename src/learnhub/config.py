"""Configuración global de la aplicación."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_data_dir


@dataclass(frozen=True)
class Config:
    """Configuración inmutable de la aplicación."""

    # Paths
    data_dir: Path = Path(user_data_dir("learnhub", "learnhub"))
    catalog_path: Path | None = None  # None = catálogo incluido
    store_path: Path = field(init=False)
    certificates_dir: Path = field(init=False)

    # Evaluación
    pass_threshold: int = 70
    question_count: int = 10
    time_limit: int = 1800  # segundos
    watch_ratio: float = 0.95

    # Proveedores externos
    coursera_url: str = "https://www.coursera.org/api/courses.v1"
    udemy_url: str = "https://www.udemy.com/api-2.0/courses/"
    udemy_token: str | None = None
    provider_timeout: int = 10

    # App
    app_name: str = "LearnHub"
    version: str = "0.1.0"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        object.__setattr__(self, "store_path", self.data_dir / "progress.json")
        object.__setattr__(self, "certificates_dir", self.data_dir / "certificates")
        if self.question_count < 1:
            raise ValueError(f"question_count debe ser al menos 1: {self.question_count}")
        if self.time_limit <= 0:
            raise ValueError(f"time_limit debe ser positivo: {self.time_limit}")
        if not 0 <= self.pass_threshold <= 100:
            raise ValueError(f"pass_threshold fuera de 0-100: {self.pass_threshold}")

    @classmethod
    def from_env(cls) -> Config:
        """Crear configuración desde variables de entorno."""
        data_dir = os.getenv("LEARNHUB_DATA_DIR")
        catalog = os.getenv("LEARNHUB_CATALOG")

        return cls(
            data_dir=Path(data_dir) if data_dir else Path(user_data_dir("learnhub", "learnhub")),
            catalog_path=Path(catalog) if catalog else None,
            pass_threshold=int(os.getenv("LEARNHUB_PASS_THRESHOLD", "70")),
            question_count=int(os.getenv("LEARNHUB_QUESTION_COUNT", "10")),
            time_limit=int(os.getenv("LEARNHUB_TIME_LIMIT", "1800")),
            watch_ratio=float(os.getenv("LEARNHUB_WATCH_RATIO", "0.95")),
            coursera_url=os.getenv("LEARNHUB_COURSERA_URL", "https://www.coursera.org/api/courses.v1"),
            udemy_url=os.getenv("LEARNHUB_UDEMY_URL", "https://www.udemy.com/api-2.0/courses/"),
            udemy_token=os.getenv("LEARNHUB_UDEMY_TOKEN") or None,
            provider_timeout=int(os.getenv("LEARNHUB_PROVIDER_TIMEOUT", "10")),
            log_level=os.getenv("LEARNHUB_LOG_LEVEL", "WARNING").upper(),
        )

    def ensure_dirs(self) -> None:
        """Crear directorios necesarios si no existen."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.certificates_dir.mkdir(parents=True, exist_ok=True)


# Instancia global
_config: Config | None = None


def get_config() -> Config:
    """Obtener instancia de configuración (singleton)."""
    global _config
    if _config is None:
        _config = Config.from_env()
        _config.ensure_dirs()
    return _config


def set_config(config: Config) -> None:
    """Establecer configuración (para tests)."""
    global _config
    _config = config
    _config.ensure_dirs()
