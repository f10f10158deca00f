"""Capa de persistencia clave-valor para el progreso."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ProgressStore(Protocol):
    """Almacenamiento clave-valor de texto."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Almacenamiento en memoria (tests, sesiones anónimas)."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        """Listar claves almacenadas."""
        return list(self._data)


class JsonFileStore:
    """Maneja un único documento JSON en disco con todas las claves."""

    def __init__(self, path: Path) -> None:
        """Inicializar con ruta del archivo."""
        self.path = Path(path)
        self._data: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Almacén corrupto en %s, se reinicia: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Almacén con formato inesperado en %s, se reinicia", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        """Guardar valor y reescribir el archivo."""
        self._data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)

    def keys(self) -> list[str]:
        """Listar claves almacenadas."""
        return list(self._data)
