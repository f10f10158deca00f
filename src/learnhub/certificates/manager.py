"""Emisión de certificados de finalización en texto plano."""

from __future__ import annotations

import hashlib
import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..core.course import Course

logger = logging.getLogger(__name__)


class CertificateError(Exception):
    """Error al emitir un certificado."""

    pass


class CertificateManager:
    """Gestiona los certificados emitidos en disco."""

    SUFFIX = "-Certificate.txt"

    def __init__(self, certificates_dir: Path) -> None:
        """Inicializar manager."""
        self.certificates_dir = Path(certificates_dir)
        self.certificates_dir.mkdir(parents=True, exist_ok=True)

    def verification_code(self, learner_name: str, course: Course, completed_on: date) -> str:
        """Código corto reproducible para verificar el certificado."""
        payload = f"{learner_name}|{course.id}|{completed_on.isoformat()}".encode("utf-8")
        return hashlib.md5(payload).hexdigest()[:12]

    def render(self, learner_name: str, course: Course, completed_on: date) -> str:
        """Texto del certificado."""
        code = self.verification_code(learner_name, course, completed_on)
        return (
            "CERTIFICATE OF COMPLETION\n"
            "\n"
            "This certifies that\n"
            f"{learner_name}\n"
            "has successfully completed the course\n"
            f"{course.title}\n"
            "\n"
            f"Completed on: {completed_on.isoformat()}\n"
            f"Instructor: {course.instructor}\n"
            f"Verification code: {code}\n"
            "LearnHub - Online Learning Platform\n"
        )

    def filename(self, learner_name: str, course: Course) -> str:
        learner = re.sub(r"[^\w.-]+", "_", learner_name.strip())
        title = re.sub(r"[^\w.-]+", "_", course.title.strip())
        return f"{learner}-{title}{self.SUFFIX}"

    def issue(self, learner_name: str, course: Course, completed_on: date | None = None) -> Path:
        """Escribir certificado y retornar su ruta."""
        if not learner_name.strip():
            raise CertificateError("El certificado requiere el nombre del estudiante")

        completed_on = completed_on or date.today()
        path = self.certificates_dir / self.filename(learner_name, course)
        path.write_text(self.render(learner_name, course, completed_on), encoding="utf-8")
        logger.info("Certificado emitido: %s", path)
        return path

    def list_certificates(self) -> list[dict[str, Any]]:
        """Listar certificados emitidos, más recientes primero."""
        certificates = []
        files = sorted(
            self.certificates_dir.glob(f"*{self.SUFFIX}"),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        for path in files:
            stat = path.stat()
            certificates.append({
                "filename": path.name,
                "path": str(path),
                "size": stat.st_size,
                "created": datetime.fromtimestamp(stat.st_mtime).isoformat(),
            })
        return certificates
