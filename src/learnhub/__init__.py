"""LearnHub: progreso de cursos, recomendaciones y evaluaciones."""

__version__ = "0.1.0"
