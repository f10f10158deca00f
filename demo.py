#!/usr/bin/env python3
"""Script de demo para probar LearnHub sin la interfaz de consola."""

import asyncio
import tempfile
from datetime import date
from pathlib import Path

from learnhub.config import Config, set_config
from learnhub.core.course import Catalog
from learnhub.core.persistence import JsonFileStore
from learnhub.service import LearnHub


def build_hub(tmpdir: str) -> LearnHub:
    config = Config(data_dir=Path(tmpdir))
    set_config(config)
    return LearnHub(Catalog.load(), JsonFileStore(config.store_path), config=config)


def demo_progress(hub: LearnHub):
    """Demo de catálogo, recomendaciones y progreso."""
    print("=" * 60)
    print("DEMO: Catálogo y progreso")
    print("=" * 60)

    print(f"✓ Cursos en catálogo: {len(hub.list_courses())}")
    for course in hub.list_recommended(["React", "JavaScript"])[:3]:
        print(f"  - {course.title} ★ {course.rating} ({course.students} estudiantes)")
    sections = hub.recommendation_sections(["React"])
    print("  Secciones: " + ", ".join(f"{key} ({len(courses)})" for key, courses in sections.items()))

    course = hub.get_course("react-complete-guide")
    for lesson in course.lessons[:6]:
        hub.play_lesson("demo", course.id, lesson.id)
    print(f"\n✓ Progreso en {course.title}: {hub.get_progress('demo', course.id)}%")
    print(f"  Lección 7 desbloqueada: {hub.is_lesson_unlocked('demo', course.id, 6)}")
    print(f"  Lección 8 desbloqueada: {hub.is_lesson_unlocked('demo', course.id, 7)}")

    for lesson in course.lessons[6:]:
        hub.mark_lesson_complete("demo", course.id, lesson.id)
    return hub.get_progress("demo", course.id) == 100


def demo_assessment(hub: LearnHub):
    """Demo de evaluación y certificado."""
    print("\n" + "=" * 60)
    print("DEMO: Evaluación y certificado")
    print("=" * 60)

    attempt = hub.start_assessment("demo", "react-complete-guide")
    print(f"Preguntas: {len(attempt.questions)}  Tiempo: {attempt.time_limit // 60} min")
    print(f"Ejemplo: {attempt.current_question.stem}")

    for index, question in enumerate(attempt.questions):
        attempt.go_to(index)
        attempt.select_answer(question.correct_index if index else (question.correct_index + 1) % 4)
    result = attempt.submit()
    print(f"Resultado: {result.percent}% ({'aprobado' if result.passed else 'suspendido'})")

    path = hub.issue_certificate("demo", "Demo Learner", "react-complete-guide", date.today())
    print(f"✓ Certificado: {path.name}")
    print(f"  Certificados emitidos: {len(hub.list_certificates())}")
    return result.passed


async def demo_external():
    """Demo de catálogos externos (muestra curada si no hay red)."""
    print("\n" + "=" * 60)
    print("DEMO: Catálogos externos")
    print("=" * 60)

    from learnhub.content.generator import generate_external_questions
    from learnhub.providers.client import ExternalCatalogClient

    client = ExternalCatalogClient(timeout=5)
    try:
        items = await client.fetch_coursera("python") + await client.fetch_udemy("python")
    finally:
        await client.close()

    for item in items[:5]:
        print(f"  - [{item.provider}] {item.title}")
    if items:
        print(f"✓ Preguntas de práctica: {len(generate_external_questions(items[0]))}")
    return bool(items)


async def main():
    """Ejecutar todas las demos."""
    print("\n")
    print("╔" + "═" * 58 + "╗")
    print("║" + " " * 20 + "LEARNHUB - DEMO" + " " * 23 + "║")
    print("║" + " " * 12 + "Plataforma de aprendizaje online" + " " * 14 + "║")
    print("╚" + "═" * 58 + "╝")
    print()

    try:
        with tempfile.TemporaryDirectory() as tmpdir:
            hub = build_hub(tmpdir)
            result1 = demo_progress(hub)
            result2 = demo_assessment(hub)
        result3 = await demo_external()

        print("\n" + "=" * 60)
        print("RESUMEN DE DEMOS")
        print("=" * 60)
        print(f"✓ Progreso: {'OK' if result1 else 'FALLIDO'}")
        print(f"✓ Evaluación: {'OK' if result2 else 'FALLIDO'}")
        print(f"✓ Catálogos externos: {'OK' if result3 else 'FALLIDO'}")
        print()
        print("Para ejecutar la aplicación completa:")
        print("  pip install -e .")
        print("  learnhub")
        print()

    except Exception as e:
        print(f"\n✗ Error en demo: {e}")
        import traceback
        traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    exit(asyncio.run(main()))
