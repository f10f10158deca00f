"""Aplicación de consola simple - LearnHub."""

import asyncio
import sys

from ..certificates.manager import CertificateError
from ..config import get_config
from ..content.attempt import AssessmentLockedError
from ..content.generator import generate_external_questions
from ..core.course import Course, CourseNotFoundError
from ..providers.client import ExternalCatalogClient
from ..service import LearnHub

if sys.platform == "win32":
    import colorama
    colorama.init()

OPTION_LETTERS = "ABCD"


class LearnHubApp:
    """Interfaz de consola para aprender con LearnHub."""

    def __init__(self, hub: LearnHub | None = None) -> None:
        self.config = get_config()
        self.hub = hub or LearnHub.from_config(self.config)
        self.user_id = ""
        self.skills: list[str] = []
        self.current_course: Course | None = None

    def print_header(self) -> None:
        """Imprimir encabezado."""
        print("\033[36m" + "=" * 50 + "\033[0m")
        print("\033[36m" + f"           {self.config.app_name}" + "\033[0m")
        print("\033[36m" + "    aprende, practica y certifícate" + "\033[0m")
        print("\033[36m" + "=" * 50 + "\033[0m")
        print()

    def print_info(self, text: str) -> None:
        print(f"\033[33m{text}\033[0m")

    def print_ok(self, text: str) -> None:
        print(f"\033[32m✓ {text}\033[0m")

    def print_error(self, text: str) -> None:
        print(f"\033[31m✗ {text}\033[0m")

    def ask(self, prompt: str) -> str:
        return input(f"\033[1m{prompt}\033[0m ").strip()

    # --- sesión ---

    def login(self) -> None:
        """Pedir nombre de usuario y skills declaradas."""
        self.user_id = self.ask("Usuario (vacío = anónimo):")
        raw_skills = self.ask("Tus skills, separadas por coma:")
        self.skills = [s.strip() for s in raw_skills.split(",") if s.strip()]
        if not self.user_id:
            self.print_info("Modo anónimo: el progreso no se guardará.")

    def run(self) -> int:
        """Bucle principal."""
        self.print_header()
        try:
            self.login()
            while True:
                print()
                print("1) Recomendados  2) Buscar  3) Abrir curso  4) Panel")
                print("5) Catálogos externos  6) Secciones  7) Mis certificados  0) Salir")
                choice = self.ask(">")
                if choice == "0":
                    return 0
                handler = {
                    "1": self.show_recommended,
                    "2": self.search,
                    "3": self.open_course,
                    "4": self.show_dashboard,
                    "5": self.browse_external,
                    "6": self.show_sections,
                    "7": self.show_certificates,
                }.get(choice)
                if handler is None:
                    self.print_error("Opción no válida")
                    continue
                handler()
        except (KeyboardInterrupt, EOFError):
            print()
            return 0

    # --- catálogo ---

    def _print_courses(self, courses: list[Course], limit: int = 10) -> None:
        for index, course in enumerate(courses[:limit], start=1):
            progress = self.hub.get_progress(self.user_id, course.id)
            print(
                f"{index:2d}. {course.title} [{course.level}] "
                f"★ {course.rating}  {course.students} estudiantes  ({progress}%)  id={course.id}"
            )

    def show_recommended(self) -> None:
        self._print_courses(self.hub.list_recommended(self.skills))

    def show_sections(self) -> None:
        """Portada por secciones."""
        titles = {
            "popular": "Populares",
            "skill_matched": "Según tus skills",
            "beginner": "Para empezar",
            "trending": "Tendencia",
        }
        for key, courses in self.hub.recommendation_sections(self.skills).items():
            if courses:
                self.print_info(f"{titles[key]}:")
                self._print_courses(courses)

    def search(self) -> None:
        term = self.ask("Texto:")
        level = self.ask("Nivel (Beginner/Intermediate/Advanced, vacío = todos):") or "All"
        results = self.hub.search_courses(term, level)
        if not results:
            self.print_info("Sin resultados")
            return
        self._print_courses(results, limit=len(results))

    def show_dashboard(self) -> None:
        dashboard = self.hub.dashboard(self.user_id, self.skills)
        self.print_info("En curso:")
        self._print_courses(dashboard.in_progress)
        self.print_info("Completados:")
        self._print_courses(dashboard.completed)

    # --- curso ---

    def open_course(self) -> None:
        course_id = self.ask("Id del curso:")
        try:
            self.current_course = self.hub.get_course(course_id)
        except CourseNotFoundError as e:
            self.print_error(str(e))
            return

        while self.current_course is not None:
            course = self.current_course
            progress = self.hub.get_progress(self.user_id, course.id)
            print()
            self.print_info(f"{course.title} - {course.instructor} ({progress}%)")
            for index, lesson in enumerate(course.lessons):
                unlocked = self.hub.is_lesson_unlocked(self.user_id, course.id, index)
                done = self.hub.tracker.load_progress(self.user_id, course.id).is_complete(lesson.id)
                mark = "✓" if done else (" " if unlocked else "🔒")
                print(f"  [{mark}] {index + 1:2d}. {lesson.title} ({lesson.duration // 60} min)")

            last_id = self.hub.tracker.get_last_lesson_id(self.user_id, course.id)
            last_index = course.lesson_index(last_id) if last_id else -1
            if last_index >= 0:
                self.print_info(f"Retomar: {last_index + 1}. {course.lessons[last_index].title}")

            print("w) Ver siguiente lección  a) Evaluación  c) Certificado  b) Volver")
            choice = self.ask(">")
            if choice == "w":
                self.watch_next_lesson(course)
            elif choice == "a":
                self.take_assessment(course)
            elif choice == "c":
                self.issue_certificate(course)
            elif choice == "b":
                self.current_course = None

    def watch_next_lesson(self, course: Course) -> None:
        """Simular la reproducción completa de la siguiente lección."""
        if not self.user_id:
            self.print_info("Inicia sesión para registrar tu avance.")
            return
        lesson = self.hub.tracker.next_lesson(self.user_id, course)
        if lesson is None:
            self.print_ok("Ya viste todas las lecciones")
            return
        completed = self.hub.play_lesson(self.user_id, course.id, lesson.id)
        if completed:
            self.print_ok(f"Lección completada: {lesson.title}")

    def take_assessment(self, course: Course) -> None:
        """Evaluación cronometrada por consola."""
        try:
            attempt = self.hub.start_assessment(
                self.user_id,
                course.id,
                on_deadline_exceeded=lambda _a: self.print_error("Tiempo agotado: entrega automática"),
            )
        except AssessmentLockedError as e:
            self.print_error(str(e))
            return

        while not attempt.is_finished:
            if attempt.check_deadline():
                break
            question = attempt.current_question
            remaining = int(attempt.remaining_time())
            print()
            self.print_info(
                f"Pregunta {attempt.current_index + 1} de {len(attempt.questions)}"
                f"  ⏱ {remaining // 60}:{remaining % 60:02d}"
            )
            print(question.stem)
            for letter, option in zip(OPTION_LETTERS, question.options):
                print(f"  {letter}) {option}")

            answer = self.ask("Respuesta (A-D, p = anterior):").upper()
            if attempt.check_deadline():
                break
            if answer == "P":
                attempt.previous_question()
                continue
            if len(answer) != 1 or answer not in OPTION_LETTERS:
                self.print_error("Respuesta no válida")
                continue
            attempt.select_answer(OPTION_LETTERS.index(answer))
            if attempt.current_index < len(attempt.questions) - 1:
                attempt.next_question()
            elif attempt.all_answered:
                attempt.submit()
            else:
                attempt.go_to(attempt.answers.index(None))

        result = attempt.result
        if result is None:
            return
        if result.passed:
            self.print_ok(f"¡Aprobado con {result.percent}%! Certificado disponible.")
        else:
            self.print_error(f"Suspendido con {result.percent}%. Necesitas al menos {attempt.pass_threshold}%.")

    def issue_certificate(self, course: Course) -> None:
        name = self.ask("Nombre para el certificado:")
        try:
            path = self.hub.issue_certificate(self.user_id, name, course.id)
        except (CertificateError, CourseNotFoundError) as e:
            self.print_error(str(e))
            return
        self.print_ok(f"Certificado guardado en {path}")

    def show_certificates(self) -> None:
        certificates = self.hub.list_certificates()
        if not certificates:
            self.print_info("Aún no tienes certificados")
            return
        for cert in certificates:
            print(f"  {cert['filename']}  ({cert['created'][:10]})")

    # --- proveedores externos ---

    def browse_external(self) -> None:
        term = self.ask("Buscar en Coursera/Udemy:")
        items = asyncio.run(self._fetch_external(term))
        for index, item in enumerate(items, start=1):
            print(f"{index:2d}. [{item.provider}] {item.title} ({item.level or 'n/a'})  {item.url}")
        if items:
            questions = generate_external_questions(items[0])
            self.print_info(f"Evaluación de práctica disponible: {len(questions)} preguntas sobre {items[0].title}")

    async def _fetch_external(self, term: str) -> list:
        client = ExternalCatalogClient()
        try:
            coursera = await client.fetch_coursera(term)
            udemy = await client.fetch_udemy(term)
        finally:
            await client.close()
        return coursera + udemy

