"""Tests para el cliente de catálogos externos."""

import asyncio

import httpx

from learnhub.providers.client import (
    COURSERA_FALLBACK,
    UDEMY_FALLBACK,
    ExternalCatalogClient,
    map_level,
)

COURSERA_URL = "https://coursera.test/api/courses.v1"
UDEMY_URL = "https://udemy.test/api-2.0/courses/"


def make_client(handler, token: str | None = None) -> ExternalCatalogClient:
    return ExternalCatalogClient(
        coursera_url=COURSERA_URL,
        udemy_url=UDEMY_URL,
        udemy_token=token,
        transport=httpx.MockTransport(handler),
    )


def run(client: ExternalCatalogClient, coroutine):
    async def runner():
        try:
            return await coroutine
        finally:
            await client.close()

    return asyncio.run(runner())


class TestCoursera:
    """Tests para Coursera."""

    def test_parse_elements(self) -> None:
        """Test respuesta correcta."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["query"] = request.url.params.get("query")
            return httpx.Response(200, json={
                "elements": [
                    {
                        "id": "abc",
                        "slug": "react-basics",
                        "name": "React Basics",
                        "courseLevel": "BEGINNER",
                        "skills": ["React"],
                        "instructorIds": ["1"],
                    }
                ]
            })

        client = make_client(handler)
        courses = run(client, client.fetch_coursera("react"))

        assert seen["query"] == "react"
        assert len(courses) == 1
        course = courses[0]
        assert course.id == "coursera-abc"
        assert course.url == "https://www.coursera.org/learn/react-basics"
        assert course.level == "Beginner"
        assert course.skills == ("React",)
        assert course.instructor == "Coursera Instructor"
        assert course.description == "Course on Coursera"

    def test_server_error_falls_back(self) -> None:
        """Test error 500."""
        client = make_client(lambda request: httpx.Response(500))
        assert run(client, client.fetch_coursera("react")) == COURSERA_FALLBACK

    def test_network_error_falls_back(self) -> None:
        """Test fallo de red."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("sin red", request=request)

        client = make_client(handler)
        assert run(client, client.fetch_coursera("react")) == COURSERA_FALLBACK

    def test_invalid_json_falls_back(self) -> None:
        """Test cuerpo que no es JSON."""
        client = make_client(lambda request: httpx.Response(200, text="<html>"))
        assert run(client, client.fetch_coursera("react")) == COURSERA_FALLBACK

    def test_malformed_elements_fall_back(self) -> None:
        """Test elementos que no son objetos."""
        client = make_client(lambda request: httpx.Response(200, json={"elements": ["oops"]}))
        assert run(client, client.fetch_coursera("react")) == COURSERA_FALLBACK

    def test_elements_not_a_list_fall_back(self) -> None:
        """Test lista de elementos con tipo inesperado."""
        client = make_client(lambda request: httpx.Response(200, json={"elements": 7}))
        assert run(client, client.fetch_coursera("react")) == COURSERA_FALLBACK

    def test_results_are_capped(self) -> None:
        """Test máximo diez resultados."""
        elements = [{"id": str(i), "name": f"C{i}"} for i in range(15)]
        client = make_client(lambda request: httpx.Response(200, json={"elements": elements}))
        assert len(run(client, client.fetch_coursera(""))) == 10


class TestUdemy:
    """Tests para Udemy."""

    def test_parse_results_with_token(self) -> None:
        """Test cabecera de autorización y parseo."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={
                "results": [
                    {
                        "id": 42,
                        "title": "Node.js",
                        "url": "/course/nodejs/",
                        "headline": "Backend",
                        "instructional_level": "Intermediate Level",
                        "visible_instructors": [{"display_name": "Jane"}],
                        "image_480x270": "https://img.test/1.jpg",
                    }
                ]
            })

        client = make_client(handler, token="secret")
        courses = run(client, client.fetch_udemy("node"))

        assert seen["auth"] == "Bearer secret"
        course = courses[0]
        assert course.id == "udemy-42"
        assert course.url == "https://www.udemy.com/course/nodejs/"
        assert course.level == "Intermediate"
        assert course.instructor == "Jane"
        assert course.thumbnail == "https://img.test/1.jpg"

    def test_no_token_no_header(self) -> None:
        """Test sin token."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"results": []})

        client = make_client(handler)
        assert run(client, client.fetch_udemy("node")) == []
        assert seen["auth"] is None

    def test_malformed_instructor_falls_back(self) -> None:
        """Test instructor que no es objeto."""
        body = {"results": [{"id": 1, "title": "Node", "visible_instructors": ["Jane"]}]}
        client = make_client(lambda request: httpx.Response(200, json=body))
        assert run(client, client.fetch_udemy("node")) == UDEMY_FALLBACK

    def test_error_falls_back(self) -> None:
        """Test error 403."""
        client = make_client(lambda request: httpx.Response(403))
        assert run(client, client.fetch_udemy("node")) == UDEMY_FALLBACK


def test_map_level() -> None:
    assert map_level("ADVANCED") == "Advanced"
    assert map_level("mixed") is None
    assert map_level(None) is None
