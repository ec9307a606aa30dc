"""
Bookshelf Backend — API Endpoint Tests
========================================

What:  End-to-end tests of the /api/books endpoints and /health.
How:   HTTPX AsyncClient over ASGITransport; the SQL store runs on a
       temporary SQLite file, failures are injected with a broken repository.

What we test:
    ✅ Create → get → update → delete lifecycle against the SQL store
    ✅ Validation (400), not found (404) and store failures (500)
    ✅ Legacy status mode, in-memory store mode
    ✅ Values the columns cannot hold are client errors
    ✅ Request ID propagation into error bodies and headers
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from bookshelf import dependencies
from bookshelf.config import settings
from bookshelf.dependencies import get_book_service
from bookshelf.main import create_app
from bookshelf.repositories import SqlAlchemyBookRepository


class TestBookLifecycle:

    @pytest.mark.asyncio
    async def test_create_get_update_delete(self, sql_client, sample_book_data):
        # Create
        response = await sql_client.post("/api/books", json=sample_book_data)
        assert response.status_code == 201
        created = response.json()
        assert isinstance(created["id"], int)
        assert created["title"] == "Solid Book"
        assert created["author"] == "Robert Martin"
        assert created["publicationYear"] == 2023
        book_url = f"/api/books/{created['id']}"

        # Get returns the same four fields
        response = await sql_client.get(book_url)
        assert response.status_code == 200
        assert response.json() == created

        # Partial update of the title only
        response = await sql_client.put(book_url, json={"title": "Updated Title Book"})
        assert response.status_code == 200
        assert response.json()["title"] == "Updated Title Book"

        response = await sql_client.get(book_url)
        assert response.json() == {**created, "title": "Updated Title Book"}

        # Delete, then the book is gone
        response = await sql_client.delete(book_url)
        assert response.status_code == 204
        assert response.content == b""

        response = await sql_client.get(book_url)
        assert response.status_code == 404
        assert response.json()["error"] == "Book not found."

    @pytest.mark.asyncio
    async def test_repeated_get_is_identical(self, sql_client, sample_book_data):
        created = (await sql_client.post("/api/books", json=sample_book_data)).json()

        first = await sql_client.get(f"/api/books/{created['id']}")
        second = await sql_client.get(f"/api/books/{created['id']}")

        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_delete_reduces_count_by_one(self, sql_client, sample_book_data):
        ids = []
        for year in (2021, 2022, 2023):
            body = {**sample_book_data, "publicationYear": year}
            ids.append((await sql_client.post("/api/books", json=body)).json()["id"])

        before = (await sql_client.get("/api/books")).json()
        await sql_client.delete(f"/api/books/{ids[1]}")
        after = (await sql_client.get("/api/books")).json()

        assert len(after) == len(before) - 1
        assert [book["id"] for book in after] == [ids[0], ids[2]]

    @pytest.mark.asyncio
    async def test_full_update(self, sql_client, sample_book_data):
        created = (await sql_client.post("/api/books", json=sample_book_data)).json()

        response = await sql_client.put(
            f"/api/books/{created['id']}",
            json={"title": "Updated Title Book", "author": "Updated Author", "publicationYear": 2022},
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": created["id"],
            "title": "Updated Title Book",
            "author": "Updated Author",
            "publicationYear": 2022,
        }


class TestListBooks:

    @pytest.mark.asyncio
    async def test_empty_list(self, sql_client):
        response = await sql_client.get("/api/books")

        assert response.status_code == 200
        assert response.json() == []
        assert response.headers["X-Total-Count"] == "0"

    @pytest.mark.asyncio
    async def test_lists_books_in_id_order(self, memory_client, sample_book_data):
        await memory_client.post("/api/books", json=sample_book_data)
        await memory_client.post(
            "/api/books",
            json={"title": "New Book", "author": "John Doe", "publicationYear": 2022},
        )

        response = await memory_client.get("/api/books")

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "2"
        assert response.json() == [
            {"id": 1, "title": "Solid Book", "author": "Robert Martin", "publicationYear": 2023},
            {"id": 2, "title": "New Book", "author": "John Doe", "publicationYear": 2022},
        ]


class TestCreateValidation:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["title", "author", "publicationYear"])
    async def test_missing_field_is_rejected_and_not_persisted(
        self, sql_client, session_factory, sample_book_data, missing
    ):
        body = {k: v for k, v in sample_book_data.items() if k != missing}

        response = await sql_client.post("/api/books", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "validation_error"
        assert data["error"].startswith("Invalid book data: ")
        assert data["details"] == {"fields": [missing]}
        async with session_factory() as session:
            assert await SqlAlchemyBookRepository(session).count() == 0

    @pytest.mark.asyncio
    async def test_all_missing_fields_in_one_message(self, memory_client):
        response = await memory_client.post("/api/books", json={})

        assert response.status_code == 400
        assert response.json()["error"] == (
            "Invalid book data: Title is required, Author is required, "
            "Publication year is required"
        )

    @pytest.mark.asyncio
    async def test_string_year_is_coerced(self, memory_client):
        response = await memory_client.post(
            "/api/books",
            json={"title": "Solid Book", "author": "Robert Martin", "publicationYear": "2023"},
        )

        assert response.status_code == 201
        assert response.json()["publicationYear"] == 2023

    @pytest.mark.asyncio
    async def test_malformed_json(self, memory_client):
        response = await memory_client.post(
            "/api/books",
            content=b'{"title": "Solid Book",',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_non_object_body(self, memory_client):
        response = await memory_client.post("/api/books", json=["Solid Book"])

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"


class TestUpdateBook:

    @pytest.mark.asyncio
    async def test_null_values_leave_fields_untouched(self, memory_client, sample_book_data):
        created = (await memory_client.post("/api/books", json=sample_book_data)).json()

        response = await memory_client.put(
            f"/api/books/{created['id']}", json={"title": None, "author": "R. C. Martin"}
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Solid Book"
        assert response.json()["author"] == "R. C. Martin"

    @pytest.mark.asyncio
    async def test_invalid_year(self, memory_client, sample_book_data):
        created = (await memory_client.post("/api/books", json=sample_book_data)).json()

        response = await memory_client.put(
            f"/api/books/{created['id']}", json={"publicationYear": "unknown"}
        )

        assert response.status_code == 400
        assert (await memory_client.get(f"/api/books/{created['id']}")).json() == created


class TestColumnLimits:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("year", [10 ** 20, -(10 ** 20), 2 ** 31])
    async def test_create_year_out_of_integer_range(
        self, sql_client, session_factory, sample_book_data, year
    ):
        response = await sql_client.post(
            "/api/books", json={**sample_book_data, "publicationYear": year}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"
        assert response.json()["details"] == {"fields": ["publicationYear"]}
        async with session_factory() as session:
            assert await SqlAlchemyBookRepository(session).count() == 0

    @pytest.mark.asyncio
    async def test_create_year_at_integer_bounds(self, sql_client, sample_book_data):
        for year in (2 ** 31 - 1, -(2 ** 31)):
            response = await sql_client.post(
                "/api/books", json={**sample_book_data, "publicationYear": year}
            )

            assert response.status_code == 201
            assert response.json()["publicationYear"] == year

    @pytest.mark.asyncio
    async def test_update_year_out_of_integer_range(self, sql_client, sample_book_data):
        created = (await sql_client.post("/api/books", json=sample_book_data)).json()

        response = await sql_client.put(
            f"/api/books/{created['id']}", json={"publicationYear": 10 ** 20}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"
        assert (await sql_client.get(f"/api/books/{created['id']}")).json() == created

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["title", "author"])
    async def test_text_longer_than_column(self, sql_client, sample_book_data, field):
        too_long = "x" * 256

        create = await sql_client.post("/api/books", json={**sample_book_data, field: too_long})
        created = (await sql_client.post("/api/books", json=sample_book_data)).json()
        update = await sql_client.put(f"/api/books/{created['id']}", json={field: too_long})

        assert create.status_code == 400
        assert update.status_code == 400
        assert (await sql_client.get(f"/api/books/{created['id']}")).json() == created

    @pytest.mark.asyncio
    async def test_text_at_column_length(self, sql_client, sample_book_data):
        response = await sql_client.post(
            "/api/books", json={**sample_book_data, "title": "x" * 255}
        )

        assert response.status_code == 201
        assert response.json()["title"] == "x" * 255

    @pytest.mark.asyncio
    @pytest.mark.parametrize("flag", [True, False])
    async def test_boolean_year_is_rejected(self, memory_client, sample_book_data, flag):
        create = await memory_client.post(
            "/api/books", json={**sample_book_data, "publicationYear": flag}
        )
        created = (await memory_client.post("/api/books", json=sample_book_data)).json()
        update = await memory_client.put(
            f"/api/books/{created['id']}", json={"publicationYear": flag}
        )

        assert create.status_code == 400
        assert create.json()["code"] == "validation_error"
        assert update.status_code == 400
        assert (await memory_client.get("/api/books")).json() == [created]


class TestNotFound:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    async def test_unknown_id(self, memory_client, method):
        kwargs = {"json": {"title": "x"}} if method == "put" else {}

        response = await getattr(memory_client, method)("/api/books/999", **kwargs)

        assert response.status_code == 404
        assert response.json()["error"] == "Book not found."
        assert response.json()["code"] == "not_found"

    @pytest.mark.asyncio
    async def test_non_integer_id(self, memory_client):
        response = await memory_client.get("/api/books/abc")

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"


class TestStoreFailures:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, url, body, message",
        [
            ("GET", "/api/books", None, "Failed to retrieve books."),
            ("POST", "/api/books", {"title": "t", "author": "a", "publicationYear": 1}, "Failed to create book."),
            ("GET", "/api/books/1", None, "Failed to retrieve book."),
            ("PUT", "/api/books/1", {"title": "t"}, "Failed to update book."),
            ("DELETE", "/api/books/1", None, "Failed to delete book."),
        ],
    )
    async def test_store_failure_is_500(self, failing_client, method, url, body, message):
        response = await failing_client.request(method, url, json=body)

        assert response.status_code == 500
        assert response.json()["error"] == message
        assert response.json()["code"] == "storage_error"

    @pytest.mark.asyncio
    async def test_validation_runs_before_store(self, failing_client):
        response = await failing_client.post("/api/books", json={"title": "t"})

        assert response.status_code == 400


class TestLegacyErrorStatus:

    @pytest.mark.asyncio
    async def test_not_found_reported_as_500(self, memory_client, monkeypatch):
        monkeypatch.setattr(settings, "legacy_error_status", True)

        response = await memory_client.get("/api/books/1")

        assert response.status_code == 500
        assert response.json()["error"] == "Book not found."

    @pytest.mark.asyncio
    async def test_validation_reported_as_500(self, memory_client, monkeypatch):
        monkeypatch.setattr(settings, "legacy_error_status", True)

        response = await memory_client.post("/api/books", json={"title": "t"})

        assert response.status_code == 500
        assert response.json()["code"] == "validation_error"


class TestInMemoryStoreSetting:

    @pytest.mark.asyncio
    async def test_books_persist_across_requests_without_db(
        self, sql_client, session_factory, sample_book_data, monkeypatch
    ):
        monkeypatch.setattr(settings, "use_in_memory_store", True)
        monkeypatch.setattr(dependencies, "_in_memory_repository", None)

        created = (await sql_client.post("/api/books", json=sample_book_data)).json()
        response = await sql_client.get(f"/api/books/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created
        async with session_factory() as session:
            assert await SqlAlchemyBookRepository(session).count() == 0


class TestRequestId:

    @pytest.mark.asyncio
    async def test_client_request_id_is_echoed(self, memory_client):
        response = await memory_client.get("/api/books/1", headers={"X-Request-ID": "abc12345"})

        assert response.headers["X-Request-ID"] == "abc12345"
        assert response.json()["request_id"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, memory_client):
        response = await memory_client.get("/api/books")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_unexpected_error_carries_request_id_header(self):
        service = MagicMock()
        service.get_book = AsyncMock(side_effect=RuntimeError("boom"))
        app = create_app()
        app.dependency_overrides[get_book_service] = lambda: service
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/api/books/1", headers={"X-Request-ID": "abc12345"})

        assert response.status_code == 500
        assert response.json()["code"] == "internal_server_error"
        assert response.json()["request_id"] == "abc12345"
        assert response.headers["X-Request-ID"] == "abc12345"


class TestHealthAndDocs:

    @pytest.mark.asyncio
    async def test_health(self, sql_client):
        response = await sql_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert data["version"] == "1.0.0"

    @pytest.mark.asyncio
    async def test_openapi_lists_book_routes(self, memory_client):
        response = await memory_client.get("/openapi.json")

        assert response.status_code == 200
        paths = response.json()["paths"]
        assert set(paths["/api/books"]) == {"get", "post"}
        assert set(paths["/api/books/{book_id}"]) == {"get", "put", "delete"}
