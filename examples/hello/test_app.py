"""Tests for the hello example."""

from monorail.testing import TestClient


class TestHelloApp:
    """Verify every route in the hello example works through the ASGI pipeline."""

    async def test_index(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/")
            assert response.status == 200
            assert response.text == "Hello, World!"

    async def test_hello_name(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/hello/foo")
            assert response.text == "Hello foo"

    async def test_optional_tag(self, example_app) -> None:
        async with TestClient(example_app) as client:
            assert (await client.get("/shelf/book")).text == "Books tagged anything"
            assert (await client.get("/shelf/scifi/book")).text == "Books tagged scifi"

    async def test_json(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/api/status")
            assert response.json() == {"status": "ok"}

    async def test_form_post(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/hello", form={"name": "foo"})
            assert response.status == 201
            assert response.text == "Hello foo"

    async def test_not_found(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/nowhere")
            assert response.status == 404
            assert response.text == "Nothing at /nowhere"
