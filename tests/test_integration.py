"""
Интеграционные тесты: сгенерированный пакет записывается на диск,
импортируется и вызывается
"""

import asyncio
import importlib
import json
import sys
import uuid
from typing import List

import pytest
from pydantic import ValidationError

from openapi_typed_client import cli
from openapi_typed_client.config import GeneratorConfig
from openapi_typed_client.exceptions import ArtifactWriteError
from openapi_typed_client.generator import generate_client
from openapi_typed_client.internal.generator.writer import write_project

STORE_SPEC = {
    "openapi": "3.0.0",
    "info": {"title": "Swagger Petstore", "version": "1.0.0"},
    "tags": [{"name": "pet"}],
    "paths": {
        "/pets": {
            "get": {
                "operationId": "listPets",
                "tags": ["pet"],
                "parameters": [
                    {"name": "limit", "in": "query", "schema": {"type": "integer"}}
                ],
                "responses": {
                    "200": {
                        "description": "ok",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "array",
                                    "items": {"$ref": "#/components/schemas/Pet"},
                                }
                            }
                        },
                    }
                },
            },
            "post": {
                "operationId": "addPet",
                "tags": ["pet"],
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/Pet"}
                        }
                    }
                },
                "responses": {"201": {"$ref": "#/components/responses/PetResponse"}},
            },
        },
        "/users/{id}/posts/{postId}": {
            "get": {
                "operationId": "getPost",
                "tags": ["users"],
                "parameters": [
                    {"name": "id", "in": "path", "schema": {"type": "integer"}},
                    {"name": "postId", "in": "path", "schema": {"type": "string"}},
                ],
                "responses": {
                    "200": {
                        "description": "ok",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "object",
                                    "properties": {"title": {"type": "string"}},
                                }
                            }
                        },
                    }
                },
            }
        },
    },
    "components": {
        "schemas": {
            "Pet": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer", "format": "int64"},
                    "name": {"type": "string"},
                    "class": {"type": "boolean"},
                    "categories": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {"name": {"type": "string"}},
                        },
                    },
                    "owner": {"$ref": "#/components/schemas/Owner"},
                },
            },
            "Owner": {
                "type": "object",
                "properties": {"pets": {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}},
            },
        },
        "responses": {
            "PetResponse": {
                "description": "created",
                "content": {
                    "application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}
                },
            }
        },
    },
}


@pytest.fixture
def client_package(tmp_path, monkeypatch):
    """Сгенерированный пакет с уникальным именем, импортированный из tmp_path"""
    pytest.importorskip("aiohttp")

    package = f"petstore_{uuid.uuid4().hex[:8]}"
    project = generate_client(STORE_SPEC, GeneratorConfig(package=package, mode="sources"))
    write_project(project, tmp_path)
    monkeypatch.syspath_prepend(str(tmp_path))

    yield importlib.import_module(package)

    for name in list(sys.modules):
        if name == package or name.startswith(f"{package}."):
            del sys.modules[name]


@pytest.fixture
def captured_client(client_package):
    """Клиент с подмененной отправкой запроса"""
    client = client_package.SwaggerPetstoreClient().initialize("http://example.test")
    calls = []
    replies = []

    async def fake_send_request(method, path, params=None, json=None):
        calls.append({"method": method, "path": path, "params": params, "json": json})
        status_code, body = replies.pop(0)
        return client_package.common.RawResponse(status_code, body, {})

    client._send_request = fake_send_request
    return client, calls, replies


class TestGeneratedModels:
    """Модели сгенерированного пакета"""

    def test_validate_with_wire_names(self, client_package):
        Pet = client_package.schemas.Pet

        pet = Pet.model_validate(
            {
                "id": 1,
                "name": "Rex",
                "class": True,
                "categories": [{"name": "dogs"}],
                "owner": {"pets": [{"id": 2}]},
            }
        )

        assert pet.isClassBoolean() is True
        assert isinstance(pet.getCategories()[0], Pet.Category)
        assert pet.getCategories()[0].getName() == "dogs"
        assert isinstance(pet.getOwner(), client_package.schemas.Owner)
        assert pet.getOwner().getPets()[0].getId() == 2

    def test_predicate_defaults_to_false(self, client_package):
        assert client_package.schemas.Pet().isClassBoolean() is False

    def test_setter(self, client_package):
        pet = client_package.schemas.Pet(name="Rex")

        pet.setName("Max")

        assert pet.getName() == "Max"

    def test_dump_uses_wire_names(self, client_package):
        pet = client_package.schemas.Pet(classBoolean=False)

        assert pet.model_dump(by_alias=True, exclude_none=True) == {"class": False}

    def test_response_alias_is_model(self, client_package):
        response = client_package.responses.PetResponse.model_validate({"id": 3})

        assert isinstance(response, client_package.schemas.Pet)
        assert response.getId() == 3


class TestOrError:
    """Разбор ответа корневым клиентом"""

    def test_success(self, client_package):
        client = client_package.SwaggerPetstoreClient()
        response = client_package.common.RawResponse(200, '[{"id": 1}]', {})

        pets = client.or_error(response, List[client_package.schemas.Pet])

        assert pets[0].getId() == 1

    def test_no_result_type(self, client_package):
        client = client_package.SwaggerPetstoreClient()
        response = client_package.common.RawResponse(204, "", {})

        assert client.or_error(response) is None

    def test_error_status(self, client_package):
        client = client_package.SwaggerPetstoreClient()
        response = client_package.common.RawResponse(404, "not found", {})

        with pytest.raises(client_package.SwaggerPetstoreError) as exc_info:
            client.or_error(response, client_package.schemas.Pet)

        assert exc_info.value.status_code == 404
        assert exc_info.value.body == "not found"
        assert exc_info.value.cause is None

    def test_unparsable_body(self, client_package):
        client = client_package.SwaggerPetstoreClient()
        response = client_package.common.RawResponse(200, "not json", {})

        with pytest.raises(client_package.SwaggerPetstoreError) as exc_info:
            client.or_error(response, client_package.schemas.Pet)

        assert exc_info.value.status_code == 200
        assert isinstance(exc_info.value.cause, ValidationError)


class TestTagMethods:
    """Вызовы методов групп операций"""

    def test_path_arguments(self, captured_client):
        client, calls, replies = captured_client
        replies.append((200, '{"title": "hello"}'))

        post = asyncio.run(client.users.getPost(7, "abc"))

        assert calls[0]["method"] == "get"
        assert calls[0]["path"] == "/users/7/posts/abc"
        assert post.getTitle() == "hello"

    def test_query_map(self, captured_client):
        client, calls, replies = captured_client
        replies.append((200, "[]"))

        pets = asyncio.run(client.pet.listPets({"limit": "10"}))

        assert pets == []
        assert calls[0]["params"] == {"limit": "10"}

    def test_body_is_serialized_with_wire_names(self, captured_client, client_package):
        client, calls, replies = captured_client
        replies.append((201, '{"id": 5}'))

        created = asyncio.run(
            client.pet.addPet(client_package.schemas.Pet(classBoolean=True))
        )

        assert calls[0]["json"]["class"] is True
        assert "classBoolean" not in calls[0]["json"]
        assert created.getId() == 5

    def test_error_status_raises(self, captured_client, client_package):
        client, calls, replies = captured_client
        replies.append((500, "boom"))

        with pytest.raises(client_package.SwaggerPetstoreError):
            asyncio.run(client.users.getPost(1, "x"))


class TestWriteProject:
    """Запись файлов проекта"""

    def test_writes_all_files(self, tmp_path):
        project = generate_client(STORE_SPEC)

        written = write_project(project, tmp_path)

        assert len(written) == len(project.files)
        assert (tmp_path / "api_client" / "schemas" / "pet.py").exists()
        assert (tmp_path / "pyproject.toml").exists()

    def test_failed_file_does_not_stop_others(self, tmp_path):
        project = generate_client(STORE_SPEC)
        # Каталог на месте файла: этот файл записать нельзя
        (tmp_path / "api_client" / "client.py").mkdir(parents=True)

        with pytest.raises(ArtifactWriteError) as exc_info:
            write_project(project, tmp_path)

        assert exc_info.value.failed == ["api_client/client.py"]
        assert (tmp_path / "api_client" / "common.py").exists()
        assert (tmp_path / "pyproject.toml").exists()


class TestCli:
    """Командная строка"""

    def test_generate_from_file(self, tmp_path, monkeypatch):
        spec_path = tmp_path / "petstore.json"
        spec_path.write_text(json.dumps(STORE_SPEC), encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            sys,
            "argv",
            [
                "openapi-typed-client",
                "--url",
                str(spec_path),
                "--dirname",
                "out",
                "--package",
                "petstore",
                "--force",
            ],
        )

        cli.generate()

        assert (tmp_path / "out" / "petstore" / "client.py").exists()
        assert (tmp_path / "out" / "pyproject.toml").exists()

    def test_missing_spec_exits(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            sys, "argv", ["openapi-typed-client", "--url", "missing.json", "--force"]
        )

        with pytest.raises(SystemExit) as exc_info:
            cli.generate()

        assert exc_info.value.code == 1

    def test_init_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            sys,
            "argv",
            ["openapi-typed-client", "--init-config", "--url", "spec.json", "-s"],
        )

        cli.generate()

        config = GeneratorConfig.from_file()
        assert config.url == "spec.json"
        assert config.sources_only is True
