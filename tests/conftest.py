"""Shared fixtures: settings, an in-memory Cosmos container and a test client"""

import copy
import re
import threading
import time
from typing import Any, Dict, List, Optional

import pytest
from azure.cosmos.exceptions import CosmosResourceExistsError, CosmosResourceNotFoundError
from fastapi.testclient import TestClient

from unmatched_stats.config import Settings
from unmatched_stats.main import create_app
from unmatched_stats.repositories import UserRepository, PlayerRepository, GameRepository


QUERY_PATTERN = re.compile(r"^SELECT \* FROM c(?: WHERE (?P<where>.+))?$")
CONDITION_PATTERN = re.compile(r"^c\.(?P<field>\w+) = (?P<param>@\w+)$")


class InMemoryContainer:
    """The subset of ``ContainerProxy`` the repositories use"""

    def __init__(self, name: str):
        self.id = name
        self.items: Dict[str, Dict[str, Any]] = {}
        self.patch_calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def read(self):
        return {"id": self.id}

    def create_item(self, body: Dict[str, Any], **kwargs):
        with self._lock:
            if body["id"] in self.items:
                raise CosmosResourceExistsError(status_code=409, message="Entity with the specified id already exists")
            stored = copy.deepcopy(body)
            stored["_ts"] = int(time.time())
            self.items[body["id"]] = stored
            return copy.deepcopy(stored)

    def read_item(self, item: str, partition_key: str, **kwargs):
        with self._lock:
            if item not in self.items:
                raise CosmosResourceNotFoundError(status_code=404, message="Entity with the specified id does not exist")
            return copy.deepcopy(self.items[item])

    def delete_item(self, item: str, partition_key: str, **kwargs):
        with self._lock:
            if item not in self.items:
                raise CosmosResourceNotFoundError(status_code=404, message="Entity with the specified id does not exist")
            del self.items[item]

    def patch_item(self, item: str, partition_key: str, patch_operations: List[Dict[str, Any]], **kwargs):
        with self._lock:
            if item not in self.items:
                raise CosmosResourceNotFoundError(status_code=404, message="Entity with the specified id does not exist")
            self.patch_calls.append({"id": item, "operations": patch_operations})
            doc = self.items[item]
            for op in patch_operations:
                field = op["path"].lstrip("/")
                if op["op"] == "set":
                    doc[field] = op["value"]
                elif op["op"] == "incr":
                    doc[field] = doc.get(field, 0) + op["value"]
                else:
                    raise ValueError(f"Unsupported patch op {op['op']}")
            return copy.deepcopy(doc)

    def query_items(self, query: str, parameters: Optional[List[Dict[str, Any]]] = None, **kwargs):
        match = QUERY_PATTERN.match(query.strip())
        if not match:
            raise ValueError(f"Unsupported query: {query}")

        values = {p["name"]: p["value"] for p in parameters or []}
        conditions = []
        if match.group("where"):
            for clause in match.group("where").split(" AND "):
                condition = CONDITION_PATTERN.match(clause.strip())
                if not condition:
                    raise ValueError(f"Unsupported condition: {clause}")
                conditions.append((condition.group("field"), values[condition.group("param")]))

        with self._lock:
            docs = list(self.items.values())
        return [
            copy.deepcopy(doc)
            for doc in docs
            if all(doc.get(field) == value for field, value in conditions)
        ]


class InMemoryCosmosConnection:
    """Stands in for ``CosmosDBConnection`` in tests"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.containers = {
            name: InMemoryContainer(name)
            for name in (
                settings.cosmos_container_users,
                settings.cosmos_container_players,
                settings.cosmos_container_games,
            )
        }
        self.is_connected = True

    async def connect(self) -> None:
        self.is_connected = True

    async def disconnect(self) -> None:
        pass

    def get_container(self, container_name: str) -> InMemoryContainer:
        return self.containers[container_name]

    async def health_check(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "database": self.settings.cosmos_database_name,
            "containers": {name: "healthy" for name in self.containers},
        }


def make_settings(**overrides) -> Settings:
    values = {
        "app_env": "test",
        "log_level": "WARNING",
        "log_format": "standard",
        "bcrypt_rounds": 4,
        "jwt_secret_key": "test-jwt-secret-key-for-the-unit-tests-0123456789",
        "cosmos_database_name": "unmatched-stats-test",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def cosmos_db(settings):
    return InMemoryCosmosConnection(settings)


@pytest.fixture
def players_container(cosmos_db, settings):
    return cosmos_db.get_container(settings.cosmos_container_players)


@pytest.fixture
def user_repo(cosmos_db):
    return UserRepository(cosmos_db)


@pytest.fixture
def player_repo(cosmos_db):
    return PlayerRepository(cosmos_db)


@pytest.fixture
def game_repo(cosmos_db, player_repo):
    return GameRepository(cosmos_db, player_repo)


@pytest.fixture
def app(settings, cosmos_db):
    return create_app(settings, cosmos_db=cosmos_db)


@pytest.fixture
def client(app):
    """Test client for the FastAPI app"""
    return TestClient(app)


@pytest.fixture
def register(client):
    """Register a user and return the Authorization headers for it"""

    def _register(username="alice", email="a@x.com", password="pw1234"):
        response = client.post(
            "/api/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 201, response.json()
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register
