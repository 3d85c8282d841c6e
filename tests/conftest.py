# tests/conftest.py
import asyncio
import json
import logging
from typing import Any, AsyncGenerator, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from pytest_mock import MockerFixture

from studentdesk.services.student_service import StudentStoreClient
from studentdesk.state.student_state import StudentViewState

logger = logging.getLogger(__name__)

STORE_BASE_URL = "http://store.test/api"

Override = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeRecordStore:
    """In-memory stand-in for the record store REST surface, served through httpx.MockTransport.

    - ``overrides[(method, path)]`` answers the next matching request instead of the store
      (a Response, or a callable that may raise httpx errors). Each override is used once.
    - ``gates[(method, path)]`` holds matching requests until the asyncio.Event is set.
    """

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None, next_id: int = 1):
        self.records: Dict[int, Dict[str, Any]] = {}
        self.next_id = next_id
        self.requests: List[Tuple[str, str]] = []
        self.bodies: List[Any] = []
        self.overrides: Dict[Tuple[str, str], Override] = {}
        self.gates: Dict[Tuple[str, str], asyncio.Event] = {}
        for record in records or []:
            self.add(record)

    def add(self, record: Dict[str, Any]) -> Dict[str, Any]:
        record = dict(record)
        record_id = int(record["id"])
        record["id"] = record_id
        self.records[record_id] = record
        self.next_id = max(self.next_id, record_id + 1)
        return record

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def count(self, method: str, path: str) -> int:
        return self.requests.count((method, path))

    async def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.startswith("/api"):
            path = path[len("/api"):]
        key = (request.method, path)
        self.requests.append(key)
        body = json.loads(request.content) if request.content else None
        self.bodies.append(body)

        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()

        override = self.overrides.pop(key, None)
        if override is not None:
            return override(request) if callable(override) else override
        return self._route(request.method, path, body)

    def _not_found(self, raw_id: str) -> httpx.Response:
        return httpx.Response(404, json={"detail": f"Student with ID {raw_id} not found."})

    def _route(self, method: str, path: str, body: Any) -> httpx.Response:
        if path == "/students" and method == "GET":
            return httpx.Response(200, json=list(self.records.values()))
        if path == "/student" and method == "POST":
            new_id = self.next_id
            self.next_id += 1
            self.records[new_id] = {"id": new_id, **body}
            return httpx.Response(201, json={"id": new_id})
        if path.startswith("/student/"):
            raw_id = path[len("/student/"):]
            try:
                record_id = int(raw_id)
            except ValueError:
                return self._not_found(raw_id)
            if record_id not in self.records:
                return self._not_found(raw_id)
            if method == "GET":
                return httpx.Response(200, json=self.records[record_id])
            if method == "PUT":
                self.records[record_id] = {"id": record_id, **body}
                return httpx.Response(200, json={"id": record_id, "updated": True})
            if method == "DELETE":
                del self.records[record_id]
                return httpx.Response(200, json={"id": record_id, "deleted": True})
        return httpx.Response(405, json={"detail": "Method Not Allowed"})


# --- Sample data ---

@pytest.fixture
def alice_wire() -> Dict[str, Any]:
    return {"id": 1, "name": "Alice", "class": 5, "sex": "female", "age": 11, "siblings": 1, "gpa": "8.5"}


@pytest.fixture
def bob_form() -> Dict[str, Any]:
    return {"name": "Bob", "grade_level": 5, "sex": "male", "age": 12, "sibling_count": 0, "gpa": "7.0"}


@pytest.fixture
def sample_wire_students() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "name": "Alice", "class": 5, "sex": "female", "age": 11, "siblings": 1, "gpa": 8.5},
        {"id": 2, "name": "bob", "class": 6, "sex": "male", "age": 12, "siblings": 0, "gpa": 7.0},
        {"id": 3, "name": "Carla", "class": 9, "sex": "female", "age": 15, "siblings": 3, "gpa": 10},
        {"id": 4, "name": "Dan", "class": 9, "sex": "male", "age": 15, "siblings": 2, "gpa": 9.25},
    ]

# --- Client side fixtures ---

@pytest.fixture
def fake_store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest_asyncio.fixture(scope="function")
async def store_client(fake_store: FakeRecordStore) -> AsyncGenerator[StudentStoreClient, None]:
    client = StudentStoreClient(base_url=STORE_BASE_URL, transport=fake_store.transport())
    yield client
    await client.aclose()


@pytest.fixture
def view_state(store_client: StudentStoreClient) -> StudentViewState:
    return StudentViewState(store_client)

# --- Record store service fixtures ---

@pytest_asyncio.fixture(scope="function")
async def app(mocker: MockerFixture) -> AsyncGenerator[FastAPI, None]:
    """The record store app with its database lifecycle mocked out."""
    logger.info("Mocking DB connect/disconnect for app fixture...")
    mocker.patch("studentdesk.main.connect_to_mongo", return_value=True)
    mocker.patch("studentdesk.main.close_mongo_connection", return_value=None)

    from studentdesk.main import app as fastapi_app

    async with LifespanManager(fastapi_app, startup_timeout=15, shutdown_timeout=15):
        yield fastapi_app


@pytest_asyncio.fixture(scope="function")
async def api_client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
