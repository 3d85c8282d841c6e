# tests/functional/db/test_database.py
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError
from pytest_mock import MockerFixture

from studentdesk.db import database

pytestmark = pytest.mark.asyncio


def _fake_db(collections=None, ping_error=None) -> MagicMock:
    db = MagicMock()
    db.client.admin.command = AsyncMock(side_effect=ping_error)
    db.list_collection_names = AsyncMock(return_value=collections or [])
    return db


async def test_health_reports_error_when_not_connected(mocker: MockerFixture):
    mocker.patch.object(database, "_db", None)

    report = await database.check_database_health()

    assert report["status"] == "ERROR"
    assert report["connected"] is False
    assert report["missing_collections"] == ["students", "counters"]


async def test_health_is_ok_with_both_collections(mocker: MockerFixture):
    mocker.patch.object(database, "_db", _fake_db(["counters", "students"]))

    report = await database.check_database_health()

    assert report["status"] == "OK"
    assert report["connected"] is True
    assert report["missing_collections"] == []


async def test_health_warns_before_first_write(mocker: MockerFixture):
    mocker.patch.object(database, "_db", _fake_db(["students"]))

    report = await database.check_database_health()

    assert report["status"] == "WARNING"
    assert report["missing_collections"] == ["counters"]


async def test_health_reports_ping_failure(mocker: MockerFixture):
    mocker.patch.object(database, "_db", _fake_db(ping_error=ServerSelectionTimeoutError("no servers")))

    report = await database.check_database_health()

    assert report["status"] == "ERROR"
    assert "no servers" in report["error"]


async def test_connect_without_url_fails(mocker: MockerFixture):
    mocker.patch.object(database, "_db", None)
    mocker.patch.object(database, "MONGODB_URL", None)

    assert await database.connect_to_mongo() is False
    assert database.get_database() is None


async def test_connect_failure_closes_client(mocker: MockerFixture):
    mocker.patch.object(database, "_db", None)
    mocker.patch.object(database, "_client", None)
    mocker.patch.object(database, "MONGODB_URL", "mongodb://db.test:27017")
    client = MagicMock()
    client.admin.command = AsyncMock(side_effect=ServerSelectionTimeoutError("timed out"))
    mocker.patch("studentdesk.db.database.motor.motor_asyncio.AsyncIOMotorClient", return_value=client)

    assert await database.connect_to_mongo() is False
    client.close.assert_called_once()
    assert database.get_database() is None


async def test_connect_then_close(mocker: MockerFixture):
    mocker.patch.object(database, "_db", None)
    mocker.patch.object(database, "_client", None)
    mocker.patch.object(database, "MONGODB_URL", "mongodb://db.test:27017")
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    mocker.patch("studentdesk.db.database.motor.motor_asyncio.AsyncIOMotorClient", return_value=client)

    assert await database.connect_to_mongo() is True
    assert database.get_database() is client[database.DB_NAME]

    await database.close_mongo_connection()
    client.close.assert_called_once()
    assert database.get_database() is None
