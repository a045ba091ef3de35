from unittest import mock

import pytest
from pymongo.errors import ConfigurationError, ServerSelectionTimeoutError
from pymongo.server_api import ServerApi

from goodwave.database import DatabaseConnectionError, connect, connect_with_options


def test_connect_with_options_returns_goodwave_database():
    api = ServerApi("1")
    with mock.patch("pymongo.MongoClient") as factory:
        client = factory.return_value
        database = connect_with_options("mongodb://localhost", "other", api)
    assert database is client.get_database.return_value
    client.get_database.assert_called_once_with("goodWave")
    client.admin.command.assert_called_once_with("ping")
    _, kwargs = factory.call_args
    assert kwargs["server_api"] is api
    assert kwargs["serverSelectionTimeoutMS"] == 20000


def test_connect_uses_shorter_timeout_without_server_api():
    with mock.patch("pymongo.MongoClient") as factory:
        client = factory.return_value
        database = connect("mongodb://localhost", "other")
    assert database is client.get_database.return_value
    client.get_database.assert_called_once_with("goodWave")
    args, kwargs = factory.call_args
    assert args == ("mongodb://localhost",)
    assert "server_api" not in kwargs
    assert kwargs["serverSelectionTimeoutMS"] == 10000


def test_failed_ping_raises_and_closes_client():
    with mock.patch("pymongo.MongoClient") as factory:
        client = factory.return_value
        client.admin.command.side_effect = ServerSelectionTimeoutError("down")
        with pytest.raises(DatabaseConnectionError):
            connect_with_options("mongodb://localhost", "goodWave", None)
    client.close.assert_called_once_with()
    client.get_database.assert_not_called()


def test_client_creation_failure_raises():
    with mock.patch("pymongo.MongoClient", side_effect=ConfigurationError("bad")):
        with pytest.raises(DatabaseConnectionError):
            connect("mongodb://localhost", "goodWave")


def test_invalid_uri_raises():
    with pytest.raises(DatabaseConnectionError):
        connect("not-a-mongodb-uri", "goodWave")