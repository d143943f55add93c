"""
Tests for the MongoDB connection module and model registration

No server is needed: MongoClient is lazy and every call that would reach
the network is patched.
"""
import logging
from unittest.mock import MagicMock, patch

import pytest
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from shop_api.core import database
from shop_api.core.health import health_check
from shop_api.models import MongoModel, register_models, registered_models


@pytest.fixture(autouse=True)
def fresh_client():
    """Each test starts without a cached client"""
    database._client = None
    yield
    database._client = None


class TestMongoClient:

    def test_client_is_reused(self):
        assert database.get_client() is database.get_client()

    def test_command_logging_outside_production(self):
        client = database.get_client()

        listeners = client.options.event_listeners
        assert any(isinstance(listener, database.CommandLogger) for listener in listeners)

    def test_no_command_logging_in_production(self, production):
        client = database.get_client()

        assert not any(isinstance(listener, database.CommandLogger) for listener in client.options.event_listeners)

    def test_database_from_url(self, monkeypatch):
        monkeypatch.setattr(database.settings, "MONGODB_URL", "mongodb://localhost:27017/shop_test")
        monkeypatch.setattr(database.settings, "MONGODB_DATABASE", None)

        assert database.get_database().name == "shop_test"

    def test_database_default_name(self, monkeypatch):
        monkeypatch.setattr(database.settings, "MONGODB_URL", "mongodb://localhost:27017")
        monkeypatch.setattr(database.settings, "MONGODB_DATABASE", None)

        assert database.get_database().name == database.DEFAULT_DATABASE

    def test_database_override(self, monkeypatch):
        monkeypatch.setattr(database.settings, "MONGODB_DATABASE", "shop_staging")

        assert database.get_database().name == "shop_staging"

    def test_close_resets_client(self):
        first = database.get_client()
        database.close()

        assert database._client is None
        assert database.get_client() is not first


class TestConnect:

    @patch("shop_api.core.database.get_client")
    def test_connected(self, mock_get_client, caplog):
        with caplog.at_level(logging.INFO, logger="shop_api.core.database"):
            assert database.connect() is True

        mock_get_client.return_value.admin.command.assert_called_once_with("ping")
        assert "MongoDB connected!" in caplog.text

    @patch("shop_api.core.database.get_client")
    def test_connection_error_is_logged_not_raised(self, mock_get_client, caplog):
        mock_get_client.return_value.admin.command.side_effect = ServerSelectionTimeoutError("localhost:27017: refused")

        with caplog.at_level(logging.ERROR, logger="shop_api.core.database"):
            assert database.connect() is False

        assert "MongoDB connection error. Please make sure MongoDB is running." in caplog.text

    @patch("shop_api.core.database.get_client")
    def test_ping(self, mock_get_client):
        assert database.ping() is True

        mock_get_client.return_value.admin.command.side_effect = ServerSelectionTimeoutError("down")
        assert database.ping() is False

    @patch("shop_api.core.health.database.ping", return_value=True)
    def test_health_check_uses_ping(self, mock_ping):
        assert health_check() is True
        mock_ping.assert_called_once()


class TestModels:

    def test_all_collections_registered(self):
        assert {
            "product_tags",
            "order_tags",
            "users",
            "orders",
            "products",
            "related_products",
            "seller_process_results",
            "inventories",
            "customer_addresses",
            "blog_categories",
            "redirect_configs",
            "settings",
        } <= set(registered_models())

    def test_collection_name_required(self):
        with pytest.raises(TypeError):
            class Nameless(MongoModel):
                pass

    def test_duplicate_collection_rejected(self):
        with pytest.raises(ValueError, match="already registered"):
            class OtherOrders(MongoModel):
                __collection__ = "orders"

    def test_register_creates_indexes(self):
        db = MagicMock()

        results = register_models(db)

        assert all(results.values())
        db["orders"].create_indexes.assert_called()

    def test_register_reports_failures(self):
        db = MagicMock()
        db.__getitem__.return_value.create_indexes.side_effect = OperationFailure("not authorized")

        results = register_models(db)

        assert not any(results.values())
