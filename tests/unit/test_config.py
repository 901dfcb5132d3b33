"""RepositoryOptions, option validation and the store registry."""

import os
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from cosmos_linq.config import RepositoryOptions
from cosmos_linq.config_validator import ConfigValidationError, validate_options
from cosmos_linq.stores import get_document_store, register_document_store
from cosmos_linq.stores.cosmos_nosql import CosmosDocumentStore
from cosmos_linq.stores.mock_store import MockDocumentStore


class TestRepositoryOptions:
    def test_defaults(self):
        options = RepositoryOptions(database_id="shop")

        assert options.partition_key_path == "/id"
        assert options.indexing_policy == {"indexingMode": "lazy", "automatic": False}
        assert options.recheck_on_failure is False
        assert not (options.ensure_created or options.drop_database or options.seed_database)

    def test_database_id_is_stripped(self):
        assert RepositoryOptions(database_id="  shop ").database_id == "shop"

    @pytest.mark.parametrize("database_id", ["", "   "])
    def test_empty_database_id_rejected(self, database_id):
        with pytest.raises(ValidationError):
            RepositoryOptions(database_id=database_id)

    def test_frozen(self):
        options = RepositoryOptions(database_id="shop")
        with pytest.raises(ValidationError):
            options.database_id = "other"

    def test_custom_indexing_policy(self):
        options = RepositoryOptions(
            database_id="shop", indexing_mode="consistent", automatic_indexing=True,
        )
        assert options.indexing_policy == {"indexingMode": "consistent", "automatic": True}


class TestFromEnv:
    def test_reads_cosmos_variables(self):
        env = {
            "COSMOS_NOSQL_ENDPOINT": "https://acct.documents.azure.com:443/",
            "COSMOS_NOSQL_DATABASE": "shop",
            "COSMOS_PARTITION_KEY_PATH": "/model/region",
        }
        with patch.dict(os.environ, env, clear=True):
            options = RepositoryOptions.from_env()

        assert options.endpoint == "https://acct.documents.azure.com:443/"
        assert options.database_id == "shop"
        assert options.partition_key_path == "/model/region"

    def test_overrides_win(self):
        with patch.dict(os.environ, {"COSMOS_NOSQL_DATABASE": "shop"}, clear=True):
            options = RepositoryOptions.from_env(database_id="other", seed_database=True)

        assert options.database_id == "other"
        assert options.seed_database

    def test_missing_database_is_an_error(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValidationError):
                RepositoryOptions.from_env()

    def test_env_file(self, tmp_path):
        env_file = tmp_path / "azure_config.env"
        env_file.write_text(
            "COSMOS_NOSQL_DATABASE=from-file\n"
            "COSMOS_NOSQL_CONNECTION_STRING=AccountEndpoint=https://acct.documents.azure.com:443/;AccountKey=abc==;\n"
        )
        with patch.dict(os.environ, {}, clear=True):
            options = RepositoryOptions.from_env(env_file=env_file)

        assert options.database_id == "from-file"
        assert options.connection_string.startswith("AccountEndpoint=https://acct")

    def test_process_environment_beats_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("COSMOS_NOSQL_DATABASE=from-file\n")
        with patch.dict(os.environ, {"COSMOS_NOSQL_DATABASE": "from-process"}, clear=True):
            options = RepositoryOptions.from_env(env_file=env_file)

        assert options.database_id == "from-process"


class TestValidateOptions:
    def test_valid(self):
        validate_options(RepositoryOptions(database_id="shop", endpoint="https://acct/"))

    def test_collects_every_error(self):
        options = RepositoryOptions(
            database_id="bad/name", partition_key_path="id", indexing_mode="eager",
        )

        with pytest.raises(ConfigValidationError) as exc:
            validate_options(options)

        errors = exc.value.errors
        assert len(errors) == 4
        assert any(e.startswith("database_id") for e in errors)
        assert any(e.startswith("partition_key_path") for e in errors)
        assert any(e.startswith("indexing_mode") for e in errors)
        assert any("endpoint" in e for e in errors)

    def test_empty_partition_key_segment(self):
        options = RepositoryOptions(database_id="shop", partition_key_path="/model//region")

        with pytest.raises(ConfigValidationError) as exc:
            validate_options(options, backend_type="mock")
        assert exc.value.errors == ["partition_key_path: '/model//region' has an empty segment"]

    def test_mock_backend_needs_no_endpoint(self):
        validate_options(RepositoryOptions(database_id="shop"), backend_type="mock")

    def test_connection_string_is_enough(self):
        validate_options(
            RepositoryOptions(database_id="shop", connection_string="AccountEndpoint=https://a/;AccountKey=k;"),
        )


class TestGetDocumentStore:
    def test_mock_backend(self):
        store = get_document_store(
            RepositoryOptions(database_id="shop", endpoint="mock://tests"), backend_type="mock",
        )

        assert isinstance(store, MockDocumentStore)
        assert store.identity == "mock://tests"

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown document store"):
            get_document_store(RepositoryOptions(database_id="shop"), backend_type="sqlite")

    def test_invalid_options_rejected_before_construction(self):
        with patch("cosmos_linq.stores.cosmos_nosql.create_cosmos_client") as create:
            with pytest.raises(ConfigValidationError):
                get_document_store(RepositoryOptions(database_id="shop"))
        create.assert_not_called()

    def test_default_backend_is_cosmos(self):
        options = RepositoryOptions(database_id="shop", endpoint="https://acct.documents.azure.com:443/")
        with patch("cosmos_linq.stores.cosmos_nosql.create_cosmos_client", return_value=MagicMock()) as create:
            store = get_document_store(options)

        assert isinstance(store, CosmosDocumentStore)
        assert store.identity == "https://acct.documents.azure.com:443"
        create.assert_called_once_with(options)

    def test_registered_backend(self):
        class FakeStore(MockDocumentStore):
            pass

        register_document_store("fake", FakeStore)
        store = get_document_store(RepositoryOptions(database_id="shop"), backend_type="fake")

        assert isinstance(store, FakeStore)
