"""
Tests for the process-wide store helpers.
"""

import os
from pathlib import Path

import pytest

from envstore import facade
from envstore.config import EnvStoreConfig
from envstore.store import EnvStore, MissingValueError
from envstore.validator import MissingVariableError

FIXTURES = Path(__file__).parent / "fixtures"


class TestFacade:
    """Tests for get_store, env and env_or_fail."""

    def setup_method(self):
        self.environ = dict(os.environ)
        for key in ("DB_USER", "DB_NAME", "PHP_DB_USER"):
            os.environ.pop(key, None)
        facade.enable_putenv()

    def teardown_method(self):
        facade.enable_putenv()
        facade.reset_store()
        os.environ.clear()
        os.environ.update(self.environ)

    @pytest.fixture
    def config(self):
        return EnvStoreConfig(base_path=str(FIXTURES), env_file=".env.test")

    def test_store_is_loaded_once(self, config):
        store = facade.get_store(config)

        assert store.get("DB_USER") == "root"
        assert facade.get_store() is store

    def test_env_helpers(self, config):
        facade.get_store(config)

        assert facade.env("DB_NAME") == "test"
        assert facade.env("MISSING", "fallback") == "fallback"
        assert facade.env_or_fail("TEST_USER") == "root"

        with pytest.raises(MissingValueError):
            facade.env_or_fail("MISSING")

    def test_putenv_enabled_by_default(self, config):
        """Test that variables are copied into os.environ without a prefix."""
        facade.get_store(config)

        assert os.environ["DB_USER"] == "root"
        assert "PHP_DB_USER" not in os.environ

    def test_putenv_with_prefix(self, config):
        facade.enable_putenv("MYAPP_")
        facade.get_store(config)

        assert os.environ["MYAPP_DB_USER"] == "root"
        assert "DB_USER" not in os.environ

    def test_putenv_prefix_is_separate_from_config(self):
        config = EnvStoreConfig(base_path=str(FIXTURES), env_file=".env.test", putenv_prefix="CFG_")

        store = facade.get_store(config)

        assert os.environ["DB_NAME"] == "test"
        assert "CFG_DB_NAME" not in os.environ

        store.copy_vars_to_putenv()
        assert os.environ["CFG_DB_NAME"] == "test"

    def test_disable_putenv(self, config):
        facade.disable_putenv()
        facade.get_store(config)

        assert "DB_USER" not in os.environ

    def test_toggling_putenv_drops_store(self, config):
        store = facade.get_store(config)
        facade.disable_putenv()

        assert facade.get_store(config) is not store

    def test_missing_env_file_gives_empty_store(self):
        config = EnvStoreConfig(base_path=str(FIXTURES), env_file=".env.missing")

        store = facade.get_store(config)

        assert store.all() == {}
        assert facade.env("APP_HOST", "127.0.0.1") == "127.0.0.1"

    def test_missing_required_propagates(self):
        config = EnvStoreConfig(base_path=str(FIXTURES), env_file=".env.test", required=["DB_HOST"])

        with pytest.raises(MissingVariableError):
            facade.get_store(config)

        assert "DB_USER" not in os.environ

    def test_set_store(self):
        store = EnvStore()
        store.set("KEY", "value")
        facade.set_store(store)

        assert facade.env("KEY") == "value"
