"""
Tests for env file scaffolding.
"""

import tempfile
from pathlib import Path

import pytest

from envstore.parser import parse_file
from envstore.scaffold import STUB_PATH, compile_stub, write_env_file


class TestCompileStub:
    """Tests for compile_stub."""

    def test_fills_app_env(self):
        result = compile_stub("APP_NAME=x\nAPP_ENV=\nAPP_DEBUG=false\n", "prod")

        assert result == "APP_NAME=x\nAPP_ENV=prod\nAPP_DEBUG=false\n"

    def test_replaces_existing_value(self):
        assert compile_stub("APP_ENV=dev\n", "stag") == "APP_ENV=stag\n"

    def test_adds_missing_line(self):
        assert compile_stub("APP_NAME=x\n", "dev") == "APP_ENV=dev\nAPP_NAME=x\n"

    def test_unknown_environment(self):
        with pytest.raises(ValueError):
            compile_stub("APP_ENV=\n", "qa")


class TestWriteEnvFile:
    """Tests for write_env_file."""

    @pytest.fixture
    def temp_dir(self):
        """Create a temporary directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def test_packaged_stub_exists(self):
        assert STUB_PATH.is_file()

    def test_write_from_packaged_stub(self, temp_dir):
        assert write_env_file(temp_dir / ".env", "dev") is True

        values = parse_file(temp_dir)
        assert values["APP_ENV"] == "dev"
        assert values["APP_HOST"] == "127.0.0.1"
        assert values["APP_PORT"] == "8000"

    def test_existing_file_is_kept(self, temp_dir):
        env_path = temp_dir / ".env"
        env_path.write_text("APP_ENV=prod\n")

        assert write_env_file(env_path, "dev") is False
        assert env_path.read_text() == "APP_ENV=prod\n"

    def test_force_overwrites(self, temp_dir):
        env_path = temp_dir / ".env"
        env_path.write_text("APP_ENV=prod\n")

        assert write_env_file(env_path, "stag", force=True) is True
        assert "APP_ENV=stag" in env_path.read_text()

    def test_custom_stub(self, temp_dir):
        stub = temp_dir / "custom.stub"
        stub.write_text("APP_ENV=\nCUSTOM=1\n")

        write_env_file(temp_dir / "out" / ".env", "prod", stub_path=stub)

        assert (temp_dir / "out" / ".env").read_text() == "APP_ENV=prod\nCUSTOM=1\n"
