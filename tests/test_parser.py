"""
Tests for the environment file parser.
"""

import tempfile
from pathlib import Path

import pytest

from envstore.parser import (
    EnvFileError,
    EnvFileNotFoundError,
    EnvVariable,
    parse_file,
    parse_lines,
    parse_text,
)

FIXTURES = Path(__file__).parent / "fixtures"


class TestParseLines:
    """Tests for line-level parsing."""

    def test_parse_env_file(self):
        """Test parsing the lines of an environment file."""
        lines = (FIXTURES / ".env.test").read_text().splitlines()
        variables = parse_lines(lines)

        assert [v.key for v in variables] == [
            "DB_USER",
            "DB_PASSWORD",
            "DB_NAME",
            "TEST_USER",
            "TEST_SOME_ARRAY",
        ]
        assert variables[0].value == "root"
        assert variables[0].line_number == 2

    def test_whitespace_around_equals(self):
        """Test that whitespace around the key and value is stripped."""
        variables = parse_lines(["  KEY  =  value  "])

        assert variables[0].key == "KEY"
        assert variables[0].value == "value"
        assert variables[0].raw_line == "  KEY  =  value  "

    def test_quotes_are_kept(self):
        """Test that quoted values are stored as found."""
        variables = parse_lines(['DOUBLE="value in quotes"', "SINGLE='single quoted'"])

        assert variables[0].value == '"value in quotes"'
        assert variables[1].value == "'single quoted'"

    def test_parse_with_empty_lines_and_comments(self):
        """Test that empty lines and comments are skipped."""
        lines = ["# Comment line", "", "   # Indented comment", "KEY=value", "", "# Final"]
        variables = parse_lines(lines)

        assert len(variables) == 1
        assert variables[0].key == "KEY"

    def test_parse_invalid_lines(self):
        """Test that invalid lines are skipped."""
        lines = ["VALID_KEY=value", "INVALID_LINE_NO_EQUALS", "=no_key", "ANOTHER_VALID=value2"]
        variables = parse_lines(lines)

        assert [v.key for v in variables] == ["VALID_KEY", "ANOTHER_VALID"]

    def test_value_may_contain_equals(self):
        """Test that only the first '=' separates key and value."""
        variables = parse_lines(["URL=postgres://u:p@host/db?sslmode=require"])

        assert variables[0].value == "postgres://u:p@host/db?sslmode=require"

    def test_empty_value(self):
        """Test that a key with no value is kept with an empty string."""
        variables = parse_lines(["EMPTY="])

        assert variables[0].key == "EMPTY"
        assert variables[0].value == ""

    def test_keys_with_spaces_are_skipped(self):
        """Test that keys which are not plain identifiers are skipped."""
        variables = parse_lines(["export KEY=value", "FOO BAR=baz", "1ST=x", "APP.NAME=demo", "_X=1"])

        assert [v.key for v in variables] == ["APP.NAME", "_X"]


class TestParseText:
    """Tests for parse_text."""

    def test_later_duplicate_wins_in_place(self):
        """Test that a repeated key takes the later value at its first position."""
        result = parse_text("A=1\nB=2\nA=3\n")

        assert list(result) == ["A", "B"]
        assert result["A"] == "3"


class TestParseFile:
    """Tests for parse_file."""

    @pytest.fixture
    def temp_dir(self):
        """Create a temporary directory for test files."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def test_parse_fixture(self):
        """Test parsing a file by directory and name."""
        result = parse_file(FIXTURES, ".env.test")

        assert result == {
            "DB_USER": "root",
            "DB_PASSWORD": "secret",
            "DB_NAME": "test",
            "TEST_USER": "root",
            "TEST_SOME_ARRAY": "FOO",
        }

    def test_default_file_name(self, temp_dir):
        """Test that .env is read when no file name is given."""
        (temp_dir / ".env").write_text("KEY=value\n")

        assert parse_file(temp_dir) == {"KEY": "value"}

    def test_file_not_found(self, temp_dir):
        """Test that a missing file raises EnvFileNotFoundError."""
        with pytest.raises(EnvFileNotFoundError) as exc_info:
            parse_file(temp_dir, "nonexistent.env")

        assert "not found" in str(exc_info.value).lower()
        assert exc_info.value.path == temp_dir / "nonexistent.env"

    def test_file_not_found_is_builtin_and_env_file_error(self, temp_dir):
        """Test that the not-found error can be caught either way."""
        with pytest.raises(FileNotFoundError):
            parse_file(temp_dir, "nonexistent.env")

        with pytest.raises(EnvFileError):
            parse_file(temp_dir, "nonexistent.env")

    def test_directory_is_not_a_file(self, temp_dir):
        """Test that a directory with the file name counts as missing."""
        (temp_dir / ".env").mkdir()

        with pytest.raises(EnvFileNotFoundError):
            parse_file(temp_dir)

    def test_invalid_utf8(self, temp_dir):
        """Test that undecodable content raises EnvFileError."""
        (temp_dir / ".env").write_bytes(b"KEY=\xff\xfe\n")

        with pytest.raises(EnvFileError):
            parse_file(temp_dir)


class TestEnvVariable:
    """Tests for the EnvVariable dataclass."""

    def test_create_env_variable(self):
        """Test creating an EnvVariable."""
        var = EnvVariable(key="TEST", value="value", line_number=1, raw_line="TEST=value")

        assert var.key == "TEST"
        assert var.value == "value"
        assert var.line_number == 1
        assert var.raw_line == "TEST=value"
