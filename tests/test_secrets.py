"""
Tests for the hardcoded secret scanner.
"""

import pytest

from stackaudit.stages.secrets import SecretMatch, SecretScanner

KEYWORDS = ["password", "secret", "key", "token", "api_key"]


@pytest.fixture
def scanner():
    return SecretScanner(KEYWORDS, exclusions=["example", "template"])


class TestMatchesLine:
    """Tests for the per-line decision."""

    @pytest.mark.parametrize("line", [
        "password=123",
        'DB_PASSWORD = "hunter2"',
        "JWT_SECRET: str = 'abc'",
        "headers = {'Authorization': token}",
        "API_KEY=sk-live",
        "monkey = 1",
    ])
    def test_flagged(self, scanner, line):
        assert scanner.matches_line(line, "app/config.py")

    @pytest.mark.parametrize("line", [
        "password_example=123",
        "secret_template = 'x'",
        "import os",
        "",
    ])
    def test_not_flagged(self, scanner, line):
        assert not scanner.matches_line(line, "app/config.py")

    def test_placeholder_in_path(self, scanner):
        """Test that the exclusion applies to the whole path:line record."""
        assert not scanner.matches_line("password = 'x'", "examples/settings.py")
        assert not scanner.matches_line("password = 'x'", "template_config.py")

    def test_placeholder_is_case_sensitive(self, scanner):
        assert scanner.matches_line("PASSWORD_EXAMPLE=1", "config.py")

    def test_keyword_is_case_insensitive(self, scanner):
        assert scanner.is_candidate("TOKEN=abc")
        assert scanner.is_candidate("Secret")

    def test_empty_keywords_rejected(self):
        with pytest.raises(ValueError):
            SecretScanner([])


class TestWantsFile:
    """Tests for file filtering."""

    def test_python_files_only(self, scanner, temp_dir):
        assert scanner.wants_file(temp_dir / "settings.py")
        assert not scanner.wants_file(temp_dir / "settings.txt")
        assert not scanner.wants_file(temp_dir / "bandit-report.json")
        assert not scanner.wants_file(temp_dir / "server.log")

    def test_excluded_suffix_wins(self, temp_dir):
        scanner = SecretScanner(KEYWORDS, extensions=[".py", ".json"])
        assert not scanner.wants_file(temp_dir / "creds.json")

    def test_no_extension_filter(self, temp_dir):
        scanner = SecretScanner(KEYWORDS, extensions=[])
        assert scanner.wants_file(temp_dir / "Dockerfile")
        assert not scanner.wants_file(temp_dir / "audit.log")


class TestScan:
    """Tests for scanning a directory tree."""

    def test_finds_secret(self, scanner, temp_dir):
        (temp_dir / "config.py").write_text("import os\n\npassword=123\n")

        matches = scanner.scan(temp_dir)

        assert matches == [SecretMatch("config.py", 3, "password=123")]
        assert matches[0].to_string() == "config.py:3: password=123"
        assert matches[0].record == "config.py:password=123"

    def test_skips_virtualenvs(self, scanner, temp_dir):
        for name in ("venv", ".venv"):
            site = temp_dir / name / "lib" / "site-packages"
            site.mkdir(parents=True)
            (site / "requests_auth.py").write_text("token = 'abc'\n")
        (temp_dir / "app.py").write_text("SECRET_KEY = 'changeme'\n")

        matches = scanner.scan(temp_dir, excluded_dirs=["venv", ".venv"])

        assert [m.path for m in matches] == ["app.py"]

    def test_nested_excluded_dirs(self, scanner, temp_dir):
        nested = temp_dir / "services" / "venv"
        nested.mkdir(parents=True)
        (nested / "x.py").write_text("password = 1\n")

        assert scanner.scan(temp_dir, excluded_dirs=["venv"]) == []

    def test_relative_posix_paths(self, scanner, temp_dir):
        package = temp_dir / "app" / "core"
        package.mkdir(parents=True)
        (package / "auth.py").write_text("def check(password):\n    pass\n")

        matches = scanner.scan(temp_dir)

        assert [m.path for m in matches] == ["app/core/auth.py"]

    def test_sorted_order(self, scanner, temp_dir):
        (temp_dir / "b.py").write_text("token = 1\n")
        (temp_dir / "a.py").write_text("token = 1\nkey = 2\n")

        matches = scanner.scan(temp_dir)

        assert [(m.path, m.line_number) for m in matches] == [
            ("a.py", 1), ("a.py", 2), ("b.py", 1),
        ]

    def test_undecodable_bytes(self, scanner, temp_dir):
        (temp_dir / "blob.py").write_bytes(b"\xff\xfe password = 1\n")

        matches = scanner.scan(temp_dir)

        assert len(matches) == 1

    def test_clean_tree(self, scanner, temp_dir):
        (temp_dir / "main.py").write_text("print('hello')\n")
        assert scanner.scan(temp_dir) == []
