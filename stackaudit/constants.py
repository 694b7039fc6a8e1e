"""
Constants for stackaudit.

Default keyword sets, denylists, file names and report boilerplate used
throughout the auditor. Configuration values default to these, so changing a
default here changes it everywhere.

SECURITY NOTE: All regex patterns are pre-compiled. Never construct patterns
from untrusted input.
"""

import re
from typing import Final

# =============================================================================
# PROJECT LAYOUT
# =============================================================================

FRONTEND_DIR: Final[str] = "frontend"
BACKEND_DIR: Final[str] = "backend"
NODE_MODULES_DIR: Final[str] = "node_modules"
GITIGNORE_FILE: Final[str] = ".gitignore"

# Preference order when looking for an existing virtual environment
VENV_DIRS: Final[tuple[str, ...]] = ("venv", ".venv")
REQUIREMENTS_FILE: Final[str] = "requirements.txt"

ENV_FILES: Final[tuple[str, ...]] = (".env", "frontend/.env", "backend/.env")
ENV_EXAMPLE_FILES: Final[tuple[str, ...]] = (
    "frontend/.env.example",
    "backend/.env.example",
)

# =============================================================================
# EXTERNAL TOOLS
# =============================================================================

NODE_EXECUTABLE: Final[str] = "node"
NPM_EXECUTABLE: Final[str] = "npm"
PYTHON_EXECUTABLES: Final[tuple[str, ...]] = ("python3", "python")
GIT_EXECUTABLE: Final[str] = "git"

SECURITY_TOOLS: Final[tuple[str, ...]] = ("bandit", "safety", "semgrep")

DEFAULT_NPM_AUDIT_LEVEL: Final[str] = "moderate"

# Substrings in the resolved npm tree that point at dynamic evaluation or
# unsafe serialization libraries
UNSAFE_PACKAGE_PATTERNS: Final[tuple[str, ...]] = (
    "eval",
    "vm2",
    "serialize-javascript",
)

BANDIT_REPORT_FILE: Final[str] = "bandit-report.json"
SAFETY_REPORT_FILE: Final[str] = "safety-report.json"

# Exit codes reported for commands that never produced one
EXIT_NOT_FOUND: Final[int] = 127
EXIT_NOT_EXECUTABLE: Final[int] = 126
EXIT_TIMEOUT: Final[int] = 124

# =============================================================================
# SECRET DETECTION
# =============================================================================

# Keywords for the textual source scan (matched case-insensitively)
SOURCE_SECRET_KEYWORDS: Final[tuple[str, ...]] = (
    "password",
    "secret",
    "key",
    "token",
    "api_key",
)

# Records containing any of these are treated as placeholders
SECRET_PLACEHOLDER_MARKERS: Final[tuple[str, ...]] = ("example", "template")

SOURCE_EXTENSIONS: Final[tuple[str, ...]] = (".py",)
SCAN_EXCLUDED_SUFFIXES: Final[tuple[str, ...]] = (".json", ".log")

# Keywords searched for in commit messages
HISTORY_SECRET_KEYWORDS: Final[tuple[str, ...]] = (
    "password",
    "secret",
    "key",
    "token",
)
MAX_HISTORY_MATCHES: Final[int] = 5

# Patterns used to redact values before they reach the console or logs

SECRET_PATTERNS: Final[dict[str, re.Pattern[str]]] = {
    "aws_access_key": re.compile(
        r"(?<![A-Z0-9])AKIA[A-Z0-9]{16}(?![A-Z0-9])"
    ),
    "github_token": re.compile(
        r"gh[pousr]_[A-Za-z0-9_]{36,}",
        re.IGNORECASE
    ),
    "generic_secret": re.compile(
        r"(?i)(?:secret|password|passwd|pwd|token|api[_-]?key)[\"']?\s*[:=]\s*[\"']?([^\s\"']{3,})[\"']?"
    ),
    "private_key": re.compile(
        r"-----BEGIN (?:RSA |EC |OPENSSH )?PRIVATE KEY-----"
    ),
    "jwt_token": re.compile(
        r"eyJ[A-Za-z0-9_-]+\.eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+"
    ),
    "slack_token": re.compile(
        r"xox[baprs]-[A-Za-z0-9-]+"
    ),
    "stripe_key": re.compile(
        r"(?:sk|pk)_(?:test|live)_[A-Za-z0-9]{24,}"
    ),
    "npm_token": re.compile(
        r"npm_[A-Za-z0-9]{36}"
    ),
}

# Keywords that indicate a key=value pair worth redacting in log output
SECRET_KEYWORDS: Final[frozenset[str]] = frozenset({
    "password", "passwd", "pwd", "secret", "token", "api_key", "apikey",
    "api-key", "private_key", "access_key", "secret_key", "client_secret",
})

# =============================================================================
# REPORT
# =============================================================================

REPORT_FILENAME_PREFIX: Final[str] = "security-audit-report-"
REPORT_TIMESTAMP_FORMAT: Final[str] = "%Y%m%d-%H%M%S"
REPORT_FILENAME_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^security-audit-report-\d{8}-\d{6}\.md$"
)
# Same layout as `date` on a POSIX shell
REPORT_DATE_FORMAT: Final[str] = "%a %b %d %H:%M:%S %Z %Y"
DEFAULT_PROJECT_NAME: Final[str] = "ReactJS Template"

REPORT_RECOMMENDATIONS: Final[tuple[str, ...]] = (
    "Regularly update dependencies",
    "Use environment variables for secrets",
    "Enable dependabot alerts",
    "Run security audits before deployments",
    "Implement proper authentication and authorization",
    "Use HTTPS in production",
    "Implement rate limiting",
    "Add security headers",
)

REPORT_NEXT_STEPS: Final[tuple[str, ...]] = (
    "Review and fix any identified vulnerabilities",
    "Update dependencies to latest secure versions",
    "Implement missing security measures",
    "Schedule regular security audits",
)

# =============================================================================
# OUTPUT SANITIZATION
# =============================================================================

# Maximum length for values echoed to the console
MAX_REPORT_VALUE_LENGTH: Final[int] = 500

MAX_CONFIG_FILE_BYTES: Final[int] = 1024 * 1024  # 1 MB
