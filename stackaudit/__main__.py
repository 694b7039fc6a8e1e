"""
Entry point for running the auditor as a module.

Usage:
    python -m stackaudit --help
    python -m stackaudit /path/to/project
"""

from stackaudit.cli import main

if __name__ == "__main__":
    main()
