"""Allow running as ``python -m release_changelog``."""

from release_changelog.cli.app import app

if __name__ == "__main__":
    app()
