"""Allow ``python -m roster``."""

from .cli import app

if __name__ == "__main__":
    app()
