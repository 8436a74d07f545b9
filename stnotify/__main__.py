"""Allow ``python -m stnotify``."""

from .main import run

if __name__ == "__main__":
    run()
