"""Desktop notifications for files changed by Syncthing peers."""

__version__ = "0.1.0"
