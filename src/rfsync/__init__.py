"""rfml-sync: keep local RFML spec files and remote tests in step."""

__version__ = "1.0.0"
