"""Pytest fixtures."""

import pytest


class RecordingLogger:
    """Call logger double that keeps every record."""

    def __init__(self):
        self.records = []

    def log(self, message, *args):
        self.records.append(("log", message, args))

    def warn(self, message, *args):
        self.records.append(("warn", message, args))

    def error(self, message, *args):
        self.records.append(("error", message, args))

    def messages(self, level):
        return [message for lvl, message, _ in self.records if lvl == level]


@pytest.fixture
def call_logger():
    return RecordingLogger()
