"""Shared pytest configuration for the scaffolder test suite."""

pytest_plugins = ["scaffolder.testing.conftest"]
