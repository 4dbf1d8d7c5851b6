#!/usr/bin/env python3
"""Pytest configuration for NetworkCheck tests."""

import pytest
from lib.config import reset_config


@pytest.fixture(autouse=True, scope="function")
def isolate_config():
    """Ensure the config singleton is reloaded for each test"""
    reset_config()
    yield
    reset_config()
