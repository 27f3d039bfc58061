"""Shared test isolation: drop logger handlers bound to closed capture streams."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def _reset_sash_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("sash")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
