from __future__ import annotations

import pytest
from loguru import logger


@pytest.fixture
def log_messages():
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(str(message).rstrip("\n")),
        level="TRACE",
        format="{level}|{message}",
    )
    yield messages
    logger.remove(handler_id)
