from typing import Iterator

import pytest
from loguru import logger


@pytest.fixture
def caplog_loguru() -> Iterator[list[str]]:
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    try:
        yield messages
    finally:
        logger.remove(handler_id)
