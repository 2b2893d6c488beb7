"""
日志适配器测试
"""

import logging

import pytest

from pwt.collection.collection import Collection
from pwt.collection.log import LoggerAdapter, get_logger_adapter


@pytest.fixture
def records():
    logger = logging.getLogger("pwt.collection.collection")
    previous = logger.level
    captured = []

    class Capture(logging.Handler):
        def emit(self, record):
            captured.append(record)

    handler = Capture()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    yield captured
    logger.removeHandler(handler)
    logger.setLevel(previous)


@pytest.fixture
def adapter():
    logger = logging.getLogger("pwt.collection.test")
    previous = logger.level, logger.propagate
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    captured = []

    class Capture(logging.Handler):
        def emit(self, record):
            captured.append(record)

    handler = Capture()
    logger.addHandler(handler)
    yield LoggerAdapter(logger, origin="test"), captured
    logger.removeHandler(handler)
    logger.setLevel(previous[0])
    logger.propagate = previous[1]


def test_swap_rejection_is_logged(records):
    assert not Collection(["a"]).swap_index(0, 5)
    messages = [r.getMessage() for r in records]
    assert "swap_index rejected 0 <-> 5" in messages


def test_brace_style_fields(records):
    Collection([{"s": 1}, {"s": 1}]).sort_by({"s": "asc"})
    record = records[-1]
    assert record.size == 2
    assert record.getMessage() == "sort_by snapshot ['s'] over 2 elements"


def test_standard_formatter_output(records):
    handler = logging.Handler()
    handler.setFormatter(logging.Formatter("{levelname} {message}", style="{"))
    Collection([1]).diff(Collection([1, 2]))
    assert handler.format(records[-1]) == "DEBUG diff removed 0, added 1"


def test_percent_and_brace_styles(adapter):
    log, captured = adapter
    log.debug("%s items", 3)
    log.debugf("{count} items from {origin}", count=5)
    assert [r.getMessage() for r in captured] == ["3 items", "5 items from test"]
    assert captured[0].origin == "test"
    assert captured[1].count == 5


def test_unformattable_message_kept(adapter):
    log, captured = adapter
    log.debugf("{missing} items")
    assert captured[-1].getMessage() == "{missing} items"


def test_disabled_level_skips_formatting():
    class Loud:
        def __format__(self, spec):
            raise AssertionError("formatted")

    log = get_logger_adapter("pwt.collection.quiet")
    log.logger.setLevel(logging.WARNING)
    log.debugf("{value}", value=Loud())
