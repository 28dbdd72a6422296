"""Tests for the operational application logger."""

from __future__ import annotations

import logging

from chaosgarden.src.app_logger import ApplicationLogger


class TestApplicationLogger:
    def test_message_includes_operation_and_metadata(self, caplog):
        log = ApplicationLogger("chaosgarden.test")
        with caplog.at_level(logging.INFO, logger="chaosgarden.test"):
            log.info("run_tick", "tick complete", tick=4, living=12)

        [record] = caplog.records
        assert record.getMessage() == "[run_tick] tick complete (tick=4 living=12)"
        assert record.operation == "run_tick"
        assert record.metadata == {"tick": 4, "living": 12}

    def test_message_without_metadata(self, caplog):
        log = ApplicationLogger("chaosgarden.test")
        with caplog.at_level(logging.INFO, logger="chaosgarden.test"):
            log.warn("setup", "no seed given")
        assert caplog.records[0].getMessage() == "[setup] no seed given"

    def test_levels(self, caplog):
        log = ApplicationLogger("chaosgarden.test")
        with caplog.at_level(logging.DEBUG, logger="chaosgarden.test"):
            log.debug("op", "d")
            log.info("op", "i")
            log.warn("op", "w")
            log.error("op", "e")
            log.fatal("op", "f")
        assert [r.levelno for r in caplog.records] == [
            logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL,
        ]

    def test_disabled_levels_are_skipped(self, caplog):
        log = ApplicationLogger("chaosgarden.test")
        with caplog.at_level(logging.WARNING, logger="chaosgarden.test"):
            log.debug("op", "hidden", big=object())
            log.info("op", "hidden")
        assert caplog.records == []

    def test_wraps_an_existing_logger(self, caplog):
        inner = logging.getLogger("chaosgarden.custom")
        with caplog.at_level(logging.ERROR, logger="chaosgarden.custom"):
            ApplicationLogger(logger=inner).error("flush", "failed", path="x")
        assert caplog.records[0].name == "chaosgarden.custom"
