"""
Tests for logging setup and private-key redaction.
"""

import json
import logging
import tempfile
import unittest
from pathlib import Path

from rkeys_core.config import LoggingConfig
from rkeys_core.logging_config import (
    REDACTED,
    RedactKeysFilter,
    setup_logging,
    setup_logging_from_config,
)
from rkeys_core.wallet import Wallet


def _record(msg, *args):
    return logging.LogRecord("rkeys.test", logging.INFO, __file__, 1, msg, args, None)


class TestRedactKeysFilter(unittest.TestCase):

    def setUp(self):
        self.filter = RedactKeysFilter()
        self.wallet = Wallet.create()

    def test_private_key_hex_redacted(self):
        rec = _record(f"key is {self.wallet.private_key_hex}")
        self.assertTrue(self.filter.filter(rec))
        self.assertNotIn(self.wallet.private_key_hex, rec.getMessage())
        self.assertIn(REDACTED, rec.getMessage())

    def test_args_are_scrubbed(self):
        rec = _record("key is %s", self.wallet.private_key.hex())
        self.filter.filter(rec)
        self.assertNotIn(self.wallet.private_key.hex(), rec.getMessage())
        self.assertIsNone(rec.args)

    def test_tagged_key_redacted(self):
        tagged = "ED" + "AB" * 32
        rec = _record(f"[{tagged}]")
        self.filter.filter(rec)
        self.assertEqual(rec.getMessage(), f"[{REDACTED}]")

    def test_addresses_pass_through(self):
        msg = f"signed for {self.wallet.address}"
        rec = _record(msg)
        self.filter.filter(rec)
        self.assertEqual(rec.getMessage(), msg)


class TestSetupLogging(unittest.TestCase):

    def tearDown(self):
        log = logging.getLogger("rkeys")
        for handler in list(log.handlers):
            log.removeHandler(handler)
            handler.close()
        log.propagate = True
        log.setLevel(logging.NOTSET)

    def test_returns_package_logger(self):
        log = setup_logging(level="warning")
        self.assertEqual(log.name, "rkeys")
        self.assertEqual(log.level, logging.WARNING)
        self.assertFalse(log.propagate)

    def test_from_config_section(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = LoggingConfig(level="ERROR", format="json", file=str(Path(tmp) / "rkeys.log"))
            log = setup_logging_from_config(cfg)
            self.assertEqual(log.level, logging.ERROR)
            self.assertEqual(len(log.handlers), 2)
            for handler in list(log.handlers):
                log.removeHandler(handler)
                handler.close()

    def test_no_duplicate_handlers(self):
        setup_logging()
        log = setup_logging()
        self.assertEqual(len(log.handlers), 1)

    def test_every_handler_redacts(self):
        with tempfile.TemporaryDirectory() as tmp:
            log = setup_logging(log_file=str(Path(tmp) / "rkeys.log"))
            self.assertEqual(len(log.handlers), 2)
            for handler in log.handlers:
                self.assertTrue(any(isinstance(f, RedactKeysFilter) for f in handler.filters))
            for handler in list(log.handlers):
                log.removeHandler(handler)
                handler.close()

    def test_file_output_is_redacted_json(self):
        secret = Wallet.create().private_key_hex
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "logs" / "rkeys.log"
            setup_logging(level="DEBUG", fmt="json", log_file=str(path))
            logging.getLogger("rkeys.wallet").info(f"loaded {secret}")
            for handler in logging.getLogger("rkeys").handlers:
                handler.flush()
            lines = path.read_text(encoding="utf-8").splitlines()
            for handler in list(logging.getLogger("rkeys").handlers):
                logging.getLogger("rkeys").removeHandler(handler)
                handler.close()
        self.assertEqual(len(lines), 1)
        entry = json.loads(lines[0])
        self.assertEqual(entry["logger"], "rkeys.wallet")
        self.assertEqual(entry["level"], "INFO")
        self.assertNotIn(secret, entry["msg"])
        self.assertIn(REDACTED, entry["msg"])


if __name__ == "__main__":
    unittest.main()
