import logging
import unittest
import tempfile
import os
from unittest.mock import patch

from ghosttrails.logging import setup_logging, get_logger


class TestLogging(unittest.TestCase):

    def tearDown(self):
        # leave a sane stdout handler behind for the rest of the suite
        setup_logging("INFO")

    def test_setup_logging_stdout(self):
        """Verify that setup_logging configures logging to stdout correctly."""
        setup_logging("DEBUG")
        logger = logging.getLogger()
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(len(logger.handlers), 1)
        self.assertIsInstance(logger.handlers[0], logging.StreamHandler)

    def test_setup_logging_unknown_level_falls_back_to_info(self):
        setup_logging("NOT_A_LEVEL")
        self.assertEqual(logging.getLogger().level, logging.INFO)

    def test_setup_logging_is_idempotent(self):
        setup_logging("INFO")
        setup_logging("INFO")
        self.assertEqual(len(logging.getLogger().handlers), 1)

    def test_setup_logging_file(self):
        """Verify that setup_logging opens the log file in append mode."""
        with patch("logging.FileHandler") as mock_file_handler:
            setup_logging("INFO", log_file="ghosttrails-test.log")
            root = logging.getLogger()
            self.assertEqual(root.level, logging.INFO)
            mock_file_handler.assert_called_once_with("ghosttrails-test.log", mode="a")
            # don't leave the mock attached to the root logger
            root.removeHandler(mock_file_handler.return_value)

    def test_get_logger(self):
        """Verify that get_logger returns a logger and that it logs messages."""
        logger = get_logger("test_logger")
        self.assertIsInstance(logger, logging.Logger)

        with self.assertLogs("test_logger", level="INFO") as cm:
            logger.info("This is an info message.")
            logger.warning("This is a warning message.")
        self.assertEqual(len(cm.output), 2)
        self.assertIn("INFO:test_logger:This is an info message.", cm.output[0])
        self.assertIn("WARNING:test_logger:This is a warning message.", cm.output[1])

    def test_log_to_file(self):
        """Verify that log messages are written to the specified file."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            log_file_path = os.path.join(tmp_dir, "app.log")
            setup_logging("INFO", log_file=log_file_path)

            logger = get_logger("file_test_logger")
            test_message = "This is a test message for file logging."
            logger.info(test_message)

            # switching back closes the file handler, flushing it
            setup_logging("INFO")

            with open(log_file_path, "r") as f:
                log_contents = f.read()

            self.assertIn(test_message, log_contents)
            self.assertIn("INFO", log_contents)
            self.assertIn("file_test_logger", log_contents)


if __name__ == "__main__":
    unittest.main()
