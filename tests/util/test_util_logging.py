import io
import json
import logging
import unittest
from contextlib import redirect_stderr
from unittest.mock import patch

from bsnmgr.session import gate
from bsnmgr.util.logging import get_logger, setup_logging


class TestUtilLogging(unittest.TestCase):
    def tearDown(self) -> None:
        logging.getLogger().handlers.clear()

    def test_json_logs_go_to_stderr(self) -> None:
        err = io.StringIO()
        with redirect_stderr(err):
            setup_logging("INFO", "json")
            get_logger("bsnmgr.test").info("network_resolved", network_id=3)

        record = json.loads(err.getvalue().strip().splitlines()[-1])
        self.assertEqual(record["event"], "network_resolved")
        self.assertEqual(record["network_id"], 3)
        self.assertEqual(record["level"], "info")

    def test_module_loggers_use_configured_pipeline(self) -> None:
        err = io.StringIO()
        with redirect_stderr(err):
            setup_logging("INFO", "json")
            gate.logger.info("confirmation_accepted", action="delete")

        record = json.loads(err.getvalue().strip().splitlines()[-1])
        self.assertEqual(record["logger"], "bsnmgr.session.gate")
        self.assertEqual(record["action"], "delete")

    def test_level_from_environment(self) -> None:
        err = io.StringIO()
        with patch.dict("os.environ", {"BS_LOG_LEVEL": "error"}):
            with redirect_stderr(err):
                setup_logging(fmt="json")
                get_logger("bsnmgr.test").warning("hidden")
                get_logger("bsnmgr.test").error("shown")

        text = err.getvalue()
        self.assertNotIn("hidden", text)
        self.assertIn("shown", text)

    def test_unknown_values_fall_back_to_defaults(self) -> None:
        with redirect_stderr(io.StringIO()):
            setup_logging("LOUD", "xml")
        self.assertEqual(logging.getLogger().level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
