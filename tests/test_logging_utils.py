import logging
import unittest

from utils import logging_utils
from utils.logging_utils import build_logging_config, get_tagged_logger, mask_url_secrets


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        self.records.append(record)


class TestLoggingUtils(unittest.TestCase):
    def test_build_logging_config_splits_stdout_and_stderr(self):
        cfg = build_logging_config(job_name="aether_test")
        self.assertEqual(set(cfg["handlers"]), {"stdout", "stderr"})
        self.assertEqual(cfg["handlers"]["stderr"]["level"], "WARNING")
        self.assertIn("stdout_max_info", cfg["handlers"]["stdout"]["filters"])
        self.assertEqual(cfg["filters"]["job_name"]["job_name"], "aether_test")

    def test_get_tagged_logger_injects_tag(self):
        handler = _ListHandler()
        logger = get_tagged_logger("aether.historical", tag="historical")
        base_logger = logger.logger
        base_logger.setLevel(logging.DEBUG)
        base_logger.addHandler(handler)
        base_logger.propagate = False
        try:
            logger.info("window resolved")
            self.assertEqual(handler.records[-1].tag, "historical")
        finally:
            base_logger.removeHandler(handler)
            base_logger.propagate = True

    def test_default_tag_is_last_name_segment(self):
        logger = get_tagged_logger("aether.data_sources.http")
        self.assertEqual(logger.extra["tag"], "http")

    def test_max_level_filter_blocks_warnings(self):
        f = logging_utils.MaxLevelFilter(logging.INFO)
        info = logging.LogRecord("x", logging.INFO, __file__, 1, "m", None, None)
        warn = logging.LogRecord("x", logging.WARNING, __file__, 1, "m", None, None)
        self.assertTrue(f.filter(info))
        self.assertFalse(f.filter(warn))

    def test_setup_logging_override_applies_filters(self):
        root = logging.getLogger()
        orig_handlers = root.handlers[:]
        orig_level = root.level
        try:
            logging_utils.setup_logging(level="INFO", job_name="aether_test", override_existing=True)
            self.assertTrue(
                any(
                    any(isinstance(f, logging_utils.JobNameFilter) for f in h.filters)
                    for h in root.handlers
                )
            )
        finally:
            root.handlers = orig_handlers
            root.setLevel(orig_level)
            logging_utils._CONFIGURED = False


class TestMaskUrlSecrets(unittest.TestCase):
    def test_masks_access_key(self):
        url = "http://api.weatherstack.com/current?access_key=abc123&query=Oslo"
        masked = mask_url_secrets(url)
        self.assertNotIn("abc123", masked)
        self.assertIn("query=Oslo", masked)

    def test_masks_nested_relay_target(self):
        url = "https://relay.example/get?url=http%3A%2F%2Fapi.example%2Fcurrent%3Faccess_key%3Dabc123%26query%3DOslo"
        self.assertNotIn("abc123", mask_url_secrets(url))

    def test_leaves_urls_without_query(self):
        url = "https://archive-api.open-meteo.com/v1/archive"
        self.assertEqual(mask_url_secrets(url), url)


if __name__ == "__main__":
    unittest.main()
