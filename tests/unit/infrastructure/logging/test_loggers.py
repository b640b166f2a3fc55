"""Unit tests for logger implementations.

Tests verify that:
1. ConsoleLogger and NullLogger implement LoggerPort
2. ConsoleLogger respects verbosity and keeps session statistics
3. NullLogger stays silent
"""

from io import StringIO
import unittest

from rich.console import Console

from medform.application.ports.services import LoggerPort
from medform.infrastructure.logging import ConsoleLogger, LogLevel, NullLogger


class TestLoggerPort(unittest.TestCase):
    """Test that logger implementations comply with LoggerPort protocol."""

    def test_console_logger_implements_loggerport(self):
        """ConsoleLogger should implement LoggerPort protocol."""
        self.assertIsInstance(ConsoleLogger(), LoggerPort)

    def test_null_logger_implements_loggerport(self):
        """NullLogger should implement LoggerPort protocol."""
        self.assertIsInstance(NullLogger(), LoggerPort)

    def test_loggerport_has_domain_hooks(self):
        """LoggerPort should define the import and export hooks."""
        required_methods = {
            "log_catalog_loaded",
            "log_mapping_summary",
            "log_import_complete",
            "log_export_complete",
            "log_final_stats",
        }
        protocol_methods = {
            name for name in dir(LoggerPort) if not name.startswith("_")
        }
        self.assertTrue(required_methods.issubset(protocol_methods))


class TestConsoleLogger(unittest.TestCase):
    """Test ConsoleLogger implementation."""

    def setUp(self):
        """Set up test fixtures."""
        self.buffer = StringIO()
        self.console = Console(file=self.buffer, force_terminal=True, width=80)
        self.logger = ConsoleLogger(console=self.console, verbosity=LogLevel.DEBUG)

    def test_initialization(self):
        """Logger should initialize with proper defaults."""
        logger = ConsoleLogger()
        self.assertEqual(logger.verbosity, 0)
        self.assertEqual(logger.get_stats()["imports"], 0)

    def test_success_and_warning(self):
        """Success and warning messages carry their markers."""
        self.logger.success("done")
        self.logger.warning("careful")

        output = self.buffer.getvalue()
        self.assertIn("done", output)
        self.assertIn("careful", output)
        self.assertEqual(self.logger.get_stats()["warnings"], 1)

    def test_error_counted(self):
        self.logger.error("broken")

        self.assertIn("broken", self.buffer.getvalue())
        self.assertEqual(self.logger.get_stats()["errors"], 1)

    def test_verbose_hidden_at_normal_level(self):
        """Verbose and debug output requires a higher verbosity."""
        logger = ConsoleLogger(console=self.console, verbosity=LogLevel.NORMAL)
        logger.verbose("details")
        logger.debug("internals")

        self.assertEqual(self.buffer.getvalue(), "")

    def test_debug_shown_at_debug_level(self):
        self.logger.debug("internals")

        self.assertIn("internals", self.buffer.getvalue())

    def test_info_level(self):
        logger = ConsoleLogger(console=self.console, verbosity=LogLevel.NORMAL)
        logger.info("hidden", level=LogLevel.VERBOSE)
        logger.info("shown")

        output = self.buffer.getvalue()
        self.assertNotIn("hidden", output)
        self.assertIn("shown", output)

    def test_import_stats(self):
        """Import hooks accumulate mapped values and findings."""
        self.logger.log_import_complete(mapped=12, unmapped=2, findings=1)
        self.logger.log_import_complete(mapped=3, unmapped=0, findings=0)

        stats = self.logger.get_stats()
        self.assertEqual(stats["imports"], 2)
        self.assertEqual(stats["fields_mapped"], 15)
        self.assertEqual(stats["findings"], 1)
        output = self.buffer.getvalue()
        self.assertIn("Imported", output)
        self.assertIn("unmapped", output)

    def test_export_and_catalog_stats(self):
        self.logger.log_catalog_loaded("form.json", field_count=20, text_field_count=18)
        self.logger.log_export_complete(destinations=9, interchange=7, unresolved=0)

        stats = self.logger.get_stats()
        self.assertEqual(stats["catalogs_loaded"], 1)
        self.assertEqual(stats["exports"], 1)
        output = self.buffer.getvalue()
        self.assertIn("Loaded", output)
        self.assertIn("fields", output)

    def test_final_stats_verbose_only(self):
        quiet = ConsoleLogger(console=self.console, verbosity=LogLevel.NORMAL)
        quiet.log_final_stats()
        self.assertEqual(self.buffer.getvalue(), "")

        self.logger.log_import_complete(mapped=1, unmapped=0, findings=0)
        self.logger.log_final_stats()
        self.assertIn("Session Statistics", self.buffer.getvalue())

    def test_stats_are_a_copy(self):
        stats = self.logger.get_stats()
        stats["imports"] = 99

        self.assertEqual(self.logger.get_stats()["imports"], 0)


class TestNullLogger(unittest.TestCase):
    """Test NullLogger implementation."""

    def test_all_methods_silent(self):
        logger = NullLogger()
        logger.info("x")
        logger.success("x")
        logger.warning("x")
        logger.error("x")
        logger.debug("x")
        logger.verbose("x")
        logger.log_catalog_loaded("x", field_count=1, text_field_count=1)
        logger.log_mapping_summary(resolved=1, unresolved=0, ambiguous=0)
        logger.log_import_complete(mapped=1, unmapped=0, findings=0)
        logger.log_export_complete(destinations=1, interchange=1, unresolved=0)
        logger.log_final_stats()


if __name__ == "__main__":
    unittest.main()
