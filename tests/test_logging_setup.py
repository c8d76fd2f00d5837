import logging
import os
import tempfile
import unittest
from logging.handlers import RotatingFileHandler

from signal_grid.logging_setup import setup_logging

class TestLoggingSetup(unittest.TestCase):
    def setUp(self):
        root = logging.getLogger()
        self.saved = (root.level, list(root.handlers))

    def tearDown(self):
        root = logging.getLogger()
        for handler in root.handlers:
            handler.close()
        root.setLevel(self.saved[0])
        root.handlers[:] = self.saved[1]

    def test_console_only(self):
        setup_logging(level="DEBUG", log_file=None)
        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)
        self.assertNotIsInstance(root.handlers[0], RotatingFileHandler)

    def test_rotating_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "grid.log")
            setup_logging(level="INFO", log_file=path)
            root = logging.getLogger()
            file_handlers = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
            self.assertEqual(len(file_handlers), 1)
            self.assertEqual(file_handlers[0].maxBytes, 1_000_000)
            self.assertEqual(file_handlers[0].backupCount, 2)
            logging.getLogger("signal_grid.test").info("tick 1 applied")
            file_handlers[0].flush()
            with open(path) as f:
                self.assertIn("INFO | signal_grid.test | tick 1 applied", f.read())
            for handler in root.handlers:
                handler.close()
            root.handlers.clear()

if __name__ == '__main__':
    unittest.main()
