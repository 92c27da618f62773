import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

from klipperconf.document import ConfigDocument, apply_to_file, read_document, write_document
from klipperconf.errors import IOFailure


class TestConfigDocument(unittest.TestCase):

    def test_round_trip(self):
        for text in ["", "\n", "[a]\n", "[a]\nx: 1", "[a]\n\n\nx: 1\n", "a\r\nb\r\n"]:
            self.assertEqual(ConfigDocument.from_text(text).text, text)

    def test_lines(self):
        document = ConfigDocument.from_text("[a]\nx: 1\n")
        self.assertEqual(document.lines, ("[a]", "x: 1"))
        self.assertTrue(document.trailing_newline)
        self.assertEqual(len(document), 2)
        self.assertEqual(list(document), ["[a]", "x: 1"])

    def test_empty(self):
        document = ConfigDocument.from_text("")
        self.assertEqual(len(document), 0)
        self.assertFalse(document.trailing_newline)
        self.assertEqual(document, ConfigDocument())

    def test_equality(self):
        self.assertEqual(ConfigDocument.from_text("a\n"), ConfigDocument(["a"]))
        self.assertNotEqual(ConfigDocument.from_text("a"), ConfigDocument(["a"]))


class TestFileHelpers(unittest.TestCase):

    def setUp(self):
        self.dir = tempfile.mkdtemp()
        self.path = os.path.join(self.dir, "printer.cfg")

    def tearDown(self):
        shutil.rmtree(self.dir)

    def _write(self, text):
        with open(self.path, "w", encoding="utf-8", newline="") as f:
            f.write(text)

    def _read(self):
        with open(self.path, "r", encoding="utf-8", newline="") as f:
            return f.read()

    def test_read_missing(self):
        with self.assertRaises(IOFailure) as ctx:
            read_document(self.path)
        self.assertEqual(ctx.exception.path, self.path)
        self.assertIsInstance(ctx.exception.__cause__, FileNotFoundError)
        self.assertEqual(read_document(self.path, missing_ok=True), ConfigDocument())

    def test_write_and_read(self):
        write_document(self.path, ConfigDocument.from_text("[a]\nx: 1\n"))
        self.assertEqual(self._read(), "[a]\nx: 1\n")
        self.assertEqual(read_document(self.path).text, "[a]\nx: 1\n")
        self.assertEqual(os.listdir(self.dir), ["printer.cfg"])

    def test_write_keeps_mode(self):
        self._write("old\n")
        os.chmod(self.path, 0o640)
        write_document(self.path, ConfigDocument.from_text("new\n"))
        self.assertEqual(os.stat(self.path).st_mode & 0o777, 0o640)

    def test_failed_write_leaves_original(self):
        self._write("[a]\nold: 1\n")
        with patch("klipperconf.document.os.replace", side_effect=OSError("disk full")):
            with self.assertRaises(IOFailure):
                write_document(self.path, ConfigDocument.from_text("[a]\nnew: 1\n"))
        self.assertEqual(self._read(), "[a]\nold: 1\n")
        # The temp file is cleaned up.
        self.assertEqual(os.listdir(self.dir), ["printer.cfg"])

    def test_write_through_symlink_keeps_link(self):
        target_dir = os.path.join(self.dir, "shared")
        os.makedirs(target_dir)
        target = os.path.join(target_dir, "printer.cfg")
        with open(target, "w", encoding="utf-8") as f:
            f.write("[a]\nold: 1\n")
        os.symlink(target, self.path)

        write_document(self.path, ConfigDocument.from_text("[a]\nnew: 1\n"))

        self.assertTrue(os.path.islink(self.path))
        self.assertEqual(self._read(), "[a]\nnew: 1\n")
        with open(target, "r", encoding="utf-8") as f:
            self.assertEqual(f.read(), "[a]\nnew: 1\n")
        self.assertEqual(sorted(os.listdir(target_dir)), ["printer.cfg"])

    def test_write_into_missing_folder(self):
        with self.assertRaises(IOFailure):
            write_document(os.path.join(self.dir, "nope", "x.cfg"), ConfigDocument.from_text("a\n"))

    def test_apply_to_file_only_writes_on_change(self):
        self._write("[a]\n")
        with patch("klipperconf.document.write_document") as write:
            changed = apply_to_file(self.path, lambda doc: (doc, False))
        self.assertFalse(changed)
        write.assert_not_called()

        changed = apply_to_file(self.path, lambda doc: (ConfigDocument(list(doc) + ["x: 1"]), True))
        self.assertTrue(changed)
        self.assertEqual(self._read(), "[a]\nx: 1\n")


if __name__ == '__main__':
    unittest.main()
