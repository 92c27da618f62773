import unittest

from klipperconf.document import ConfigDocument
from klipperconf.errors import InvalidInput
from klipperconf.sections import append_section_if_missing, has_section

TIMELAPSE_BLOCK = "[timelapse]\nframe_path: /tmp/timelapse/\n"


def doc(text):
    return ConfigDocument.from_text(text)


class TestHasSection(unittest.TestCase):

    def test_empty_document(self):
        self.assertFalse(has_section(ConfigDocument(), "timelapse"))

    def test_exact_header(self):
        self.assertTrue(has_section(doc("[server]\nport: 7125\n[timelapse]\n"), "timelapse"))

    def test_header_with_whitespace_and_comment(self):
        self.assertTrue(has_section(doc("  [timelapse]   # added by hand\n"), "timelapse"))
        self.assertTrue(has_section(doc("[timelapse];note\n"), "timelapse"))

    def test_multi_word_name(self):
        document = doc("[update_manager timelapse]\ntype: git_repo\n")
        self.assertTrue(has_section(document, "update_manager timelapse"))
        self.assertFalse(has_section(document, "timelapse"))

    def test_no_prefix_or_case_insensitive_match(self):
        document = doc("[timelapse_extra]\n[Timelapse]\n")
        self.assertFalse(has_section(document, "timelapse"))

    def test_trailing_text_that_is_not_a_comment(self):
        self.assertFalse(has_section(doc("[timelapse] garbage\n"), "timelapse"))

    def test_header_inside_comment_is_ignored(self):
        self.assertFalse(has_section(doc("# [timelapse]\n"), "timelapse"))

    def test_invalid_names(self):
        for name in ["", "   ", "a]b", "a\nb"]:
            with self.assertRaises(InvalidInput):
                has_section(ConfigDocument(), name)


class TestAppendSectionIfMissing(unittest.TestCase):

    def test_empty_document(self):
        result, changed = append_section_if_missing(ConfigDocument(), "timelapse", TIMELAPSE_BLOCK)
        self.assertTrue(changed)
        self.assertEqual(result.text, "[timelapse]\nframe_path: /tmp/timelapse/\n")

    def test_already_present_is_noop(self):
        original = doc("[server]\nport: 7125\n\n[timelapse]\n")
        with self.assertLogs("klipperconf.sections", level="INFO") as logs:
            result, changed = append_section_if_missing(original, "timelapse", TIMELAPSE_BLOCK)
        self.assertFalse(changed)
        self.assertIs(result, original)
        self.assertIn("already present", logs.output[0])

    def test_adds_missing_newline_once(self):
        result, _ = append_section_if_missing(doc("[server]\nport: 7125"), "timelapse", TIMELAPSE_BLOCK)
        self.assertEqual(result.text, "[server]\nport: 7125\n" + TIMELAPSE_BLOCK)

    def test_does_not_add_blank_lines(self):
        result, _ = append_section_if_missing(doc("[server]\nport: 7125\n"), "timelapse", TIMELAPSE_BLOCK)
        self.assertEqual(result.text, "[server]\nport: 7125\n" + TIMELAPSE_BLOCK)

    def test_block_without_trailing_newline_gets_one(self):
        result, _ = append_section_if_missing(ConfigDocument(), "timelapse", "[timelapse]")
        self.assertEqual(result.text, "[timelapse]\n")

    def test_idempotent(self):
        base = doc("[server]\nport: 7125")
        once, _ = append_section_if_missing(base, "timelapse", TIMELAPSE_BLOCK)
        twice, changed = append_section_if_missing(once, "timelapse", TIMELAPSE_BLOCK)
        self.assertFalse(changed)
        self.assertEqual(once, twice)
        self.assertTrue(has_section(twice, "timelapse"))
        self.assertEqual(twice.text.count("[timelapse]"), 1)

    def test_block_with_markers(self):
        block = "# --- BEGIN: timelapse ---\n[timelapse]\n# --- END: timelapse ---\n"
        result, changed = append_section_if_missing(doc("[server]\n"), "timelapse", block)
        self.assertTrue(changed)
        self.assertTrue(has_section(result, "timelapse"))

    def test_block_must_declare_section(self):
        with self.assertRaises(InvalidInput):
            append_section_if_missing(ConfigDocument(), "timelapse", "[other]\n")
        with self.assertRaises(InvalidInput):
            append_section_if_missing(ConfigDocument(), "timelapse", "  \n")


if __name__ == '__main__':
    unittest.main()
