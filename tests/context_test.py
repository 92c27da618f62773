import configparser
import os
import shutil
import tempfile
import unittest

from provisioner.Config import Config
from provisioner.Context import Context


class TestContext(unittest.TestCase):

    def setUp(self):
        self.home = tempfile.mkdtemp()
        self.context = Context.setup(self.home)

    def tearDown(self):
        shutil.rmtree(self.home)

    def test_default_paths(self):
        self.assertEqual(self.context.printer_data_folder, os.path.join(self.home, "printer_data"))
        self.assertEqual(self.context.moonraker_config_file_path, os.path.join(self.home, "printer_data", "config", "moonraker.conf"))
        self.assertEqual(self.context.printer_cfg_file_path, os.path.join(self.home, "printer_data", "config", "printer.cfg"))
        self.assertEqual(self.context.beacon_cfg_file_path, os.path.join(self.home, "printer_data", "config", "options", "probe", "beacon.cfg"))
        self.assertEqual(self.context.klippy_env_pip, os.path.join(self.home, "klippy-env", "bin", "pip"))
        self.assertEqual(self.context.git_root, os.path.join(self.home, "git"))

    def test_unset_property_raises(self):
        with self.assertRaises(AttributeError):
            _ = Context().user_home

    def test_parse_flags(self):
        self.context.parse_args(["-skippackages", "--skipRepos", "-skipshaketune", "-h", ""])
        self.assertTrue(self.context.skip_packages)
        self.assertTrue(self.context.skip_repos)
        self.assertTrue(self.context.skip_shaketune)
        self.assertTrue(self.context.show_help)
        self.assertFalse(self.context.debug)

    def test_parse_config_path(self):
        self.context.parse_args(["/tmp/provisioner.conf"])
        self.assertEqual(self.context.config_file_path, "/tmp/provisioner.conf")
        with self.assertRaises(AttributeError):
            self.context.parse_args(["/tmp/other.conf"])

    def test_unknown_flag(self):
        with self.assertRaises(AttributeError):
            self.context.parse_args(["-bogus"])

    def test_validate(self):
        self.context.validate()
        self.context.config_file_path = os.path.join(self.home, "missing.conf")
        with self.assertRaises(ValueError):
            self.context.validate()

    def test_config_overrides(self):
        config = configparser.ConfigParser()
        config.read_string("[paths]\nprinter_data: /srv/printer_data\n\n[beacon]\nserial: /dev/beacon\nx_offset: -15\n")
        Config().apply(config, self.context)

        self.assertEqual(self.context.printer_data_folder, "/srv/printer_data")
        self.assertEqual(self.context.printer_cfg_file_path, "/srv/printer_data/config/printer.cfg")
        self.assertEqual(self.context.git_root, os.path.join(self.home, "git"))
        self.assertEqual(self.context.beacon_serial, "/dev/beacon")
        self.assertEqual(self.context.beacon_x_offset, "-15")
        self.assertEqual(self.context.beacon_y_offset, "0")

    def test_config_file(self):
        path = os.path.join(self.home, "provisioner.conf")
        with open(path, "w", encoding="utf-8") as f:
            f.write("[paths]\ngit_root: ~/src\n")
        self.context.config_file_path = path
        Config().run(self.context)
        self.assertEqual(self.context.git_root, os.path.expanduser("~/src"))


if __name__ == '__main__':
    unittest.main()
