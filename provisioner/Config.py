import configparser

from .Logging import Logger
from .Context import Context


class Config:
    '''
        Loads the optional provisioner ini file and applies it on top of the context defaults.

        [paths]
        printer_data: ~/printer_data
        git_root: ~/git
        klippy_env: ~/klippy-env

        [beacon]
        serial: /dev/serial/by-id/usb-Beacon_Beacon_RevD_XXXX-if00
        x_offset: -20
        y_offset: 0
    '''

    def run(self, context:Context):
        if context.config_file_path is None:
            Logger.Debug("No config file passed, using the default paths.")
            return

        Logger.Header("Reading config file "+context.config_file_path+"...")
        config = configparser.ConfigParser()
        # Read with the same encoding every other file is handled with.
        if len(config.read(context.config_file_path, encoding="utf-8")) == 0:
            raise ValueError(f"Failed to read config file {context.config_file_path}")

        self.apply(config, context)

    def apply(self, config:configparser.ConfigParser, context:Context):
        context.printer_data_folder = config.get("paths", "printer_data", fallback=context.printer_data_folder)
        context.git_root = config.get("paths", "git_root", fallback=context.git_root)
        context.klippy_env = config.get("paths", "klippy_env", fallback=context.klippy_env)

        context.beacon_serial = config.get("beacon", "serial", fallback=context.beacon_serial)
        context.beacon_x_offset = config.get("beacon", "x_offset", fallback=context.beacon_x_offset)
        context.beacon_y_offset = config.get("beacon", "y_offset", fallback=context.beacon_y_offset)

        for section in config.sections():
            if section not in ("paths", "beacon"):
                Logger.Warn(f"Unknown section [{section}] in config file, ignoring it.")

        Logger.Info(f"Config loaded. Printer data: {context.printer_data_folder}, Git root: {context.git_root}, Klippy env: {context.klippy_env}")
