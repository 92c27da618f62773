import logging
import logging.handlers
import os
import sys
import traceback
from typing import Optional

import coloredlogs

# Rotating file handler based on MobilerakerCompanion, Klipper and Moonraker's implementation


class ProvisionerLoggingHandler(logging.handlers.RotatingFileHandler):
    def __init__(self, software_version, filename, **kwargs):
        super(ProvisionerLoggingHandler,
              self).__init__(filename, **kwargs)
        self.rollover_info = {
            'header': f"{'-' * 20}SV08 Provisioner Log Start{'-' * 20}",
            'version': f"Git Version: {software_version}",
        }
        lines = [line for line in self.rollover_info.values() if line]
        if self.stream is not None:
            self.stream.write("\n".join(lines) + "\n")

    def doRollover(self):
        super(ProvisionerLoggingHandler, self).doRollover()
        lines = [line for line in self.rollover_info.values() if line]
        if self.stream is not None:
            self.stream.write("\n".join(lines) + "\n")


# Logging based on Arksine's logging setup
def setup_logging(log_file: Optional[str], software_version: str, level: int = logging.INFO):
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    coloredlogs.install(
        level=level, logger=root_logger, fmt='%(asctime)s %(name)s %(levelname)s %(message)s')

    if log_file is not None:
        setup_file_logging(log_file, software_version)

    def logging_exception_handler(ex_type, value, tb, thread_identifier=None):
        logging.exception(
            f'Uncaught exception {ex_type}: {value}\n'
            + '\n'.join([str(x) for x in [*traceback.format_tb(tb)]])
        )

    sys.excepthook = logging_exception_handler
    # Routes MalformedSection warnings into the log.
    logging.captureWarnings(True)


def setup_file_logging(log_file: str, software_version: str) -> Optional[ProvisionerLoggingHandler]:
    """
    Adds the rotating log file to the root logger, replacing a previously added one.
    Can be called after setup_logging once the final log location is known.

    Returns:
        Optional[ProvisionerLoggingHandler]: The handler, None if the file could not be created.
    """
    root_logger = logging.getLogger()

    # Check if provided log_file is a file or a directory
    if os.path.isdir(log_file):
        log_file = os.path.join(log_file, "sv08-provisioner.log")

    for handler in [h for h in root_logger.handlers if isinstance(h, ProvisionerLoggingHandler)]:
        root_logger.removeHandler(handler)
        handler.close()

    print(f"Logging to file: {os.path.normpath(log_file)}")
    try:
        fh = ProvisionerLoggingHandler(
            software_version, log_file, maxBytes=4194304, backupCount=3)
        formatter = logging.Formatter(
            '%(asctime)s %(name)s %(levelname)s - %(message)s')
        fh.setFormatter(formatter)

        root_logger.addHandler(fh)
        return fh

    except Exception as e:
        print(
            f"Unable to create log file at '{os.path.normpath(log_file)}'.\n"
            f"Make sure that the folder '{os.path.dirname(log_file)}' exists\n"
            f"and the provisioner has Read/Write access to the folder.\n"
            f"{e}\n"
        )
    return None
