import datetime
import logging
import os
import shutil
import subprocess

from dateutil import tz

# Based on the implementation of Klipperscreen https://github.com/jordanruthe/KlipperScreen/blob/e9df355b3b8c33b63d5cbb9f7f2c75bd879597c5/ks_includes/functions.py#L83


def get_software_version():
    prog = ('git', '-C', os.path.dirname(__file__), 'describe', '--always',
            '--tags', '--long', '--dirty')
    try:
        process = subprocess.Popen(prog, stdout=subprocess.PIPE,
                                   stderr=subprocess.PIPE)
        ver, err = process.communicate()
        retcode = process.wait()
        if retcode == 0:
            version = ver.strip()
            if isinstance(version, bytes):
                version = version.decode()
            return version
        else:
            logging.debug(f"Error getting git version: {err}")
    except OSError:
        logging.exception("Error runing git describe")
    return "?"


def local_timestamp() -> str:
    """
    Returns the current local time as a compact timestamp, e.g. 20240131235959.
    Used as the suffix of backup files.
    """
    return datetime.datetime.now(tz.tzlocal()).strftime("%Y%m%d%H%M%S")


def backup_file(path: str) -> str:
    """
    Creates a sibling copy `<path>.<timestamp>.bak` of the file, keeping its metadata.

    Args:
        path (str): The file to back up.

    Returns:
        str: The path of the backup.
    """
    backup_path = f"{path}.{local_timestamp()}.bak"
    shutil.copy2(path, backup_path)
    logging.getLogger(__name__).info("Backed up %s to %s", path, backup_path)
    return backup_path
