import functools
import os
from typing import List, Tuple

from klipperconf.document import ConfigDocument, apply_to_file, read_document, write_document
from klipperconf.fields import merge_fields
from klipperconf.sections import append_section_if_missing, has_section
from klipperconf.util.functions import backup_file

from . import Blocks
from .Context import Context
from .Logging import Logger
from .Util import Util


# Wraps a per file setup step. A failing file is logged and recorded in failed_files,
# the remaining steps still run. The file itself is left untouched by the atomic write.
def _per_file(path_property:str):
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, context:Context) -> bool:
            path = getattr(context, path_property)
            try:
                func(self, context)
                return True
            except OSError as e:
                # IOFailure is an OSError as well.
                Logger.Warn(f"Failed to update {path}, leaving it as is: {e}")
                self.failed_files.append(path)
                return False
        return wrapper
    return decorator


# Responsible for all edits of the klipper and moonraker config files.
# Every edit is idempotent, running the provisioner twice leaves the files as they are.
class ConfigWriter:

    def __init__(self) -> None:
        # Files a setup step failed on during this run.
        self.failed_files:List[str] = []

    def prepare_file(self, path:str) -> str:
        """
        Makes sure the config file exists and creates a timestamped backup of it
        before anything gets changed.

        Returns:
            str: The path of the backup.
        """
        Util.ensure_file_exists(path)
        return backup_file(path)


    def append_sections(self, path:str, sections:List[Tuple[str, str]]) -> List[str]:
        """
        Appends every (name, block) that is not yet part of the file.

        Returns:
            List[str]: The names of the sections that were appended.
        """
        appended = []
        file_name = os.path.basename(path)
        for name, block in sections:
            changed = apply_to_file(path, lambda doc, n=name, b=block: append_section_if_missing(doc, n, b))
            if changed:
                Logger.Info(f"Appended [{name}] to {file_name}")
                appended.append(name)
            else:
                Logger.Info(f"{file_name} already has [{name}]; skipping append.")
        return appended


    @_per_file("moonraker_config_file_path")
    def setup_moonraker_conf(self, context:Context):
        Logger.Header("Adding timelapse config blocks to moonraker.conf...")
        self.prepare_file(context.moonraker_config_file_path)
        self.append_sections(context.moonraker_config_file_path, Blocks.MOONRAKER_SECTIONS)


    def moonraker_has_beacon(self, context:Context) -> bool:
        try:
            document = read_document(context.moonraker_config_file_path, missing_ok=True)
        except OSError as e:
            Logger.Warn(f"Failed to read {context.moonraker_config_file_path}: {e}")
            return False
        return has_section(document, "update_manager beacon")


    @_per_file("moonraker_config_file_path")
    def setup_beacon_update_manager(self, context:Context):
        Logger.Info(f"Adding [update_manager beacon] block to {context.moonraker_config_file_path}...")
        Util.ensure_file_exists(context.moonraker_config_file_path)
        self.append_sections(context.moonraker_config_file_path, [("update_manager beacon", Blocks.BEACON_UPDATE_MANAGER)])


    @_per_file("beacon_cfg_file_path")
    def setup_beacon_cfg(self, context:Context):
        path = context.beacon_cfg_file_path
        if not os.path.exists(path):
            Logger.Info(f"Creating {path}...")
            Util.ensure_dir_exists(os.path.dirname(path))
            base = Blocks.beacon_base(context.beacon_serial, context.beacon_x_offset, context.beacon_y_offset)
            write_document(path, ConfigDocument.from_text(base))
            Logger.Info(f"Wrote base Beacon probe config to {path}")
        else:
            self.prepare_file(path)

        self.append_sections(path, Blocks.BEACON_SECTIONS)


    @_per_file("printer_cfg_file_path")
    def setup_printer_cfg(self, context:Context):
        path = context.printer_cfg_file_path
        Logger.Header(f"Fixing up [{Blocks.STEPPER_Z_SECTION}] in printer.cfg...")
        self.prepare_file(path)

        if not has_section(read_document(path), Blocks.STEPPER_Z_SECTION):
            Logger.Info(f"No [{Blocks.STEPPER_Z_SECTION}] section found; appending minimal section.")
            self.append_sections(path, [(Blocks.STEPPER_Z_SECTION, Blocks.STEPPER_Z)])
            return

        Logger.Info(f"Updating existing [{Blocks.STEPPER_Z_SECTION}] block...")
        changed = apply_to_file(path, lambda doc: merge_fields(doc, Blocks.STEPPER_Z_SECTION, Blocks.STEPPER_Z_FIELDS))
        if changed:
            Logger.Info(f"Updated [{Blocks.STEPPER_Z_SECTION}] in printer.cfg")
        else:
            Logger.Info(f"[{Blocks.STEPPER_Z_SECTION}] in printer.cfg is already up to date.")
