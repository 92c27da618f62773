import os
from typing import List

from .Context import Context
from .Logging import Logger
from .Paths import Paths
from .Util import Util


# Moves config files around: the SV08 mainline configs into the printer config folder and
# the stock probe configs out of it.
class Migrate:

    def move_sv08_configs(self, context:Context, sv08_repo:str) -> List[str]:
        """
        Moves every entry of the SV08 mainline config folder into the printer config folder.
        Existing destinations are renamed to `<dest>.bak.<timestamp>` first.

        Returns:
            List[str]: The destinations that were written.
        """
        src_dir = os.path.join(sv08_repo, Paths.Sv08ConfigRelativePath)
        dest_dir = context.printer_data_config_folder
        Logger.Header(f"Moving SV08 config files into {dest_dir}...")
        Util.ensure_dir_exists(dest_dir)

        if not os.path.isdir(src_dir):
            Logger.Warn(f"Source config dir not found: {src_dir} (skipping move)")
            return []

        moved = []
        for name in sorted(os.listdir(src_dir)):
            moved.append(Util.move_with_backup(os.path.join(src_dir, name), os.path.join(dest_dir, name), rename_existing=True))
        return moved


    def move_old_probe_configs(self, context:Context) -> List[str]:
        Logger.Header(f"Moving old probe configs into {context.old_config_folder}...")
        Util.ensure_dir_exists(context.old_config_folder)

        moved = []
        for relative in Paths.OldProbeCfgRelativePaths:
            src = os.path.join(context.printer_data_config_folder, relative)
            if not os.path.exists(src):
                Logger.Info(f"Not found (skip): {src}")
                continue
            dest = os.path.join(context.old_config_folder, os.path.basename(src))
            moved.append(Util.move_with_backup(src, dest, rename_existing=False))
        return moved
