import os
import sys
from typing import List, Optional

from klipperconf.util.functions import get_software_version
from klipperconf.util.logging import setup_file_logging, setup_logging

from .Config import Config
from .ConfigWriter import ConfigWriter
from .Context import Context
from .Logging import Logger
from .Migrate import Migrate
from .Packages import Packages
from .Paths import Paths
from .Repos import Repos


class Installer:

    # Returns False if any config file could not be updated.
    def Run(self, args:Optional[List[str]] = None, user_home:Optional[str] = None) -> bool:
        context = Context.setup(user_home)
        # Console only until the config file had a chance to move the printer data folder.
        setup_logging(None, get_software_version())

        Logger.Blank()
        Logger.Header("##################################")
        Logger.Header("####     SV08 Provisioner     ####")
        Logger.Header("##################################")
        Logger.Blank()

        context.parse_args(sys.argv[1:] if args is None else args)
        if context.show_help:
            self._print_help()
            return True

        Config().run(context)
        context.validate()
        self._setup_file_logging(context)
        Logger.Debug(f"Printer data: {context.printer_data_folder}, Config folder: {context.printer_data_config_folder}")

        repos = Repos()
        writer = ConfigWriter()

        # Step 1 - OS packages and numpy for the klippy env.
        Packages().run(context)

        # Step 2 - Timelapse and its moonraker config.
        if not context.skip_repos:
            repos.install_timelapse(context)
        writer.setup_moonraker_conf(context)

        # Step 3 - SV08 mainline configs replace the stock ones.
        migrate = Migrate()
        if not context.skip_repos:
            sv08_repo = repos.clone_sv08_mainline(context)
            migrate.move_sv08_configs(context, sv08_repo)
        migrate.move_old_probe_configs(context)

        # Step 4 - Beacon.
        self._setup_beacon(context, repos, writer)

        # Step 5 - printer.cfg stepper_z uses the beacon as virtual endstop.
        writer.setup_printer_cfg(context)

        # Step 6 - Macros and Shake&Tune.
        if not context.skip_repos:
            repos.install_macros(context)
            repos.install_shaketune(context)

        Logger.Blank()
        if len(writer.failed_files) > 0:
            Logger.Error("Finished, but these files could not be updated and were left as they were:")
            for path in writer.failed_files:
                Logger.Error("  "+path)
            return False

        Logger.Header("All done.")
        return True


    def _setup_beacon(self, context:Context, repos:Repos, writer:ConfigWriter):
        Logger.Header("Setting up Beacon...")
        repo_dir = os.path.join(context.user_home, Paths.BeaconRepoFolderName)
        repo_exists = os.path.isdir(repo_dir)
        has_update_manager = writer.moonraker_has_beacon(context)
        cfg_exists = os.path.exists(context.beacon_cfg_file_path)

        Logger.Info(f"Check 1: repo dir exists?          -> {repo_exists} ({repo_dir})")
        Logger.Info(f"Check 2: moonraker has section?    -> {has_update_manager} ({context.moonraker_config_file_path})")
        Logger.Info(f"Check 3: beacon.cfg exists?        -> {cfg_exists} ({context.beacon_cfg_file_path})")

        if not context.skip_repos:
            repos.install_beacon(context)
        if not has_update_manager:
            writer.setup_beacon_update_manager(context)
        writer.setup_beacon_cfg(context)


    def _setup_file_logging(self, context:Context):
        logs_folder = os.path.join(context.printer_data_folder, "logs")
        if not os.path.isdir(logs_folder):
            Logger.Debug(f"No logs folder at {logs_folder}, logging to the console only.")
            return
        setup_file_logging(os.path.join(logs_folder, "sv08-provisioner.log"), get_software_version())


    def _print_help(self):
        Logger.Blank()
        Logger.Header("Usage: python -m provisioner [config file] [-flags]")
        Logger.Blank()
        Logger.Info("Optional args:")
        Logger.Info("  config file       An ini file with [paths] and [beacon] sections overriding the defaults.")
        Logger.Blank()
        Logger.Info("  -help             Shows this message.")
        Logger.Info("  -debug            Enables debug logging.")
        Logger.Info("  -skippackages     Skips the apt and pip installs.")
        Logger.Info("  -skiprepos        Skips cloning repos and running their install scripts, only config files are edited.")
        Logger.Info("  -skipshaketune    Skips the Klippain Shake&Tune install.")
        Logger.Blank()


def main():
    exit_code = 0
    try:
        if not Installer().Run():
            exit_code = 1
    except Exception as e:
        Logger.Error("Provisioner got an exception. "+str(e))
        exit_code = 1

    # Allow the logger to flush.
    Logger.Finalize()
    sys.exit(exit_code)
