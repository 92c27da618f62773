import os
from typing import Any, List, Optional

from .Logging import Logger
from .Paths import Paths


# This class holds the context of the provisioner, meaning all of the target paths and flags
# that this run is using.
# There is a generation system, where generation defines what data is required by when.
# Generation 1 - Must always exist, from the start.
# Generation 2 - Must exist after the optional config file was loaded.
class Context:
    """
    The Context class represents the context in which the provisioner is running.
    It holds the paths of all files and folders the steps touch, plus the command line flags.
    """
    def __init__(self) -> None:

        #
        # Generation 1
        #

        # This is the user home path of the user who launched the provisioner.
        self._user_home:Optional[str] = None

        # Parsed from the command line args, an optional ini file overriding the defaults.
        self.config_file_path:Optional[str] = None

        # Parsed from the command line args, if debug should be enabled.
        self.debug:bool = False

        # Parsed from the command line args, if we should show help.
        self.show_help:bool = False

        # Parsed from the command line args, skips apt and pip.
        self.skip_packages:bool = False

        # Parsed from the command line args, skips cloning and running third party install scripts.
        self.skip_repos:bool = False

        # Parsed from the command line args, skips the Klippain Shake&Tune install.
        self.skip_shaketune:bool = False


        #
        # Generation 2
        #

        # This it the path to the printer data root folder.
        self._printer_data_folder:Optional[str] = None

        # This is the path to the klippy virtual env.
        self._klippy_env:Optional[str] = None

        # This is the folder the SV08 mainline repo is cloned into.
        self._git_root:Optional[str] = None

        # Values written into a freshly created beacon.cfg
        self.beacon_serial:str = "/dev/serial/by-id/usb-Beacon_Beacon_RevD_<..addyourserial..>-if00"
        self.beacon_x_offset:str = "-20"
        self.beacon_y_offset:str = "0"


    @staticmethod
    def setup(user_home: Optional[str] = None) -> 'Context':
        """
        Bootstrap the context object with the defaults derived from the user home.

        Args:
            user_home (Optional[str]): The home folder, defaults to the one of the current user.

        Returns:
            Context: The initialized context object.
        """
        context = Context()
        context.user_home = user_home if user_home is not None else os.path.expanduser("~")
        context.printer_data_folder = os.path.join(context.user_home, Paths.PrinterDataFolderName)
        context.klippy_env = os.path.join(context.user_home, Paths.KlippyEnvFolderName)
        context.git_root = os.path.join(context.user_home, Paths.GitRootFolderName)
        return context

    # Getters and setters for the properties.
    @property
    def user_home(self) -> str:
        if self._user_home is None:
            raise AttributeError("User home path was not set.")
        return self._user_home

    @user_home.setter
    def user_home(self, value:str) -> None:
        self._user_home = value.strip()

    @property
    def printer_data_folder(self) -> str:
        if self._printer_data_folder is None:
            raise AttributeError("Printer data folder path was not set.")
        return self._printer_data_folder

    @printer_data_folder.setter
    def printer_data_folder(self, value:str) -> None:
        self._printer_data_folder = os.path.expanduser(value.strip())

    @property
    def klippy_env(self) -> str:
        if self._klippy_env is None:
            raise AttributeError("Klippy env path was not set.")
        return self._klippy_env

    @klippy_env.setter
    def klippy_env(self, value:str) -> None:
        self._klippy_env = os.path.expanduser(value.strip())

    @property
    def git_root(self) -> str:
        if self._git_root is None:
            raise AttributeError("Git root path was not set.")
        return self._git_root

    @git_root.setter
    def git_root(self, value:str) -> None:
        self._git_root = os.path.expanduser(value.strip())

    # Derived paths.
    @property
    def printer_data_config_folder(self) -> str:
        return os.path.join(self.printer_data_folder, "config")

    @property
    def moonraker_config_file_path(self) -> str:
        return os.path.join(self.printer_data_config_folder, Paths.MoonrakerConfFileName)

    @property
    def printer_cfg_file_path(self) -> str:
        return os.path.join(self.printer_data_config_folder, Paths.PrinterCfgFileName)

    @property
    def beacon_cfg_file_path(self) -> str:
        return os.path.join(self.printer_data_config_folder, Paths.BeaconCfgRelativePath)

    @property
    def old_config_folder(self) -> str:
        return os.path.join(self.user_home, Paths.OldConfigFolder)

    @property
    def klippy_env_pip(self) -> str:
        return os.path.join(self.klippy_env, "bin", "pip")


    def parse_args(self, args: List[str]):
        """
        Parses the command line arguments passed to the provisioner.

        The format of the command line arguments is:
        python -m provisioner <optional config file path> -other -args

        Raises:
            AttributeError: If an unknown argument is found.
        """
        for a in args:
            # Ensure there's a string and it's not empty.
            if isinstance(a, str) is False or len(a) == 0:
                continue

            # Handle and flags passed.
            if a[0] == '-':
                raw_arg = a.lstrip('-').lower()
                if raw_arg == "debug":
                    # Enable debug printing.
                    self.debug = True
                    Logger.enable_debug_logging()
                elif raw_arg == "help" or raw_arg == "usage" or raw_arg == "h":
                    self.show_help = True
                elif raw_arg == "skippackages":
                    Logger.Info("Skipping OS and python package installs.")
                    self.skip_packages = True
                elif raw_arg == "skiprepos":
                    Logger.Info("Skipping repo clones and third party install scripts.")
                    self.skip_repos = True
                elif raw_arg == "skipshaketune":
                    Logger.Info("Skipping Klippain Shake&Tune install.")
                    self.skip_shaketune = True
                else:
                    raise AttributeError(f"Unknown argument '{a}' found. Use -help for options.")

            # If there's a raw string, assume its the config file path.
            else:
                if self.config_file_path is None:
                    self.config_file_path = os.path.expanduser(a)
                    Logger.Debug("Config file path found as argument: "+a)
                else:
                    raise AttributeError(f"Unknown argument '{a}' found. Use -help for options.")


    def validate(self) -> None:
        """
        Validates the context before any step runs.

        Raises:
            ValueError: If the user home does not exist or a required value is empty.
        """
        self._validate_path(self._user_home, "User home folder was not found")
        self._validate_property(self._printer_data_folder, "Required config var Printer Data Folder was not found")
        self._validate_property(self._klippy_env, "Required config var Klippy Env was not found")
        self._validate_property(self._git_root, "Required config var Git Root was not found")
        if self.config_file_path is not None:
            self._validate_path(self.config_file_path, f"Config file {self.config_file_path} was not found")


    def _validate_path(self, path:Optional[str], error:str):
        if path is None or os.path.exists(path) is False:
            raise ValueError(error)


    def _validate_property(self, s:Optional[Any], error:str):
        if s is None:
            raise ValueError(error)

        if isinstance(s, str) and len(s) == 0:
            raise ValueError(error)
