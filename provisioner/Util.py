import os
import shutil
import subprocess
from typing import Optional, Tuple

from klipperconf.util.functions import local_timestamp

from .Logging import Logger


class Util:

    # Runs a command as shell and returns the output.
    # Returns (return_code:int, output:str, error:str)
    @staticmethod
    def run_shell_command(cmd:str, throwOnNonZeroReturnCode:bool = True, cwd:Optional[str] = None, input_text:Optional[str] = None) -> Tuple[int, str, str]:
        # Check=true means if the process returns non-zero, an exception is thrown.
        # Shell=True is required so pipes and non absolute commands like "make install" work
        Logger.Debug(f"RunShellCommand - {cmd} (cwd: {cwd})")
        result = subprocess.run(cmd, check=throwOnNonZeroReturnCode, shell=True, capture_output=True, text=True, cwd=cwd, input=input_text)
        Logger.Debug(f"RunShellCommand - {cmd} - return: {result.returncode}; error - {result.stderr}")
        return (result.returncode, result.stdout, result.stderr)


    # Runs a third party script attached to the terminal, so the user can see and answer it.
    @staticmethod
    def run_interactive_command(cmd:str, cwd:Optional[str] = None, input_text:Optional[str] = None) -> None:
        Logger.Debug(f"RunInteractiveCommand - {cmd} (cwd: {cwd})")
        subprocess.run(cmd, check=True, shell=True, cwd=cwd, input=input_text, text=True)


    @staticmethod
    def command_exists(cmd:str) -> bool:
        return shutil.which(cmd) is not None


    @staticmethod
    def sudo_prefix() -> str:
        """
        Returns the prefix needed to run privileged commands.

        Returns:
            str: An empty string when running as root, otherwise "sudo ".

        Raises:
            RuntimeError: If not running as root and sudo is not available.
        """
        # pylint: disable=no-member # Linux only
        if os.geteuid() == 0:
            return ""
        if Util.command_exists("sudo"):
            return "sudo "
        raise RuntimeError("This script needs root privileges for apt. Install sudo or run as root.")


    # Ensures a folder exists, including all parents.
    @staticmethod
    def ensure_dir_exists(path:str):
        if os.path.exists(path) is False:
            Logger.Debug("Dir ["+path+"] doesn't exist, creating...")
            os.makedirs(path, exist_ok=True)


    # Ensures a file exists, creating an empty one if needed. Returns True if it was created.
    @staticmethod
    def ensure_file_exists(path:str) -> bool:
        Util.ensure_dir_exists(os.path.dirname(path))
        if os.path.exists(path):
            return False
        Logger.Info("File ["+path+"] doesn't exist, creating an empty one.")
        with open(path, "w", encoding="utf-8"):
            pass
        return True


    @staticmethod
    def move_with_backup(src:str, dest:str, rename_existing:bool) -> str:
        """
        Moves src to dest without overwriting anything already at dest.

        Args:
            src (str): The file or folder to move.
            dest (str): The target path.
            rename_existing (bool): If True an existing dest is renamed to `<dest>.bak.<timestamp>` first,
                otherwise src is moved to `<dest>.bak.<timestamp>` instead.

        Returns:
            str: The path src ended up at.
        """
        if os.path.exists(dest):
            backup = f"{dest}.bak.{local_timestamp()}"
            if rename_existing:
                Logger.Info(f"Destination {dest} exists; backing up to {backup}")
                shutil.move(dest, backup)
            else:
                Logger.Info(f"Destination exists; saving as: {backup}")
                dest = backup
        shutil.move(src, dest)
        Logger.Info(f"Moved: {src} -> {dest}")
        return dest
