import os
import shlex
import subprocess

import requests

from .Context import Context
from .Logging import Logger
from .Paths import Paths
from .Util import Util


# Clones the third party repos and runs their install scripts.
class Repos:

    DOWNLOAD_TIMEOUT_SEC = 30

    @staticmethod
    def is_git_repo(path:str) -> bool:
        return os.path.isdir(os.path.join(path, ".git"))


    def clone_or_pull(self, url:str, dest:str, pull:bool = True) -> bool:
        """
        Clones the repo into dest, or pulls the latest changes if it already exists.

        Args:
            url (str): The remote url.
            dest (str): The local folder.
            pull (bool, optional): Pull if the repo exists. A failing pull is only a warning. Defaults to True.

        Returns:
            bool: True if the repo was freshly cloned.

        Raises:
            RuntimeError: If git is not installed.
        """
        if not Util.command_exists("git"):
            raise RuntimeError("Error: 'git' is not installed or not in PATH. Install git and re-run.")

        if not Repos.is_git_repo(dest):
            Logger.Info(f"Cloning {url} into {dest}...")
            Util.ensure_dir_exists(os.path.dirname(dest))
            Util.run_shell_command(f"git clone {shlex.quote(url)} {shlex.quote(dest)}")
            return True

        if not pull:
            Logger.Info(f"{os.path.basename(dest)} repo already exists; skipping clone.")
            return False

        Logger.Info(f"{os.path.basename(dest)} repo already exists; pulling latest...")
        code, _, stderr = Util.run_shell_command("git pull --rebase", False, cwd=dest)
        if code != 0:
            Logger.Warn(f"Warning: git pull failed in {dest}: {stderr.strip()}")
        return False


    def install_timelapse(self, context:Context):
        Logger.Header("Installing moonraker-timelapse...")
        repo = os.path.join(context.user_home, Paths.TimelapseRepoFolderName)
        self.clone_or_pull(Paths.TimelapseRepoUrl, repo, pull=False)

        if not Util.command_exists("make"):
            Logger.Warn("Warning: 'make' not found; cannot run 'make install' for moonraker-timelapse.")
            return
        try:
            # The makefile asks for confirmation before restarting services.
            Util.run_interactive_command("make install", cwd=repo, input_text="Y\n")
        except subprocess.CalledProcessError:
            Logger.Warn("Warning: 'make install' for moonraker-timelapse failed.")


    def clone_sv08_mainline(self, context:Context) -> str:
        Logger.Header(f"Preparing Git workspace in {context.git_root}...")
        Util.ensure_dir_exists(context.git_root)
        repo = os.path.join(context.git_root, Paths.Sv08MainlineRepoFolderName)
        self.clone_or_pull(Paths.Sv08MainlineRepoUrl, repo)
        return repo


    def install_beacon(self, context:Context):
        repo = os.path.join(context.user_home, Paths.BeaconRepoFolderName)
        if os.path.isdir(repo):
            Logger.Info("Beacon repo already exists; skipping install.")
            return

        Logger.Info("Beacon repo not found. Installing Beacon...")
        self.clone_or_pull(Paths.BeaconRepoUrl, repo, pull=False)
        Util.run_interactive_command(f"sh {shlex.quote(os.path.join(repo, 'install.sh'))}", cwd=context.user_home)
        Logger.Info("Beacon install script executed.")


    def install_macros(self, context:Context):
        Logger.Header("Installing SV08 replacement macros...")
        repo = os.path.join(context.user_home, Paths.MacrosRepoFolderName)
        self.clone_or_pull(Paths.MacrosRepoUrl, repo)
        Util.run_interactive_command("./install-macros.sh", cwd=repo)


    def install_shaketune(self, context:Context):
        if context.skip_shaketune:
            Logger.Warn("Skipping Klippain Shake&Tune due to the skip shaketune flag.")
            return

        Logger.Header("Installing Klippain Shake&Tune...")
        Logger.Debug("Downloading "+Paths.ShakeTuneInstallScriptUrl)
        try:
            response = requests.get(Paths.ShakeTuneInstallScriptUrl, timeout=Repos.DOWNLOAD_TIMEOUT_SEC)
            response.raise_for_status()
        except requests.RequestException as e:
            Logger.Warn(f"Warning: failed to download the Shake&Tune install script, skipping it: {e}")
            return
        Util.run_interactive_command("bash -s", cwd=context.user_home, input_text=response.text)
        Logger.Info("Klippain Shake&Tune install script executed.")
