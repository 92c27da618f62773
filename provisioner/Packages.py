import os
import subprocess
from typing import List

from .Context import Context
from .Logging import Logger
from .Util import Util


# Installs the OS packages and the python packages the beacon and shake&tune tooling needs.
class Packages:

    REQUIRED_DEBIAN_PACKAGES = [
        "python3-numpy",
        "python3-matplotlib",
        "libatlas-base-dev",
        "libopenblas-dev",
    ]

    def run(self, context:Context):
        if context.skip_packages:
            Logger.Warn("Skipping package installs due to the skip packages flag.")
            return

        Logger.Header("Checking required Debian packages...")
        missing = self._find_missing(Packages.REQUIRED_DEBIAN_PACKAGES)
        if len(missing) > 0:
            self._apt_install(missing)
        else:
            Logger.Info("All required packages are already installed.")

        self._install_numpy_into_klippy_env(context)


    def is_installed(self, package:str) -> bool:
        code, stdout, _ = Util.run_shell_command(f"dpkg-query -W -f='${{Status}}' {package}", False)
        return code == 0 and "install ok installed" in stdout


    def _find_missing(self, packages:List[str]) -> List[str]:
        missing = []
        for p in packages:
            if self.is_installed(p):
                Logger.Info(f"{p} is already installed.")
            else:
                Logger.Info(f"{p} is missing; will install.")
                missing.append(p)
        return missing


    def _apt_install(self, packages:List[str]):
        sudo = Util.sudo_prefix()
        pkgs = " ".join(packages)
        Logger.Info(f"Updating apt cache and installing missing packages: {pkgs}")
        # sudo drops most of the env, so pass the frontend as an assignment.
        Util.run_shell_command(f"{sudo}env DEBIAN_FRONTEND=noninteractive apt-get -yq update")
        Util.run_shell_command(f"{sudo}env DEBIAN_FRONTEND=noninteractive apt-get -yq install {pkgs}")


    def _install_numpy_into_klippy_env(self, context:Context):
        Logger.Info(f"Installing numpy into {context.klippy_env} (if not already present)...")
        pip = context.klippy_env_pip
        if not os.access(pip, os.X_OK):
            Logger.Info(f"Note: {pip} not found; skipping venv numpy install.")
            return

        code, _, _ = Util.run_shell_command(f"{pip} show numpy", False)
        if code == 0:
            Logger.Info(f"numpy already present in {context.klippy_env}.")
            return

        try:
            Util.run_shell_command(f"{pip} install -v numpy")
            Logger.Info(f"Installed numpy into {context.klippy_env}.")
        except subprocess.CalledProcessError as e:
            Logger.Warn(f"Warning: pip install numpy failed in {context.klippy_env}: {e.stderr}")
