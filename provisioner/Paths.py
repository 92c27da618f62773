import os


# A simple holder of commonly used paths and remote locations.
class Paths:

    # All of these are relative to the home folder of the user running the provisioner.
    PrinterDataFolderName = "printer_data"
    KlippyEnvFolderName = "klippy-env"
    GitRootFolderName = "git"
    OldConfigFolder = os.path.join("misc", "old_config")

    # Relative to the printer data config folder.
    MoonrakerConfFileName = "moonraker.conf"
    PrinterCfgFileName = "printer.cfg"
    BeaconCfgRelativePath = os.path.join("options", "probe", "beacon.cfg")
    # Stock probe configs that conflict with the beacon, they get moved to OldConfigFolder.
    OldProbeCfgRelativePaths = [
        os.path.join("options", "probe", "eddy.cfg"),
        os.path.join("options", "probe", "stock.cfg"),
    ]

    TimelapseRepoUrl = "https://github.com/mainsail-crew/moonraker-timelapse.git"
    TimelapseRepoFolderName = "moonraker-timelapse"

    Sv08MainlineRepoUrl = "https://github.com/Rappetor/Sovol-SV08-Mainline"
    Sv08MainlineRepoFolderName = "Sovol-SV08-Mainline"
    # Relative to the SV08 mainline repo.
    Sv08ConfigRelativePath = os.path.join("files-used", "config")

    BeaconRepoUrl = "https://github.com/beacon3d/beacon_klipper.git"
    BeaconRepoFolderName = "beacon_klipper"

    MacrosRepoUrl = "https://github.com/ss1gohan13/SV08-Replacement-Macros.git"
    MacrosRepoFolderName = "SV08-Replacement-Macros"

    ShakeTuneInstallScriptUrl = "https://raw.githubusercontent.com/Frix-x/klippain-shaketune/main/install.sh"
