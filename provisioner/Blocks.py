from typing import List, Tuple

from klipperconf.fields import DesiredField


# The config blocks the provisioner adds. Every block is wrapped in BEGIN/END markers so
# users can tell them apart from their own content.
def _wrap(label:str, body:str) -> str:
    return f"# --- BEGIN: {label} (added by script) ---\n{body}# --- END: {label} ---\n"


#
# moonraker.conf
#
TIMELAPSE_UPDATE_MANAGER = _wrap("timelapse update_manager", """\
[update_manager timelapse]
type: git_repo
primary_branch: main
path: ~/moonraker-timelapse
origin: https://github.com/mainsail-crew/moonraker-timelapse.git
managed_services: klipper moonraker
""")

TIMELAPSE = _wrap("timelapse", """\
[timelapse]
##   Following basic configuration is default to most images and don't need
##   to be changed in most scenarios. Only uncomment and change it if your
##   Image differ from standart installations. In most common scenarios
##   a User only need [timelapse] in their configuration.
output_path: ~/timelapse/                ##   Directory where the generated video will be saved
frame_path: /tmp/timelapse/              ##   Directory where the temporary frames are saved
ffmpeg_binary_path: /usr/bin/ffmpeg      ##   Directory where ffmpeg is installed
""")

BEACON_UPDATE_MANAGER = _wrap("Beacon update_manager", """\
[update_manager beacon]
type: git_repo
channel: dev
path: ~/beacon_klipper
origin: https://github.com/beacon3d/beacon_klipper.git
env: ~/klippy-env/bin/python
requirements: requirements.txt
install_script: install.sh
is_system_service: False
managed_services: klipper
info_tags:
  desc=Beacon Surface Scanner
""")

# (section name, block) in the order they get appended.
MOONRAKER_SECTIONS: List[Tuple[str, str]] = [
    ("update_manager timelapse", TIMELAPSE_UPDATE_MANAGER),
    ("timelapse", TIMELAPSE),
]


#
# beacon.cfg
#
def beacon_base(serial:str, x_offset:str, y_offset:str) -> str:
    return f"""\
[beacon]
serial: {serial}
x_offset: {x_offset} # update with offset from nozzle on your machine
y_offset: {y_offset}   # update with offset from nozzle on your machine
mesh_main_direction: x
mesh_runs: 2
"""

BEACON_SECTIONS: List[Tuple[str, str]] = [
    ("resonance_tester", _wrap("resonance_tester", """\
[resonance_tester]
accel_chip: beacon
probe_points: 90, 90, 20
""")),
    ("bed_mesh", _wrap("bed_mesh", """\
[bed_mesh]
speed: 500
zero_reference_position: 175,175
horizontal_move_z: 2.0
mesh_min: 40, 40
mesh_max: 319, 339
probe_count: 99, 99
algorithm: bicubic
""")),
    ("quad_gantry_level", _wrap("quad_gantry_level", """\
[quad_gantry_level]
gantry_corners:
        -60, -10
        410, 420
points:
        50, 50
        50, 311
        309, 311
        309, 50
speed: 500
horizontal_move_z: 10
retry_tolerance: 0.01
retries: 10
max_adjust: 10
""")),
    ("safe_z_home", _wrap("safe_z_home", """\
[safe_z_home]
home_xy_position: 175, 175
z_hop: 3
""")),
]


#
# printer.cfg
#
STEPPER_Z_SECTION = "stepper_z"

STEPPER_Z_FIELDS: List[DesiredField] = [
    DesiredField("endstop_pin", "endstop_pin: probe:z_virtual_endstop #"),
    DesiredField("homing_retract_dist", "homing_retract_dist: 0"),
]

STEPPER_Z = _wrap("stepper_z", "[stepper_z]\n" + "".join(f.line + "\n" for f in STEPPER_Z_FIELDS))
