from __future__ import annotations

from .doctor import CACM_1966_DOCTOR_SCRIPT, load_doctor_script
from .errors import ScriptError
from .parser import Script, load_script, load_script_file
from .render import render_script

__all__ = [
    "CACM_1966_DOCTOR_SCRIPT",
    "Script",
    "ScriptError",
    "load_doctor_script",
    "load_script",
    "load_script_file",
    "render_script",
]
