from .dsl import sh, step, plan, command_exists, packages_installed, service_running, file_contains
from .runner import run_steps, StepFailure
from .model import Command, Step, StepResult, RunReport
from .config import Configuration, ConfigError, resolve_config
from .shell import Shell, Sudo, NoElevation, detect_elevation

__all__ = [
    "sh", "step", "plan", "command_exists", "packages_installed", "service_running", "file_contains",
    "run_steps", "StepFailure",
    "Command", "Step", "StepResult", "RunReport",
    "Configuration", "ConfigError", "resolve_config",
    "Shell", "Sudo", "NoElevation", "detect_elevation",
]
