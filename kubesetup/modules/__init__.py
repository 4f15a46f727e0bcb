"""
Host provisioning modules.
"""
from .context import StepContext
from .driver import ProvisioningDriver, default_steps, reset_steps
from .runner import CommandRunner

__all__ = [
    'StepContext',
    'ProvisioningDriver',
    'default_steps',
    'reset_steps',
    'CommandRunner',
]
