"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.user.driving_adapter.http_controller import auth_controller
from src.service.user.driving_adapter.http_controller.auth import dependencies


WIRE_MODULES: list[ModuleType] = [
    auth_controller,
    dependencies,
]
