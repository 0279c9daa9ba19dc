"""Configuration: defaults, layered settings and the typed registry view."""

from .defaults import DEFAULTS
from .models import RegistrySettings
from .settings import Settings

__all__ = ["DEFAULTS", "RegistrySettings", "Settings"]
