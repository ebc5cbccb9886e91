"""
PageScout package initializer.
Defines package version and exposes the discovery entry point.
"""
__version__ = "0.1.0"

from page_scout.engine import Engine, discover
from page_scout.models import DiscoveryResult

__all__ = ["__version__", "Engine", "discover", "DiscoveryResult"]
