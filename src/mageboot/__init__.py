"""
mageboot - first-boot bootstrapper for Magento containers
"""

__version__ = "0.1.0"

from .core import MagentoBootstrapper
from .errors import BootstrapError

__all__ = ["MagentoBootstrapper", "BootstrapError"]
