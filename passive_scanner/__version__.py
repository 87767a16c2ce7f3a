"""Version information for passive-scanner."""

__version__ = "0.1.0"
__version_info__ = tuple(int(i) for i in __version__.split("."))

__title__ = "passive-scanner"
__description__ = "Passive HTTP response security scanner for mitmproxy traffic"
__author__ = "CyberSec Team"
__license__ = "MIT"
