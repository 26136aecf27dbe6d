"""
Config package for sheets_console.

Responsible for:
- the config model (ConsoleConfig)
- loading global.json with environment overrides (load_config)
"""

from .model import ConsoleConfig
from .loader import load_config
