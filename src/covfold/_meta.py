from __future__ import annotations

import logging
from importlib.metadata import version

__version__ = version("covfold")

logger = logging.getLogger("covfold")

__all__ = ["__version__", "logger"]
