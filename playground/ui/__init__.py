"""UI module for the playground."""

from .main import MainWindow
from .token_dialog import TokenDialog

__all__ = ["MainWindow", "TokenDialog"]
