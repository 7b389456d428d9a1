"""Runtime binary provisioning."""

from .manager import BinaryManager, BinaryProvisioner

__all__ = ["BinaryManager", "BinaryProvisioner"]
