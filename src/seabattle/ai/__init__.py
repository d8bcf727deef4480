"""AI package exports."""

from .hunt_target import HuntTargetStrategy, TargetingMode
from .strategy import TargetingStrategy

__all__ = ["HuntTargetStrategy", "TargetingMode", "TargetingStrategy"]
