from . import containers, health

__all__ = ["containers", "health"]
