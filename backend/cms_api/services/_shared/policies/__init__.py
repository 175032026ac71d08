from .roles import authorize

__all__ = ["authorize"]
