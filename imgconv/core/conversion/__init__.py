from .converter import convert

__all__ = ["convert"]
