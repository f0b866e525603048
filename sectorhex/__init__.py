"""Terminal hex editor for disk images and block devices, one sector at a time."""

__version__ = "0.1.0"
__all__ = ["__version__"]