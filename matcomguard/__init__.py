"""Process CPU/RAM guard and watcher for files on newly connected drives."""

__version__ = "0.1.0"
__all__ = ["config", "monitor", "usb"]