"""ptlocator - MBR/GPT partition table locator for disk images."""

__version__ = "1.0.0"
