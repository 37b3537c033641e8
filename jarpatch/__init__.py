"""Replace vulnerable third-party jars inside an installed application tree."""

__version__ = "1.0.0"
