"""shellsuggest - PowerShell completion protocol adapter for terminal suggestions."""

__version__ = "0.1.0"
