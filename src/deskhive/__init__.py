"""DeskHive - grouped to-do list with a perpetual lunar calendar."""

__version__ = "0.1.0"
