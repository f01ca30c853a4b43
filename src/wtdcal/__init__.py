"""wtdcal - public calendar view of a weekly journal."""

__version__ = "0.1.0"
