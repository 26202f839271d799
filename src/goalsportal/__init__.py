"""SIC Goals Portal: goal-setting and evaluation data entry."""

__version__ = "0.1.0"
