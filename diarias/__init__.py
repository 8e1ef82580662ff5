"""Diárias: daily-work records, pay calculation and monthly exports for recreation staff."""

__version__ = "0.1.0"
