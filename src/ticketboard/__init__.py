"""Ticket Board: live support-ticket counts by agent, department and status."""

__version__ = "1.0.0"
