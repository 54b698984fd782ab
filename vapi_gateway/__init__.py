"""Vapi call gateway: REST front-end for Vapi voice calls and property search."""

__version__ = "1.0.0"
