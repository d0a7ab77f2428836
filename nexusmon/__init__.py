"""Nexus Security Monitor - simulated security-monitoring dashboard backend."""

__version__ = "0.1.0"
