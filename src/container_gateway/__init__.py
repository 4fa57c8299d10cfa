"""Container Gateway - REST facade for provisioning port-mapped Docker containers."""

__version__ = "1.0.0"
