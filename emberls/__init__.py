"""Language server for Ember projects: template/script completion and addon providers."""

__version__ = "0.1.0"
