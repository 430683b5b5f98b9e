"""Terminal explorer for a local Azurite storage emulator."""

__version__ = "0.1.0"
