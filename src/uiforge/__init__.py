"""ui-forge: prompt-to-UI generation restricted to a whitelisted component library."""

__version__ = "0.1.0"
