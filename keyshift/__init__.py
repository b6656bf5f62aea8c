"""Key remapping configuration, input event model, action dispatch and window-manager clients."""

__version__ = "0.14.3"