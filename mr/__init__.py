"""macreleaser: release automation for macOS desktop applications."""

__version__ = "0.4.0"
