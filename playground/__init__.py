"""Runtime playground: versioned runtime binaries for the desktop playground."""

__version__ = "0.1.0"
