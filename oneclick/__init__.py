"""oneclick — one-click installers for Go, Docker and Node.js."""

__version__ = "0.1.0"
