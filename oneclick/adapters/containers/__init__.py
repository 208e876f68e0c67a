"""Container runtime installers."""
