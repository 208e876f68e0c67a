"""Language toolchain installers."""
