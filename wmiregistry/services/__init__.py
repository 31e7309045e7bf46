"""Registry services built on the StdRegProv provider session."""
