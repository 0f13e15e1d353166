"""lindeps - Linear issue dependency graphs for the terminal."""

__version__ = "0.1.0"
