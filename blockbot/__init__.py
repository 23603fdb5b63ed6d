"""Sequential block-program interpreter for a grid actor."""

__version__ = "0.1.0"
