"""Two-class image classifier trained with per-example gradient descent."""

__version__ = "0.0.1"
