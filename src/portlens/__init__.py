"""portlens: explain which process owns each listening port."""

__version__ = "0.1.0"
