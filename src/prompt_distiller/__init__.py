"""prompt-distiller — local prompt template library."""

__version__ = '0.3.0'
