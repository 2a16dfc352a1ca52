"""App subclasses — LibraryApp."""

from prompt_distiller.l4_frameworks_and_drivers.apps.library import LibraryApp

__all__ = ['LibraryApp']
