"""Injected collaborators: clock, image processing, users, field schemas.

Each collaborator is an abstract interface with an in-memory or reference
implementation for tests and development.
"""

from dossier.providers.clock import Clock, FixedClock, SystemClock
from dossier.providers.image import ImageProcessor, MockImageProcessor, PillowImageProcessor
from dossier.providers.schema import FieldDescriptor, FieldSchemaProvider, StaticFieldSchemaProvider
from dossier.providers.users import CurrentUser, InMemoryUserDirectory, UserDirectory

__all__ = [
    # Clock
    "Clock",
    "SystemClock",
    "FixedClock",
    # Images
    "ImageProcessor",
    "PillowImageProcessor",
    "MockImageProcessor",
    # Field schema
    "FieldDescriptor",
    "FieldSchemaProvider",
    "StaticFieldSchemaProvider",
    # Users
    "CurrentUser",
    "UserDirectory",
    "InMemoryUserDirectory",
]
