"""Collaborators a record needs, bundled for injection."""

from dataclasses import dataclass, field
from functools import cached_property

from dossier.attachments.validation import AttachmentValidator
from dossier.audit.auditor import ChangeAuditor
from dossier.config import get_settings
from dossier.config.settings import Settings
from dossier.providers.clock import Clock, SystemClock
from dossier.providers.image import ImageProcessor, PillowImageProcessor
from dossier.providers.schema import FieldSchemaProvider, StaticFieldSchemaProvider
from dossier.providers.users import InMemoryUserDirectory, UserDirectory
from dossier.records.store import DocumentStore
from dossier.records.stores.inmemory import InMemoryDocumentStore


@dataclass
class RecordServices:
    """Injected services shared by every record of an application."""

    store: DocumentStore
    clock: Clock = field(default_factory=SystemClock)
    image_processor: ImageProcessor = field(default_factory=PillowImageProcessor)
    user_directory: UserDirectory = field(default_factory=InMemoryUserDirectory)
    schema_provider: FieldSchemaProvider = field(default_factory=StaticFieldSchemaProvider)
    settings: Settings = field(default_factory=get_settings)

    @cached_property
    def validator(self) -> AttachmentValidator:
        return AttachmentValidator(self.settings.attachments)

    @cached_property
    def auditor(self) -> ChangeAuditor:
        return ChangeAuditor(
            schema_provider=self.schema_provider,
            user_directory=self.user_directory,
            clock=self.clock,
            config=self.settings.history,
        )

    @classmethod
    def default(cls, **overrides) -> "RecordServices":
        """In-memory store, system clock and Pillow, with optional overrides."""
        return cls.from_settings(**overrides)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides) -> "RecordServices":
        """Build services for the configured storage backend."""
        settings = settings or get_settings()
        if "store" not in overrides:
            # "inmemory" is the only bundled backend
            overrides["store"] = InMemoryDocumentStore()
        return cls(settings=settings, **overrides)
