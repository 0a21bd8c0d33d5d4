"""Configuration model exports.

    from dossier.config.models import AttachmentsConfig, HistoryConfig
"""

from dossier.config.models.attachments import TEN_MEGABYTES, AttachmentsConfig
from dossier.config.models.history import HistoryConfig
from dossier.config.models.observability import LoggingConfig, ObservabilityConfig
from dossier.config.models.storage import StorageConfig

__all__ = [
    "AttachmentsConfig",
    "HistoryConfig",
    "LoggingConfig",
    "ObservabilityConfig",
    "StorageConfig",
    "TEN_MEGABYTES",
]
