"""Entry point for building, creating and loading records."""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from dossier.audit.context import OperationContext
from dossier.observability.logging import get_logger
from dossier.records.record import Record
from dossier.records.services import RecordServices

logger = get_logger(__name__)


class RecordRepository:
    """Binds records to one set of services."""

    def __init__(self, services: RecordServices) -> None:
        self._services = services

    @property
    def services(self) -> RecordServices:
        return self._services

    def new(
        self,
        attrs: Mapping[str, Any] | None = None,
        *,
        form_name: str | None = None,
    ) -> Record:
        return Record.new(self._services, attrs, form_name=form_name)

    async def create(
        self,
        attrs: Mapping[str, Any] | None = None,
        *,
        form_name: str | None = None,
        context: OperationContext | None = None,
    ) -> Record:
        return await Record.create(
            self._services, attrs, form_name=form_name, context=context
        )

    async def get(self, record_id: UUID) -> Record | None:
        """Load a record, or None when it does not exist."""
        document = await self._services.store.get(record_id)
        if document is None:
            logger.debug("record_not_found", record_id=str(record_id))
            return None
        return Record(document, self._services)
