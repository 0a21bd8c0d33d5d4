"""Change auditor: builds history entries for record saves."""

from typing import TYPE_CHECKING, Any

from dossier.audit.context import OperationContext
from dossier.audit.diff import diff
from dossier.audit.models import HistoryEntry
from dossier.config.models import HistoryConfig
from dossier.observability.logging import get_logger
from dossier.observability.metrics import HISTORY_ENTRIES
from dossier.providers.clock import Clock, history_datetime
from dossier.providers.schema import FieldSchemaProvider
from dossier.providers.users import UserDirectory

if TYPE_CHECKING:
    from dossier.records.models import RecordDocument

logger = get_logger(__name__)

PHOTO_KEYS_FIELD = "photo_keys"


def tracked_values(document: "RecordDocument", field_names: list[str]) -> dict[str, Any]:
    """Values of the tracked fields, including the derived photo key list."""
    values: dict[str, Any] = {}
    for name in field_names:
        if name == PHOTO_KEYS_FIELD:
            values[name] = list(document.photo_keys)
        else:
            values[name] = document.fields.get(name)
    return values


class ChangeAuditor:
    """Diffs persisted and pending record state into history entries.

    Trackable fields come from the field schema provider, followed by the
    configured default fields and ``photo_keys``. When the provider fails
    the auditor still records the default fields.
    """

    def __init__(
        self,
        schema_provider: FieldSchemaProvider,
        user_directory: UserDirectory,
        clock: Clock,
        config: HistoryConfig,
    ) -> None:
        self._schema_provider = schema_provider
        self._user_directory = user_directory
        self._clock = clock
        self._config = config

    def trackable_fields(self, form_name: str) -> list[str]:
        """Ordered, de-duplicated names of the fields audited for a form."""
        names: list[str] = []
        try:
            names.extend(field.name for field in self._schema_provider.trackable_fields(form_name))
        except Exception as e:
            logger.warning(
                "field_schema_unavailable",
                form_name=form_name,
                error=str(e),
            )

        names.extend(self._config.default_tracked_fields)
        names.append(PHOTO_KEYS_FIELD)
        return list(dict.fromkeys(names))

    def should_record(self, context: OperationContext) -> bool:
        return self._config.enabled and context.record_history

    def creation_entry(
        self,
        document: "RecordDocument",
        context: OperationContext,
    ) -> HistoryEntry | None:
        """Entry for the first save, or None when history is suppressed."""
        if not self.should_record(context):
            HISTORY_ENTRIES.labels(kind="suppressed").inc()
            return None

        user_name = document.created_by or (context.user.user_name if context.user else None)
        entry = HistoryEntry.creation(
            datetime=history_datetime(self._clock),
            user_name=user_name,
            user_organisation=self._organisation_for(user_name, document),
        )
        HISTORY_ENTRIES.labels(kind="created").inc()
        return entry

    def update_entry(
        self,
        prior: "RecordDocument",
        pending: "RecordDocument",
        context: OperationContext,
    ) -> HistoryEntry | None:
        """Entry listing changed fields, or None when nothing changed."""
        if not self.should_record(context):
            HISTORY_ENTRIES.labels(kind="suppressed").inc()
            return None

        field_names = self.trackable_fields(pending.form_name)
        changes = diff(
            tracked_values(prior, field_names),
            tracked_values(pending, field_names),
            field_names,
        )
        if not changes:
            HISTORY_ENTRIES.labels(kind="unchanged").inc()
            return None

        user_name, organisation = self.attribution(pending, context)
        HISTORY_ENTRIES.labels(kind="updated").inc()
        logger.debug(
            "history_entry_built",
            record_id=str(pending.id),
            changed_fields=sorted(changes),
            user_name=user_name,
        )
        return HistoryEntry(
            changes=changes,
            datetime=history_datetime(self._clock),
            user_name=user_name,
            user_organisation=organisation,
        )

    def attribution(
        self,
        document: "RecordDocument",
        context: OperationContext,
    ) -> tuple[str | None, str | None]:
        """(user_name, organisation) a save is attributed to.

        The context user wins; otherwise the record's creator is used.
        """
        if context.user is not None:
            organisation = context.user.organisation or self._organisation_for(
                context.user.user_name, document
            )
            return context.user.user_name, organisation

        return document.created_by, self._organisation_for(document.created_by, document)

    def _organisation_for(self, user_name: str | None, document: "RecordDocument") -> str | None:
        if user_name:
            try:
                user = self._user_directory.find_by_user_name(user_name)
            except Exception as e:
                logger.warning("user_directory_unavailable", user_name=user_name, error=str(e))
                user = None
            if user is not None and user.organisation:
                return user.organisation
        return document.created_organisation or self._config.default_organisation
