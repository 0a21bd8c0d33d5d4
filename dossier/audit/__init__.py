"""Change auditing: field diffs, history entries and suppression scopes."""

from dossier.audit.auditor import PHOTO_KEYS_FIELD, ChangeAuditor, tracked_values
from dossier.audit.context import (
    OperationContext,
    as_user,
    clear_operation_context,
    get_operation_context,
    operation_context,
    set_operation_context,
    without_histories,
)
from dossier.audit.diff import diff, normalize
from dossier.audit.models import CREATION_CHANGE_KEY, HistoryEntry

__all__ = [
    "CREATION_CHANGE_KEY",
    "ChangeAuditor",
    "HistoryEntry",
    "OperationContext",
    "PHOTO_KEYS_FIELD",
    "as_user",
    "clear_operation_context",
    "diff",
    "get_operation_context",
    "normalize",
    "operation_context",
    "set_operation_context",
    "tracked_values",
    "without_histories",
]
