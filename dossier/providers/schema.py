"""Field schema collaborator: which form fields are audited."""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field


class FieldDescriptor(BaseModel):
    """A form field definition."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Field key in record.fields")
    type: str = Field(default="text_field", description="Form field type")


class FieldSchemaProvider(ABC):
    """Supplies the trackable fields of a form."""

    @abstractmethod
    def trackable_fields(self, form_name: str) -> list[FieldDescriptor]:
        """Return the visible fields of a form, in form order."""
        pass


class StaticFieldSchemaProvider(FieldSchemaProvider):
    """Field schema held in memory, keyed by form name.

    Forms without an entry fall back to the fields registered under
    the "*" key, if any.
    """

    def __init__(self, forms: dict[str, list[FieldDescriptor]] | None = None) -> None:
        self._forms: dict[str, list[FieldDescriptor]] = dict(forms or {})

    def register(self, form_name: str, fields: list[FieldDescriptor]) -> None:
        """Set the fields of a form."""
        self._forms[form_name] = list(fields)

    def trackable_fields(self, form_name: str) -> list[FieldDescriptor]:
        fields = self._forms.get(form_name, self._forms.get("*", []))
        return list(fields)
