"""Tests for change histories on records."""

from datetime import UTC, datetime

import pytest

from dossier.audit.context import OperationContext, as_user, without_histories
from dossier.audit.models import HistoryEntry
from dossier.exceptions import PersistenceError
from dossier.providers.users import CurrentUser, UserDirectory
from dossier.records import InMemoryDocumentStore, RecordRepository
from tests.factories import UploadFactory


class RejectingDocumentStore(InMemoryDocumentStore):
    """Store that accepts creates but silently drops updates."""

    async def save(self, document):
        return None


class UnreachableDocumentStore(InMemoryDocumentStore):
    """Store that accepts creates but loses its connection on updates."""

    async def save(self, document):
        raise ConnectionError("store unreachable")


class UnavailableUserDirectory(UserDirectory):
    """Directory that cannot be reached."""

    def find_by_user_name(self, user_name):
        raise RuntimeError("account service down")


class TestCreationHistory:
    """Tests for the entry written when a record is created."""

    @pytest.mark.asyncio
    async def test_creation_entry(self, repository) -> None:
        """The creator and their organisation are recorded."""
        record = await repository.create({"name": "Jorge", "created_by": "me"})

        assert record.histories == [
            HistoryEntry(
                changes={"basemodel": {"created": None}},
                datetime="2010-01-20 17:10:32UTC",
                user_name="me",
                user_organisation="UNICEF",
            )
        ]

    @pytest.mark.asyncio
    async def test_creation_suppressed(self, repository) -> None:
        """Records created without histories have none."""
        with without_histories():
            record = await repository.create({"name": "Jorge", "created_by": "me"})

        assert not record.is_new
        assert record.histories == []

    @pytest.mark.asyncio
    async def test_creation_with_explicit_context(self, repository) -> None:
        """save(context=...) takes precedence over the ambient scope."""
        record = await repository.create(
            {"name": "Jorge"},
            context=OperationContext(user=CurrentUser(user_name="me")),
        )
        assert record.histories[0].user_name == "me"


    @pytest.mark.asyncio
    async def test_creation_without_user_directory(self, services) -> None:
        """An unreachable user directory does not block the save."""
        services.user_directory = UnavailableUserDirectory()
        record = await RecordRepository(services).create(
            {"name": "Jorge", "created_by": "me", "created_organisation": "IRC"}
        )

        assert not record.is_new
        assert record.histories[0].user_organisation == "IRC"


class TestUpdateHistory:
    """Tests for entries written when a saved record changes."""

    @pytest.mark.asyncio
    async def test_field_change(self, repository, clock) -> None:
        """Changed fields are logged with their old and new values."""
        record = await repository.create({"last_known_location": "Kampala", "created_by": "me"})
        clock.set(datetime(2010, 1, 14, 14, 5, 0, tzinfo=UTC))

        await record.update_attributes({"last_known_location": "Kigali"})

        assert len(record.histories) == 2
        latest = record.histories[0]
        assert latest.changes == {"last_known_location": {"from": "Kampala", "to": "Kigali"}}
        assert latest.datetime == "2010-01-14 14:05:00UTC"
        assert latest.user_name == "me"
        assert latest.user_organisation == "UNICEF"

    @pytest.mark.asyncio
    async def test_multiple_fields(self, repository) -> None:
        """One entry holds every field changed by a save."""
        record = await repository.create({"age": "8", "origin": "Haiti"})

        await record.update_attributes({"age": "9", "origin": "Chile"})

        assert record.histories[0].changes == {
            "age": {"from": "8", "to": "9"},
            "origin": {"from": "Haiti", "to": "Chile"},
        }

    @pytest.mark.asyncio
    async def test_new_field_value(self, repository) -> None:
        """A field set for the first time is logged from None."""
        record = await repository.create({"name": "Jorge"})
        await record.update_attributes({"gender": "male"})
        assert record.histories[0].changes == {"gender": {"from": None, "to": "male"}}

    @pytest.mark.asyncio
    async def test_whitespace_only_change(self, repository) -> None:
        """Padding a value with whitespace is not a change."""
        record = await repository.create({"origin": "Haiti"})

        await record.update_attributes({"origin": "   Haiti  "})

        assert len(record.histories) == 1

    @pytest.mark.asyncio
    async def test_blank_to_empty(self, repository) -> None:
        """Setting a blank field to whitespace is not a change."""
        record = await repository.create({"origin": ""})
        await record.update_attributes({"origin": "   "})
        assert len(record.histories) == 1

    @pytest.mark.asyncio
    async def test_no_change(self, repository) -> None:
        """Saving without changes adds no entry."""
        record = await repository.create({"age": "8"})
        await record.save()
        assert len(record.histories) == 1

    @pytest.mark.asyncio
    async def test_flag_and_reunited_fields(self, repository) -> None:
        """Default tracked fields are logged for every form."""
        record = await repository.create({"name": "Jorge"})

        await record.update_attributes({
            "flag": "true",
            "flag_message": "Duplicate record!",
            "reunited": "true",
            "reunited_message": "Found the family",
        })

        assert record.histories[0].changes == {
            "flag": {"from": None, "to": "true"},
            "flag_message": {"from": None, "to": "Duplicate record!"},
            "reunited": {"from": None, "to": "true"},
            "reunited_message": {"from": None, "to": "Found the family"},
        }

    @pytest.mark.asyncio
    async def test_untracked_field(self, repository) -> None:
        """Fields outside the form schema are not logged."""
        record = await repository.create({"nickname": "J"})
        await record.update_attributes({"nickname": "Jo"})
        assert len(record.histories) == 1

    @pytest.mark.asyncio
    async def test_without_histories(self, repository) -> None:
        """Suppressed saves keep existing entries but add none."""
        record = await repository.create({"age": "8"})

        with without_histories():
            await record.update_attributes({"age": "9"})

        assert len(record.histories) == 1
        assert record["age"] == "9"

        await record.update_attributes({"age": "10"})
        assert record.histories[0].changes == {"age": {"from": "9", "to": "10"}}

    @pytest.mark.asyncio
    async def test_as_user(self, repository) -> None:
        """Changes made as another user are attributed to them."""
        record = await repository.create({"age": "8", "created_by": "me"})

        with as_user(CurrentUser(user_name="rapidftr", organisation="stc")):
            await record.update_attributes({"age": "9"})

        assert record.histories[0].user_name == "rapidftr"
        assert record.histories[0].user_organisation == "stc"


class TestPhotoHistory:
    """Tests for photo key changes in histories."""

    @pytest.mark.asyncio
    async def test_photo_added(self, repository) -> None:
        """New photos are logged as added keys."""
        record = await repository.create({"photo": UploadFactory.photo("jorge")})
        first = record.photo_keys[0]

        await record.update_attributes({"photo": UploadFactory.photo("jeff")})

        second = record.photo_keys[1]
        assert record.histories[0].changes["photo_keys"] == {"added": [second]}
        assert first not in record.histories[0].changes["photo_keys"]["added"]

    @pytest.mark.asyncio
    async def test_photo_deleted(self, repository) -> None:
        """Deleted photos are logged as deleted keys."""
        record = await repository.create(
            {"photos": [UploadFactory.photo("jorge"), UploadFactory.photo("jeff")]}
        )
        first = record.photo_keys[0]

        record.delete_photos([first])
        await record.save()

        assert record.histories[0].changes["photo_keys"] == {"deleted": [first]}

    @pytest.mark.asyncio
    async def test_photo_rotated(self, repository, clock) -> None:
        """A rotation is an added and a deleted key."""
        record = await repository.create({"photo": UploadFactory.photo()})
        old = record.photo_keys[0]
        clock.advance(seconds=1)

        rotated = record.rotate_photo(90)
        await record.save()

        assert record.histories[0].changes["photo_keys"] == {
            "added": [rotated.name],
            "deleted": [old],
        }


class TestHistoryRollback:
    """Tests for history consistency when persistence fails."""

    @pytest.mark.asyncio
    async def test_conflict_discards_entry(self, repository) -> None:
        """A stale save keeps neither the change entry nor a new revision."""
        record = await repository.create({"age": "8"})
        other = await repository.get(record.id)
        await other.update_attributes({"age": "9"})

        assert await record.update_attributes({"age": "10"}) is False

        assert len(record.histories) == 1
        assert record.document.rev == 1
        assert record["age"] == "10"

    @pytest.mark.asyncio
    async def test_rejected_update_discards_entry(self, services) -> None:
        """A store that does not accept the write leaves no entry behind."""
        services.store = RejectingDocumentStore()
        record = await RecordRepository(services).create({"age": "8"})

        assert await record.update_attributes({"age": "9"}) is False
        assert len(record.histories) == 1

    @pytest.mark.asyncio
    async def test_reload_after_failure(self, repository) -> None:
        """Reloading restores the persisted state."""
        record = await repository.create({"age": "8"})
        other = await repository.get(record.id)
        await other.update_attributes({"age": "9"})
        await record.update_attributes({"age": "10"})

        await record.reload()

        assert record["age"] == "9"
        assert len(record.histories) == 2
        assert record.document.rev == 2

    @pytest.mark.asyncio
    async def test_store_error_discards_entry(self, services) -> None:
        """A store raising its own error leaves no entry behind."""
        services.store = UnreachableDocumentStore()
        record = await RecordRepository(services).create({"age": "8"})

        assert await record.update_attributes({"age": "9"}) is False
        assert len(record.histories) == 1

    @pytest.mark.asyncio
    async def test_store_error_raised_as_persistence_error(self, services) -> None:
        """save_or_raise reports store errors as PersistenceError."""
        services.store = UnreachableDocumentStore()
        record = await RecordRepository(services).create({"age": "8"})
        record["age"] = "9"

        with pytest.raises(PersistenceError) as exc_info:
            await record.save_or_raise()

        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert len(record.histories) == 1
