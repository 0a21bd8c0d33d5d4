"""Tests for attachment validation on save."""

import pytest

from dossier.attachments.validation import AttachmentKind, ValidationErrorType
from dossier.exceptions import RecordInvalidError
from tests.factories import UploadFactory


class TestPhotoValidation:
    """Tests for invalid photos."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "upload",
        [UploadFactory.gif_photo(), UploadFactory.bmp_photo(), UploadFactory.text_file()],
        ids=["gif", "bmp", "text"],
    )
    async def test_rejects_non_photo_formats(self, repository, store, upload) -> None:
        """Only png and jpeg photos are saved."""
        record = repository.new({"photo": upload})

        assert await record.save() is False
        assert record.is_new
        assert len(store) == 0
        assert [e.error_type for e in record.errors()] == [ValidationErrorType.UNSUPPORTED_FORMAT]

    @pytest.mark.asyncio
    async def test_rejects_large_photo(self, repository) -> None:
        """Photos over 10 MB are rejected."""
        record = repository.new({"photo": UploadFactory.large_photo()})

        assert record.is_valid() is False
        assert await record.save() is False
        assert record.errors()[0].error_type is ValidationErrorType.TOO_LARGE

    @pytest.mark.asyncio
    async def test_accepts_png(self, repository) -> None:
        """PNG photos are accepted."""
        record = repository.new({"photo": UploadFactory.png_photo()})
        assert await record.save() is True

    @pytest.mark.asyncio
    async def test_valid_reassignment_clears_error(self, repository) -> None:
        """Only the latest photo assignment is validated."""
        record = repository.new({"photo": UploadFactory.gif_photo()})
        assert await record.save() is False

        record.set_photo(UploadFactory.photo())

        assert record.is_valid()
        assert await record.save() is True
        assert len(record.photo_keys) == 1

    @pytest.mark.asyncio
    async def test_invalid_photo_on_saved_record(self, repository, store) -> None:
        """A bad upload on an existing record leaves the stored state alone."""
        record = await repository.create({"photo": UploadFactory.photo()})

        assert await record.update_attributes({"photo": UploadFactory.bmp_photo()}) is False

        stored = await store.get(record.id)
        assert len(stored.photo_keys) == 1
        assert stored.rev == 1


class TestAudioValidation:
    """Tests for invalid audio."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content_type", ["audio/mpeg", "audio/amr"])
    async def test_accepts_mp3_and_amr(self, repository, content_type: str) -> None:
        """MP3 and AMR recordings are saved."""
        record = repository.new({"audio": UploadFactory.audio(content_type)})
        assert await record.save() is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content_type", ["audio/wav", "audio/ogg"])
    async def test_rejects_other_audio(self, repository, content_type: str) -> None:
        """WAV and OGG recordings are rejected."""
        record = repository.new({"audio": UploadFactory.audio(content_type)})

        assert await record.save() is False
        (error,) = record.errors()
        assert error.kind is AttachmentKind.AUDIO
        assert error.error_type is ValidationErrorType.UNSUPPORTED_FORMAT

    @pytest.mark.asyncio
    async def test_rejects_large_audio(self, repository) -> None:
        """Audio over 10 MB is rejected."""
        record = repository.new({"audio": UploadFactory.large_audio()})
        assert await record.save() is False

    @pytest.mark.asyncio
    async def test_replacing_invalid_audio(self, repository, clock) -> None:
        """A valid recording replaces and removes a rejected one."""
        record = repository.new({"audio": UploadFactory.audio("audio/wav")})
        rejected = record.pending_audio().name
        assert await record.save() is False

        clock.advance(seconds=1)
        record.set_audio(UploadFactory.audio("audio/amr"))

        assert await record.save() is True
        assert not record.has_attachment(rejected)


class TestStrictSave:
    """Tests for save_or_raise."""

    @pytest.mark.asyncio
    async def test_raises_with_errors(self, repository, store) -> None:
        """Strict saves raise RecordInvalidError carrying every error."""
        record = repository.new({
            "photo": UploadFactory.gif_photo(),
            "audio": UploadFactory.audio("audio/ogg"),
        })

        with pytest.raises(RecordInvalidError) as exc_info:
            await record.save_or_raise()

        assert {e.kind for e in exc_info.value.errors} == {AttachmentKind.PHOTO, AttachmentKind.AUDIO}
        assert "unsupported_format" in str(exc_info.value)
        assert len(store) == 0
