"""Shared test fixtures for the Dossier test suite."""

import os
from collections.abc import Callable, Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from dossier.audit.context import clear_operation_context
from dossier.config.settings import Settings, set_toml_config
from dossier.providers.clock import FixedClock
from dossier.providers.image import MockImageProcessor
from dossier.providers.schema import FieldDescriptor, StaticFieldSchemaProvider
from dossier.providers.users import CurrentUser, InMemoryUserDirectory
from dossier.records import InMemoryDocumentStore, RecordRepository, RecordServices

JAN_20_2010 = datetime(2010, 1, 20, 17, 10, 32, tzinfo=UTC)


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory."""

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            if self.original_env[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_env[key]


@pytest.fixture
def env_override() -> Callable[[dict[str, str]], EnvOverrideContext]:
    """Context manager for temporarily setting environment variables."""

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    return _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear cached settings and TOML state around each test."""
    from dossier.config import get_settings

    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})


@pytest.fixture(autouse=True)
def reset_operation_context() -> Generator[None, None, None]:
    """Make sure no suppression or user scope leaks between tests."""
    clear_operation_context()
    yield
    clear_operation_context()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(JAN_20_2010)


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def image_processor() -> MockImageProcessor:
    return MockImageProcessor()


@pytest.fixture
def user_directory() -> InMemoryUserDirectory:
    return InMemoryUserDirectory([CurrentUser(user_name="me", organisation="UNICEF")])


@pytest.fixture
def schema_provider() -> StaticFieldSchemaProvider:
    """Form fields audited by default in record tests."""
    return StaticFieldSchemaProvider({
        "default": [
            FieldDescriptor(name="last_known_location", type="text_field"),
            FieldDescriptor(name="age", type="text_field"),
            FieldDescriptor(name="origin", type="text_field"),
            FieldDescriptor(name="gender", type="radio_button"),
            FieldDescriptor(name="current_photo_key", type="photo_upload_box"),
            FieldDescriptor(name="recorded_audio", type="audio_upload_box"),
        ],
    })


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def services(
    store, clock, image_processor, user_directory, schema_provider, settings
) -> RecordServices:
    return RecordServices(
        store=store,
        clock=clock,
        image_processor=image_processor,
        user_directory=user_directory,
        schema_provider=schema_provider,
        settings=settings,
    )


@pytest.fixture
def repository(services) -> RecordRepository:
    return RecordRepository(services)
