"""Mock image processor for testing."""

from typing import Any

from dossier.providers.image.base import ImageProcessor


class MockImageProcessor(ImageProcessor):
    """Deterministic byte transforms instead of pixel work.

    Rotation appends a marker so rotated bytes always differ from the
    input; resizing truncates. Calls are recorded for assertions.
    """

    def __init__(self) -> None:
        self._call_history: list[dict[str, Any]] = []

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def rotate(self, data: bytes, degrees: int) -> bytes:
        self._call_history.append({"op": "rotate", "degrees": degrees, "size": len(data)})
        return data + f"|rotated:{degrees}".encode()

    def resize(self, data: bytes, width: int, height: int | None = None) -> bytes:
        self._call_history.append(
            {"op": "resize", "width": width, "height": height, "size": len(data)}
        )
        return data[:width] + f"|{width}x{height or width}".encode()
