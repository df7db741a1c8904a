import pytest
from datetime import datetime
from pathlib import Path
from card_importer.models import CameraFile


@pytest.fixture
def card(tmp_path):
    """Returns a fake camera card with an empty DCIM/100CANON folder."""
    root = tmp_path / "media" / "EOS_DIGITAL"
    (root / "DCIM" / "100CANON").mkdir(parents=True)
    return root


@pytest.fixture
def make_camera_file(card):
    """Writes a file onto the card and returns it as a CameraFile."""
    def _make(name: str, timestamp: datetime, content: bytes = None) -> CameraFile:
        path = card / "DCIM" / "100CANON" / name
        path.write_bytes(content if content is not None else name.encode())
        return CameraFile(path=path, timestamp=timestamp)
    return _make


@pytest.fixture
def archive(tmp_path):
    root = tmp_path / "Pictures"
    root.mkdir()
    return root
