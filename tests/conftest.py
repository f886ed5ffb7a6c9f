"""Shared fixtures: offscreen Qt, sample records, fake capture surface."""

import io
import os
from pathlib import Path

import pytest
from PIL import Image

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from cardcreator.controllers.capture_builder import Hotspot
from cardcreator.schemas.profile_schema import ProfileRecord
from cardcreator.storage import JsonKeyValueStore, RecentCardsStore
from cardcreator.utils.assets import encode_data_uri
from cardcreator.utils.geometry import PixelRect
from cardcreator.utils.lazy_weasyprint import is_weasyprint_available


requires_weasyprint = pytest.mark.skipif(
    not is_weasyprint_available(), reason="WeasyPrint or its system libraries unavailable"
)


@pytest.fixture(scope="session")
def qapp():
    QtWidgets = pytest.importorskip("PySide6.QtWidgets")
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


@pytest.fixture
def ana_li() -> ProfileRecord:
    return ProfileRecord.from_form_data({
        "name": "Ana Li",
        "linkedinUrl": "linkedin.com/in/anali",
        "highlights": ["Shipped v2"],
        "coreSkills": ["Go", "SQL", ""],
        "placementType": "Contractor",
    })


@pytest.fixture
def png_data_uri() -> str:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), "#336699").save(buffer, format="PNG")
    return encode_data_uri(buffer.getvalue(), "image/png")


@pytest.fixture
def history(tmp_path: Path) -> RecentCardsStore:
    return RecentCardsStore(JsonKeyValueStore(tmp_path / "history.json"))


class FakeSurface:
    """In-memory capture surface recording how it was driven."""

    def __init__(self, size=(1920, 1080), hotspots=None, fail_with=None):
        self.size = size
        self._hotspots = list(hotspots or [])
        self.fail_with = fail_with
        self.state = "scaled:0.5"
        self.calls = []

    def surface_state(self):
        self.calls.append("state")
        return self.state

    def force_unscaled(self):
        self.calls.append("force")
        self.state = "unscaled"

    def restore_state(self, state):
        self.calls.append("restore")
        self.state = state

    def rasterize(self):
        self.calls.append("rasterize")
        if self.fail_with is not None:
            raise self.fail_with
        assert self.state == "unscaled"
        return Image.new("RGB", self.size, "#000000")

    def hotspots(self):
        return list(self._hotspots)


@pytest.fixture
def fake_surface():
    return FakeSurface(hotspots=[
        Hotspot("linkedin.com/in/anali", PixelRect(100, 200, 300, 240), "contact"),
    ])


@pytest.fixture
def make_surface():
    return FakeSurface
