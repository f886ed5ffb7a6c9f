import pytest
from PIL import Image

from cardcreator.common.errors import AssetResolutionError, InputValidationError
from cardcreator.utils.assets import AssetRegistry, decode_data_uri, load_image_file


def test_shipped_assets_resolve():
    registry = AssetRegistry()
    assert registry.resolve("logo").suffix == ".svg"
    assert registry.uri("status.contract_to_hire").startswith("file://")


def test_unknown_key_raises():
    with pytest.raises(AssetResolutionError) as excinfo:
        AssetRegistry().resolve("status.freelancer")
    assert excinfo.value.key == "status.freelancer"


def test_load_image_file(tmp_path):
    path = tmp_path / "me.png"
    Image.new("RGB", (8, 8), "#FF0000").save(path)
    payload = load_image_file(path)
    assert payload.startswith("data:image/png;base64,")
    mime, raw = decode_data_uri(payload)
    assert mime == "image/png" and raw == path.read_bytes()


def test_load_image_file_rejects_non_images(tmp_path):
    text = tmp_path / "notes.txt"
    text.write_text("hello")
    with pytest.raises(InputValidationError):
        load_image_file(text)

    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not a png")
    with pytest.raises(InputValidationError) as excinfo:
        load_image_file(broken)
    assert "broken.png" in excinfo.value.user_message

    with pytest.raises(InputValidationError):
        load_image_file(tmp_path / "missing.jpg")
