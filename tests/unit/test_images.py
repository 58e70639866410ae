from pathlib import Path

import pytest

from doc_convert.errors import ImageWriteError
from doc_convert.render.images import ImageStore, is_data_uri

PNG_DATA_URI = "data:image/png;base64,iVBORw0KGgo="


def test_sequence_names_and_links(tmp_path):
    store = ImageStore(tmp_path / "images", prefix="report_image")
    assert store.save_data_uri(PNG_DATA_URI) == "./images/report_image_001.png"
    assert store.save_data_uri(PNG_DATA_URI) == "./images/report_image_002.png"
    assert [p.name for p in store.saved] == ["report_image_001.png", "report_image_002.png"]


def test_caller_supplied_ids_and_extension_aliases(tmp_path):
    ids = iter(["first", "second"])
    store = ImageStore(tmp_path, id_factory=lambda: next(ids), link_prefix="media")
    assert store.save_data_uri("data:image/jpeg;base64,/9j/4A==") == "media/first.jpg"
    assert store.save_data_uri("data:image/svg+xml;base64,PHN2Zy8+") == "media/second.svg"
    assert (tmp_path / "second.svg").read_bytes() == b"<svg/>"


def test_rejects_bad_payloads(tmp_path):
    store = ImageStore(tmp_path / "images")
    with pytest.raises(ImageWriteError):
        store.save_data_uri("data:image/png;base64,not base64!!")
    with pytest.raises(ImageWriteError):
        store.save_data_uri("https://example.org/a.png")
    assert not (tmp_path / "images").exists()


def test_write_is_retried(tmp_path, monkeypatch):
    calls = []
    original = Path.write_bytes

    def flaky(self, data):
        calls.append(self)
        if len(calls) == 1:
            raise OSError("disk busy")
        return original(self, data)

    monkeypatch.setattr(Path, "write_bytes", flaky)
    store = ImageStore(tmp_path, attempts=2)
    link = store.save_data_uri(PNG_DATA_URI)
    assert link.endswith("image_001.png")
    assert len(calls) == 2


def test_gives_up_after_attempts(tmp_path, monkeypatch):
    def broken(self, data):
        raise OSError("read-only")

    monkeypatch.setattr(Path, "write_bytes", broken)
    with pytest.raises(ImageWriteError, match="read-only"):
        ImageStore(tmp_path, attempts=3).save_data_uri(PNG_DATA_URI)


def test_is_data_uri():
    assert is_data_uri(PNG_DATA_URI)
    assert not is_data_uri("images/a.png")
