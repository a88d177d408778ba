import subprocess

import pytest
from PIL import Image

from imgassist.errors import MeasureError
from imgassist.executable_utils import imagemagick_command
from imgassist.measurers import (
    CachingMeasurer,
    IdentifyMeasurer,
    PillowMeasurer,
    create_measurer,
)
from imgassist.protocols import ImageMeasurer


def test_pillow_measurer_reads_size(tmp_path):
    path = tmp_path / "pic.png"
    Image.new("RGB", (30, 12), color="blue").save(path)
    assert PillowMeasurer().measure(str(path)) == (30, 12)


def test_pillow_measurer_missing_file(tmp_path):
    with pytest.raises(MeasureError) as excinfo:
        PillowMeasurer().measure(str(tmp_path / "missing.png"))
    assert "missing.png" in str(excinfo.value)


def test_pillow_measurer_corrupt_file(tmp_path):
    path = tmp_path / "fake.jpg"
    path.write_text("not an image", encoding="utf-8")
    with pytest.raises(MeasureError):
        PillowMeasurer().measure(str(path))


def test_pillow_measurer_null_byte_in_path():
    with pytest.raises(MeasureError):
        PillowMeasurer().measure("a\x00.png")


def _fake_identify(monkeypatch, stdout="", stderr="", returncode=0):
    calls = []

    def fake_run(cmd, capture_output=None, text=None):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

    monkeypatch.setattr(
        "imgassist.measurers.imagemagick_command", lambda tool: ["/usr/bin/identify"]
    )
    monkeypatch.setattr(subprocess, "run", fake_run)
    return calls


def test_identify_measurer_parses_output(monkeypatch):
    calls = _fake_identify(monkeypatch, stdout="640 480")
    assert IdentifyMeasurer().measure("images/pic.jpg") == (640, 480)
    assert calls == [["/usr/bin/identify", "-format", "%w %h", "images/pic.jpg"]]


@pytest.mark.parametrize("stdout", ["640", "640 480 2", "abc def", "", "0 10"])
def test_identify_measurer_rejects_bad_output(monkeypatch, stdout):
    _fake_identify(monkeypatch, stdout=stdout)
    with pytest.raises(MeasureError):
        IdentifyMeasurer().measure("pic.jpg")


def test_identify_measurer_failure(monkeypatch):
    _fake_identify(monkeypatch, stderr="unable to open image", returncode=1)
    with pytest.raises(MeasureError, match="unable to open image"):
        IdentifyMeasurer().measure("pic.jpg")


def test_identify_measurer_without_imagemagick(monkeypatch):
    monkeypatch.setattr("imgassist.measurers.imagemagick_command", lambda tool: None)
    with pytest.raises(MeasureError, match="not found"):
        IdentifyMeasurer().measure("pic.jpg")


def test_imagemagick_command_prefers_magick(monkeypatch):
    found = {"magick": "/usr/bin/magick", "identify": "/usr/bin/identify"}
    monkeypatch.setattr("shutil.which", lambda name: found.get(name))
    assert imagemagick_command("identify") == ["/usr/bin/magick", "identify"]

    del found["magick"]
    assert imagemagick_command("identify") == ["/usr/bin/identify"]

    found.clear()
    assert imagemagick_command("convert") is None


class CountingMeasurer:
    def __init__(self):
        self.calls = []

    def measure(self, path):
        self.calls.append(path)
        return (10, 20)


def test_caching_measurer_measures_each_path_once():
    inner = CountingMeasurer()
    measurer = CachingMeasurer(inner)
    assert measurer.measure("a.png") == (10, 20)
    assert measurer.measure("a.png") == (10, 20)
    assert measurer.measure("b.png") == (10, 20)
    assert inner.calls == ["a.png", "b.png"]


def test_create_measurer():
    assert isinstance(create_measurer("pillow"), CachingMeasurer)
    assert isinstance(create_measurer("pillow", cache=False), PillowMeasurer)
    assert isinstance(create_measurer("imagemagick", cache=False), IdentifyMeasurer)
    assert isinstance(create_measurer("pillow"), ImageMeasurer)
    with pytest.raises(ValueError):
        create_measurer("gimp")
