import io
import re
import zipfile

import pytest
from PIL import Image

from mocktsy.catalog import UnknownMockupError
from mocktsy.exporter import archive_entries, archive_name, export_all, export_pdf, slugify, write_archive
from mocktsy.plan import BuildPlanItem
from mocktsy.render import OutputSize

from conftest import FakeLoader, solid

SMALL = OutputSize(120, 120)


def _items():
    return [
        BuildPlanItem(id=1, name="Hero", fields={"clipart_title": "Spring"}, images=("a.png",)),
        BuildPlanItem(id=19, name="How", fields={"HOW_HEADING": "Easy as 1-2-3"}),
        BuildPlanItem(id=17, name="Palette", palette=("#ff0000",) * 6),
    ]


def _loader():
    return FakeLoader({"a.png": solid((255, 0, 0, 255))})


def test_slugify():
    assert slugify("My Cute Set!! 2024") == "my-cute-set-2024"
    assert slugify("  --Hello__World--  ") == "hello-world"
    assert slugify("") == "clipart"
    assert slugify("☕☕") == "clipart"


def test_archive_name():
    assert archive_name("Spring Florals", 3) == "spring-florals-mockup-3.png"


def test_export_all_writes_one_png_per_item_in_order():
    data = export_all(_items(), SMALL, "Spring Florals", loader=_loader())
    assert archive_entries(data) == [
        "spring-florals-mockup-1.png",
        "spring-florals-mockup-2.png",
        "spring-florals-mockup-3.png",
    ]
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        first = Image.open(io.BytesIO(zf.read("spring-florals-mockup-1.png")))
        assert first.format == "PNG"
        assert first.size == (120, 120)
        assert zf.getinfo("spring-florals-mockup-1.png").compress_type == zipfile.ZIP_DEFLATED


def test_export_all_reports_progress():
    calls = []
    export_all(_items(), SMALL, "x", loader=_loader(), on_progress=lambda done, total: calls.append((done, total)))
    assert calls == [(1, 3), (2, 3), (3, 3)]


def test_export_all_without_surface_gives_empty_archive():
    calls = []
    data = export_all(_items(), OutputSize(0, 0), "x", loader=_loader(), on_progress=lambda *a: calls.append(a))
    assert archive_entries(data) == []
    assert calls == []


def test_export_all_empty_plan():
    assert archive_entries(export_all([], SMALL, "x", loader=_loader())) == []


def test_export_all_unknown_mockup_fails_loudly():
    with pytest.raises(UnknownMockupError):
        export_all([BuildPlanItem(id=77, name="?")], SMALL, "x", loader=_loader())


def test_export_pdf_has_one_page_per_item():
    data = export_pdf(_items(), SMALL, loader=_loader())
    assert data.startswith(b"%PDF")
    assert re.search(rb"/Count\s+3\b", data)


def test_export_pdf_empty_plan():
    assert export_pdf([], SMALL, loader=_loader()) == b""


def test_write_archive(tmp_path):
    path = write_archive(b"zip-bytes", tmp_path / "out", "Spring Florals")
    assert path == tmp_path / "out" / "spring-florals-mockups.zip"
    assert path.read_bytes() == b"zip-bytes"
