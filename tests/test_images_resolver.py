from __future__ import annotations

import logging
from pathlib import Path

import pytest

from blog2html.errors import AssetIOError, ImageNotFoundError
from blog2html.images.resolver import ImageResolver, find_image, read_dimensions
from blog2html.settings import BlogSettings


def test_resolve_returns_relative_path_and_copies(settings: BlogSettings, png) -> None:
    png(settings.source_images / "travel" / "beach.jpg", (400, 300))
    resolver = ImageResolver(settings)

    page = settings.html_root / "intro" / "page1.html"
    rel = resolver.resolve("beach.jpg", page)

    assert rel == "../images/travel/beach.jpg"
    copied = settings.html_root / "images" / "travel" / "beach.jpg"
    assert copied.is_file()
    assert resolver.copied == {copied}


def test_resolve_normalizes_name_to_lowercase(settings: BlogSettings, png) -> None:
    png(settings.source_images / "beach.jpg", (40, 30))
    resolver = ImageResolver(settings)
    assert resolver.resolve("Beach.JPG", settings.home_output) == "images/beach.jpg"


def test_resolve_is_idempotent_across_pages(settings: BlogSettings, png, monkeypatch) -> None:
    png(settings.source_images / "beach.jpg", (40, 30))
    resolver = ImageResolver(settings)

    copies: list[Path] = []
    import blog2html.images.resolver as mod

    real_copy = mod.shutil.copy2

    def counting_copy(src, dst):
        copies.append(Path(dst))
        return real_copy(src, dst)

    monkeypatch.setattr(mod.shutil, "copy2", counting_copy)

    first_page = settings.html_root / "intro" / "page1.html"
    second_page = settings.html_root / "travel" / "2019" / "page3.html"
    a = resolver.resolve("beach.jpg", first_page)
    b = resolver.resolve("beach.jpg", second_page)

    assert (first_page.parent / a).resolve() == (second_page.parent / b).resolve()
    assert len(copies) == 1


def test_existing_output_file_is_not_copied_again(settings: BlogSettings, png) -> None:
    png(settings.source_images / "beach.jpg", (40, 30))
    target = settings.html_images / "beach.jpg"
    target.parent.mkdir(parents=True)
    target.write_bytes(b"already there")

    ImageResolver(settings).resolve("beach.jpg", settings.home_output)
    assert target.read_bytes() == b"already there"


def test_missing_image_raises(settings: BlogSettings) -> None:
    resolver = ImageResolver(settings)
    with pytest.raises(ImageNotFoundError) as excinfo:
        resolver.resolve("nowhere.png", settings.home_output)
    assert excinfo.value.file_name == "nowhere.png"
    assert "nowhere.png" in str(excinfo.value)


def test_dimensions_decoded_only_for_checked_extensions(settings: BlogSettings, png) -> None:
    png(settings.source_images / "photo.png", (64, 48))
    png(settings.source_images / "drawing.gif", (10, 20))
    resolver = ImageResolver(settings)

    resolver.resolve("photo.png", settings.home_output)
    resolver.resolve("drawing.gif", settings.home_output)

    photo = resolver.info("photo.png")
    drawing = resolver.info("drawing.gif")
    assert (photo.width, photo.height) == (64, 48)
    assert not drawing.has_dimensions

    resolver.measure(drawing)
    assert (drawing.width, drawing.height) == (10, 20)


def test_repeated_use_is_logged_not_raised(settings: BlogSettings, png, caplog) -> None:
    png(settings.source_images / "beach.jpg", (40, 30))
    resolver = ImageResolver(settings)

    with caplog.at_level(logging.WARNING, logger="blog2html.images.resolver"):
        resolver.resolve("beach.jpg", settings.home_output)
        resolver.resolve("beach.jpg", settings.home_output)
        resolver.resolve("minibus.svg", settings.home_output)
        resolver.resolve("minibus.svg", settings.home_output)

    messages = [r.getMessage() for r in caplog.records]
    assert messages == ["Image beach.jpg is used 2 times"]


def test_info_requires_prior_resolution(settings: BlogSettings) -> None:
    with pytest.raises(KeyError):
        ImageResolver(settings).info("beach.jpg")


def test_find_image_prefers_files_then_sorted_subfolders(tmp_path: Path, png) -> None:
    png(tmp_path / "b" / "dup.png", (1, 1))
    png(tmp_path / "a" / "deep" / "dup.png", (2, 2))
    assert find_image("dup.png", tmp_path) == tmp_path / "a" / "deep" / "dup.png"

    png(tmp_path / "dup.png", (3, 3))
    assert find_image("dup.png", tmp_path) == tmp_path / "dup.png"
    assert find_image("dup.png", tmp_path / "missing") is None


def test_read_dimensions_rejects_undecodable_file(tmp_path: Path) -> None:
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")
    with pytest.raises(AssetIOError):
        read_dimensions(broken)
