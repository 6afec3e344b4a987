from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from blog2html.assets.renamer import RenamedAssets, copy_folders, discover, randomized_name
from blog2html.errors import AssetIOError
from blog2html.ids import compute_cache_bust_token
from blog2html.settings import BlogSettings


def test_randomized_name_keeps_stem_and_extension() -> None:
    assert randomized_name(Path("css/Blog.CSS"), "abc123") == "blog-abc123.css"


def test_discover_only_renames_configured_extensions(settings: BlogSettings) -> None:
    (settings.source_root / "css" / "logo.svg").write_text("<svg/>", encoding="utf-8")
    renamed = discover(settings.folders_to_copy, settings, run_id="run-1")

    assert set(renamed) == {"blog.css", "blog.js"}
    token = compute_cache_bust_token("run-1", "css/blog.css")
    assert renamed["blog.css"] == f"blog-{token}.css"


def test_discover_tokens_change_between_runs(settings: BlogSettings) -> None:
    first = discover(settings.folders_to_copy, settings, run_id="run-1")
    second = discover(settings.folders_to_copy, settings, run_id="run-2")
    assert first["blog.js"] != second["blog.js"]
    assert discover(settings.folders_to_copy, settings, run_id="run-1") == first


def test_discover_missing_folder_is_fatal(settings: BlogSettings) -> None:
    with pytest.raises(AssetIOError):
        discover(["fonts"], settings)


def test_rewrite_text_is_single_pass_longest_first() -> None:
    renamed = RenamedAssets({"min.js": "min-1.js", "app.min.js": "app.min-2.js"})
    text = 'load("app.min.js"); load("min.js");'
    assert renamed.rewrite_text(text) == 'load("app.min-2.js"); load("min-1.js");'


def test_rewrite_matches_whole_file_names_only() -> None:
    renamed = RenamedAssets({"layout.css": "layout-1.css", "main.css": "main-2.css"})
    text = (
        'href="../css/image-layout.css" href="../css/layout.css" '
        "url(domain.css) url(main.css) layout.css.map 'main.css'"
    )
    assert renamed.rewrite_text(text) == (
        'href="../css/image-layout.css" href="../css/layout-1.css" '
        "url(domain.css) url(main-2.css) layout.css.map 'main-2.css'"
    )


def test_rewrite_soup_touches_attributes_and_inline_code() -> None:
    renamed = RenamedAssets({"blog.js": "blog-x.js", "blog.css": "blog-y.css"})
    soup = BeautifulSoup(
        '<html><head><link rel="stylesheet" href="../css/blog.css">'
        '<script src="../script/blog.js"></script>'
        '<style>@import "blog.css";</style></head>'
        '<body><p>blog.js is mentioned in text</p>'
        '<script>load("blog.js")</script></body></html>',
        "html.parser",
    )
    html = str(renamed.rewrite_soup(soup))

    assert 'href="../css/blog-y.css"' in html
    assert 'src="../script/blog-x.js"' in html
    assert '@import "blog-y.css";' in html
    assert 'load("blog-x.js")' in html
    # Plain text content is not a reference.
    assert "<p>blog.js is mentioned in text</p>" in html


def test_copy_round_trip(settings: BlogSettings) -> None:
    (settings.source_root / "script" / "about.html").write_text(
        '<html><head><script src="blog.js"></script>'
        '<link href="../css/blog.css" rel="stylesheet"></head><body></body></html>',
        encoding="utf-8",
    )
    (settings.source_root / "css" / "fonts").mkdir()
    (settings.source_root / "css" / "fonts" / "font.woff").write_bytes(b"\x00\x01blog.css")

    renamed = discover(settings.folders_to_copy, settings, run_id="run-1")
    count = copy_folders(settings.folders_to_copy, settings, renamed)
    assert count == 4

    out = settings.html_root
    assert not (out / "css" / "blog.css").exists()
    assert (out / "css" / renamed["blog.css"]).is_file()
    assert (out / "script" / renamed["blog.js"]).is_file()

    for rewritten in (out / "script" / "about.html", out / "script" / renamed["blog.js"]):
        text = rewritten.read_text(encoding="utf-8")
        for original in renamed:
            assert original not in text
        assert any(new_name in text for new_name in renamed.values())

    # Files outside the rewrite set are copied byte for byte.
    assert (out / "css" / "fonts" / "font.woff").read_bytes() == b"\x00\x01blog.css"


def test_copy_unreadable_html_is_fatal(settings: BlogSettings) -> None:
    (settings.source_root / "script" / "broken.html").write_bytes(b"\xff\xfe\xfa")
    renamed = discover(settings.folders_to_copy, settings, run_id="run-1")
    with pytest.raises(AssetIOError):
        copy_folders(settings.folders_to_copy, settings, renamed)
