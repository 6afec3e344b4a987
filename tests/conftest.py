import logging
import sys
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from blog2html.parser.templating import write_default_templates  # noqa: E402
from blog2html.settings import BlogSettings  # noqa: E402

SVG = '<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16"></svg>\n'
NAV_ICONS = ("minibus.svg", "empty.svg", "previous.svg", "next.svg")


@pytest.fixture
def isolate_logging():
    """Undo the root logger changes made by ``configure_logging``.

    ``blog2html build`` installs a RichHandler bound to the runner's captured
    streams; request this fixture in CLI tests so the handler does not outlive
    the test.
    """
    handlers = logging.root.handlers[:]
    level = logging.root.level
    logging.root.handlers[:] = [logging.NullHandler()]

    yield

    logging.root.handlers[:] = handlers
    logging.root.setLevel(level)


def make_png(path: Path, size: tuple[int, int]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=(200, 120, 40)).save(path)
    return path


def write_page(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f'<?xml version="1.0" encoding="utf-8"?>\n<page>\n{body}\n</page>\n', encoding="utf-8")
    return path


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """A blog source tree with templates, navigation icons and static folders."""
    root = tmp_path / "blog"
    write_default_templates(root / "templates")

    icons = root / "images" / "icons"
    icons.mkdir(parents=True)
    for name in NAV_ICONS:
        (icons / name).write_text(SVG, encoding="utf-8")
    (icons / "intro.svg").write_text(SVG, encoding="utf-8")

    (root / "css").mkdir()
    (root / "css" / "blog.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (root / "script").mkdir()
    (root / "script" / "blog.js").write_text(
        'fetch("availablePages.json");\nconsole.log("blog.css loaded");\n', encoding="utf-8"
    )
    return root


@pytest.fixture
def settings(source_root: Path, tmp_path: Path) -> BlogSettings:
    return BlogSettings(
        source_root=source_root,
        html_root=tmp_path / "site",
        folders_to_copy=["css", "script"],
        images_to_check_for_multiple_use=frozenset({".jpg", ".png"}),
    )


@pytest.fixture
def png() -> Callable[[Path, tuple[int, int]], Path]:
    return make_png


@pytest.fixture
def page_xml() -> Callable[[Path, str], Path]:
    return write_page
