"""Serialization of the generated HTML, JSON and CSS files."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from blog2html.errors import AssetIOError

logger = logging.getLogger(__name__)


def atomic_write_text(path: Path, data: str, *, encoding: str = "utf-8") -> None:
    """Atomically write text to a file by writing to a temp file then replacing.

    Ensures parent directories exist and minimizes risk of partial writes.
    """
    try:
        if not path.parent.exists():
            logger.debug("Creating directory %s", path.parent)
        path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile("w", encoding=encoding, dir=str(path.parent), delete=False) as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
            tmp_path = Path(tmp.name)
        os.replace(tmp_path, path)
    except OSError as exc:
        raise AssetIOError(path, cause=exc) from exc


def render_html(soup: BeautifulSoup, indentation: str) -> str:
    formatter = HTMLFormatter(entity_substitution=EntitySubstitution.substitute_html, indent=indentation)
    return soup.prettify(formatter=formatter)


def save_html(soup: BeautifulSoup, path: Path, indentation: str) -> None:
    logger.info("Saving HTML file %s", path)
    atomic_write_text(path, render_html(soup, indentation))


def save_json(data: Any, path: Path) -> None:
    logger.info("Saving JSON file %s", path)
    atomic_write_text(path, json.dumps(data, ensure_ascii=False) + "\n")


def save_text(text: str, path: Path) -> None:
    logger.info("Saving file %s", path)
    atomic_write_text(path, text)


__all__ = ["atomic_write_text", "render_html", "save_html", "save_json", "save_text"]
