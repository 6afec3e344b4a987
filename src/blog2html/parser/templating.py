from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from blog2html.errors import MalformedSourceError

INDEX_TEMPLATE = "index.html"
PAGE_TEMPLATE = "page.html"


@dataclass(frozen=True)
class Templates:
    env: Environment
    directory: Path

    def _render(self, name: str, context: dict[str, Any]) -> str:
        try:
            tpl = self.env.get_template(name)
            return str(tpl.render(**context))
        except TemplateError as exc:
            raise MalformedSourceError(self.directory / name, str(exc)) from exc

    def render_index(self, context: dict[str, Any]) -> str:
        return self._render(INDEX_TEMPLATE, context)

    def render_page(self, context: dict[str, Any]) -> str:
        return self._render(PAGE_TEMPLATE, context)


def create_environment(templates_dir: Path) -> Templates:
    loader = FileSystemLoader(str(templates_dir))
    env = Environment(loader=loader, undefined=StrictUndefined, autoescape=True)
    return Templates(env=env, directory=templates_dir)


_SKELETON = """
<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{{ title }}</title>
    <link rel="stylesheet" href="{{ root }}css/blog.css">
    <link rel="stylesheet" href="{{ layout_css }}">
    <script src="{{ root }}script/blog.js"></script>
  </head>
  <body>
    <p id="title"></p>
    <div id="content"></div>
  </body>
</html>
""".strip()


def write_default_templates(target_dir: Path) -> list[Path]:
    """Write the default ``index.html`` and ``page.html`` skeletons."""
    target_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for name in (INDEX_TEMPLATE, PAGE_TEMPLATE):
        path = target_dir / name
        path.write_text(_SKELETON + "\n", encoding="utf-8")
        written.append(path)
    return written
