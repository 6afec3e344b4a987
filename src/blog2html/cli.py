"""CLI interface for blog2html."""

import logging
import shutil
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from blog2html import __version__
from blog2html.builder.site import SiteReport, build_site
from blog2html.errors import BlogBuildError, SettingsError
from blog2html.parser.templating import write_default_templates
from blog2html.settings import BlogSettings, log_configuration
from blog2html.ui.progress import ProgressReporter

app = typer.Typer(
    name="blog2html",
    help="Convert an XML chapter/page blog into a deployable static HTML site.",
    no_args_is_help=True,
)


def configure_logging(verbose: bool = False) -> None:
    """Send log records to a rich console handler."""
    level = logging.DEBUG if verbose else logging.INFO
    handler = RichHandler(show_path=verbose, markup=False, rich_tracebacks=verbose)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.basicConfig(level=level, handlers=[handler], force=True)
    # PIL logs every decoded chunk at DEBUG.
    logging.getLogger("PIL").setLevel(logging.WARNING)


@app.command()
def build(
    settings_file: Annotated[
        Path,
        typer.Argument(
            help="Path to the settings XML file",
            file_okay=True,
            dir_okay=False,
        ),
    ] = Path("settings.xml"),
    source_root: Annotated[
        Path | None,
        typer.Option("--source-root", help="Override the source root folder"),
    ] = None,
    html_root: Annotated[
        Path | None,
        typer.Option("--html-root", help="Override the output root folder"),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option(
            "--strict/--no-strict",
            help="Fail on unknown elements in index.xml instead of skipping them",
        ),
    ] = False,
    clean: Annotated[
        bool,
        typer.Option("--clean/--no-clean", help="Remove the output root before building"),
    ] = False,
    progress: Annotated[
        bool,
        typer.Option("--progress/--no-progress", help="Show progress bars (default: yes)"),
    ] = True,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log every file action"),
    ] = False,
) -> None:
    """
    Build the static site described by a settings file.

    Examples:

        # Build with settings.xml from the current folder
        blog2html build

        # Start from an empty output folder and reject unknown home entries
        blog2html build blog/settings.xml --clean --strict
    """
    configure_logging(verbose)

    try:
        settings = BlogSettings.from_xml(settings_file)
    except SettingsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    settings = settings.with_overrides(
        source_root=source_root,
        html_root=html_root,
        strict=strict or None,
    )

    typer.echo(f"📄 Source: {settings.source_root}")
    typer.echo(f"📁 Output: {settings.html_root}")
    if settings.folders_to_copy:
        typer.echo(f"📦 Static folders: {', '.join(settings.folders_to_copy)}")
    if settings.strict:
        typer.echo("🔒 Strict home entries: Yes")
    log_configuration(settings)

    if clean and settings.html_root.exists():
        typer.echo(f"🧹 Removing {settings.html_root}")
        try:
            shutil.rmtree(settings.html_root)
        except OSError as exc:
            typer.echo(f"\n❌ Build failed: cannot remove {settings.html_root}: {exc}", err=True)
            raise typer.Exit(1) from exc

    try:
        report: SiteReport
        if progress:
            with ProgressReporter() as pr:
                report = build_site(settings, on_progress=pr.emit)
        else:
            report = build_site(settings)
    except BlogBuildError as exc:
        typer.echo(f"\n❌ Build failed: {exc}", err=True)
        raise typer.Exit(1) from exc

    typer.echo(
        f"\n✅ Wrote {len(report.pages)} pages, {len(report.css_rules)} image row rules, "
        f"{len(report.copied_images)} images and {report.copied_files} static files"
    )


@app.command("init-templates")
def init_templates(
    target: Annotated[
        Path,
        typer.Argument(help="Folder to write index.html and page.html into"),
    ],
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite existing templates"),
    ] = False,
) -> None:
    """Write the default page skeletons."""
    existing = [name for name in ("index.html", "page.html") if (target / name).exists()]
    if existing and not force:
        typer.echo(f"Error: {', '.join(existing)} already exist in {target}; use --force", err=True)
        raise typer.Exit(1)
    for path in write_default_templates(target):
        typer.echo(f"📝 Wrote {path}")


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"blog2html version {__version__}")


def version_callback(value: bool) -> None:
    """Print the blog2html version and stop before any command runs."""
    if value:
        typer.echo(f"blog2html version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Print the blog2html version",
        ),
    ] = None,
) -> None:
    """
    blog2html - Convert an XML chapter/page blog into a static HTML site.

    Features:
    - Discovers chapters and their numbered page{n}.xml files
    - Adds previous/home/next navigation to every page
    - Lays out rows of images with proportional widths
    - Gives static assets cache-busting names

    For detailed usage, run: blog2html build --help
    """
    pass


if __name__ == "__main__":  # pragma: no cover - executed only via `python -m`
    app()
