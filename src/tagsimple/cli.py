"""Command-line interface for tagsimple.

Dumps the metadata of a media file, every matching file under a directory,
or a file piped on stdin (`-`).
"""

from __future__ import annotations

import base64
import io
import json
import logging
import pprint
import sys
import time
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional

import typer
import yaml

from tagsimple import __version__
from tagsimple.backend import LIBRARY_VERSION, ReadStyle
from tagsimple.core.config import OUTPUT_FORMATS, SettingsManager
from tagsimple.core.dynamic import EncodedText
from tagsimple.core.env import resolve_log_level
from tagsimple.core.errors import TagSimpleError
from tagsimple.core.media_file import MediaFile

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

app = typer.Typer(
    name="tagsimple",
    add_completion=False,
    help="Read tags, properties and pictures of media files.",
)


def configure_logging(level_override: Optional[str] = None) -> None:
    level_name = resolve_log_level(level_override)
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def plain_value(value: Any) -> Any:
    """Make a metadata value printable: single-valued lists are flattened and
    binary data is base64 encoded."""

    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, EncodedText):
        return value.decode("replace")
    if isinstance(value, dict):
        return {key: plain_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        items = [plain_value(item) for item in value]
        return items[0] if len(items) == 1 and not isinstance(items[0], dict) else items
    return value


def read_metadata(
    source: Any,
    *,
    tag: bool = True,
    properties: bool = True,
    audio_properties: Optional[ReadStyle] = None,
    complex_property_keys: Any = None,
) -> Dict[str, Any]:
    media_file = MediaFile.read(
        source,
        tag=tag,
        properties=properties,
        audio_properties=audio_properties,
        complex_property_keys=complex_property_keys,
    )
    return {key: plain_value(value) for key, value in media_file.items()}


def collect_files(directory: Path, patterns: List[str]) -> List[Path]:
    found: Dict[Path, None] = {}
    for pattern in patterns:
        for path in sorted(directory.glob(pattern)):
            if path.is_file():
                found.setdefault(path, None)
    return list(found)


def render(data: Any, output_format: str) -> str:
    if output_format == "json":
        return json.dumps(data, ensure_ascii=False)
    if output_format == "pretty":
        return json.dumps(data, ensure_ascii=False, indent=2)
    if output_format == "yaml":
        return yaml.safe_dump(data, allow_unicode=True, sort_keys=False).rstrip("\n")
    return pprint.pformat(data, sort_dicts=False)


def _parse_complex(value: Optional[str]) -> Any:
    if value is None:
        return None
    keys = [key.strip() for key in value.split(",") if key.strip()]
    return keys or "all"


def _version_callback(value: bool) -> None:
    if value:
        library = ".".join(str(part) for part in LIBRARY_VERSION)
        typer.echo(f"tagsimple {__version__} (mutagen {library})")
        raise typer.Exit()


@app.command()
def dump(
    path: Annotated[
        str,
        typer.Argument(help="Media file, directory, or - to read a file from stdin."),
    ] = "-",
    patterns: Annotated[
        Optional[List[str]],
        typer.Option("--patterns", "-p", help="Glob patterns used when PATH is a directory."),
    ] = None,
    tag: Annotated[bool, typer.Option("--tag/--no-tag", help="Include the basic tag.")] = True,
    properties: Annotated[
        bool, typer.Option("--properties/--no-properties", help="Include the property map.")
    ] = True,
    audio_properties: Annotated[
        Optional[str],
        typer.Option("--audio-properties", "-a", help="Read audio properties: fast, average or accurate."),
    ] = None,
    complex_keys: Annotated[
        Optional[str],
        typer.Option("--complex", "-c", help="Comma separated complex property keys, empty for all."),
    ] = None,
    everything: Annotated[
        bool, typer.Option("--all/--no-all", help="Include everything, audio properties at average accuracy.")
    ] = False,
    output_format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: json, pretty, yaml or pp."),
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", help="Path to a settings YAML file."),
    ] = None,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show versions and exit."),
    ] = False,
) -> None:
    """Print the metadata of PATH."""

    settings = SettingsManager(config_file) if config_file is not None else SettingsManager()
    configure_logging(settings.get_log_level())

    output_format = (output_format or settings.get_output_format()).lower()
    if output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"expected one of {', '.join(OUTPUT_FORMATS)}", param_hint="--format")

    style: Optional[ReadStyle] = settings.get_audio_properties_style()
    if audio_properties is not None:
        try:
            style = ReadStyle.parse(audio_properties)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--audio-properties") from exc
    complex_property_keys = _parse_complex(complex_keys)
    if everything:
        tag = properties = True
        style = style or ReadStyle.AVERAGE
        complex_property_keys = complex_property_keys or "all"

    options = dict(
        tag=tag,
        properties=properties,
        audio_properties=style,
        complex_property_keys=complex_property_keys,
    )

    if path == "-":
        # buffered so the tag library can seek
        stream = io.BytesIO(sys.stdin.buffer.read())
        stream.name = "<stdin>"
        data: Any = _read_or_exit(stream, options)
    else:
        target = Path(path)
        if target.is_dir():
            started = time.monotonic()
            data = {}
            for file_path in collect_files(target, patterns or settings.get_patterns()):
                try:
                    data[str(file_path)] = read_metadata(str(file_path), **options)
                except TagSimpleError as exc:
                    logger.warning("Skipping %s: %s", file_path, exc)
            typer.echo(f"Read {len(data)} files in {time.monotonic() - started:.2f}s", err=True)
        else:
            data = _read_or_exit(str(target), options)

    typer.echo(render(data, output_format))


def _read_or_exit(source: Any, options: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return read_metadata(source, **options)
    except TagSimpleError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
