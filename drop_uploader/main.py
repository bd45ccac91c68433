"""Drop files into a Markdown note from the command line.

Usage:
    python -m drop_uploader.main notes/today.md photo.png report.pdf
    python -m drop_uploader.main notes/today.md shot.png --paste
    python -m drop_uploader.main notes/today.md a.png --endpoint https://img.example.com/upload \
        --response-path data.link --header "Authorization=Bearer abc"
"""

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

from drop_uploader.config.manager import ConfigManager
from drop_uploader.config.settings import Settings
from drop_uploader.editor.file_editor import FileEditor
from drop_uploader.host.events import EventKind, FileEvent
from drop_uploader.host.notifier import LogNotifier
from drop_uploader.host.prompts import ConsoleChoicePrompt
from drop_uploader.host.settings_store import JsonFileSettingsStore
from drop_uploader.logging.logger import Log
from drop_uploader.orchestrator.orchestrator import build_orchestrator
from drop_uploader.upload.models import UploadTarget


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="drop_uploader",
        description="Simulate dropping or pasting files into a Markdown note.",
    )
    parser.add_argument("note", type=Path, help="Markdown note receiving the files")
    parser.add_argument("files", nargs="+", type=Path, help="Files to drop")
    parser.add_argument("--paste", action="store_true", help="Deliver as a paste event")
    parser.add_argument("--endpoint", help="Upload API URL")
    parser.add_argument("--response-path", help="Dot path of the URL in the JSON reply")
    parser.add_argument("--field-name", help="Form field name of the file part")
    parser.add_argument(
        "--pdf",
        choices=["default", "upload", "ask"],
        help="PDF handling: save locally, always upload, or ask each time",
    )
    parser.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="HTTP header to add to the saved settings (repeatable)",
    )
    return parser.parse_args(argv)


def apply_overrides(config_manager: ConfigManager, args: argparse.Namespace) -> None:
    """Persist any settings given on the command line."""
    changes: dict[str, object] = {}
    if args.endpoint is not None:
        changes["endpoint"] = args.endpoint
    if args.response_path is not None:
        changes["response_path"] = args.response_path
    if args.field_name is not None:
        changes["file_field_name"] = args.field_name
    if args.pdf is not None:
        changes["pdf_disposition"] = args.pdf
    if changes:
        config_manager.update(**changes)
    for header in args.header:
        key, _, value = header.partition("=")
        config_manager.add_header(key.strip(), value.strip())


def load_targets(paths: list[Path]) -> list[UploadTarget]:
    return [
        UploadTarget(
            name=path.name,
            data=path.read_bytes(),
            mime_type=mimetypes.guess_type(path.name)[0],
        )
        for path in paths
    ]


async def run(args: argparse.Namespace, settings: Settings) -> int:
    config_manager = ConfigManager(JsonFileSettingsStore(settings.settings_file))
    config_manager.load()
    apply_overrides(config_manager, args)

    notifier = LogNotifier()
    orchestrator = build_orchestrator(
        settings,
        config_manager,
        prompt=ConsoleChoicePrompt(),
        notifier=notifier,
        attachments_root=args.note.parent,
    )
    editor = FileEditor(args.note)
    kind = EventKind.PASTE if args.paste else EventKind.DROP
    event = FileEvent(kind=kind, files=load_targets(args.files))

    try:
        if orchestrator.handle_event(event, editor) is None:
            Log.info("No file was intercepted; leaving the event to the host")
            return 0
        await orchestrator.wait_idle()
    finally:
        await orchestrator.aclose()
    Log.info(f"Done, {len(notifier.messages)} file(s) reported a problem")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse args -> load settings -> dispatch one file event."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    if not args.note.is_file():
        Log.error(f"Note not found: {args.note}")
        return 1
    missing = [path for path in args.files if not path.is_file()]
    if missing:
        Log.error(f"File(s) not found: {', '.join(str(p) for p in missing)}")
        return 1
    return asyncio.run(run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
