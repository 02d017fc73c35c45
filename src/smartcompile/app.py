"""Application bootstrap and command line entry point."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, TextIO, cast, get_args, get_origin, get_type_hints

from .core.languages import Language
from .services.backend_client import BackendClient
from .services.backend_types import BackendTransport
from .services.settings import Settings, SettingsStore
from .ui.application.controller import ACTION_NAMES, WorkbenchController
from .ui.bootstrap import create_window, create_workbench
from .ui.events import OperationCompleted
from .utils import logging as logging_utils

_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}
_LOGGER = logging.getLogger(__name__)


def configure_logging(debug: bool = False, *, force: bool = False) -> Path:
    """Configure logging for the application and route Qt messages into it."""

    log_path = logging_utils.setup_logging(debug, force=force)
    _install_qt_message_handler()
    return log_path


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    try:
        return active_store.load(overrides=overrides)
    except OSError as exc:
        _LOGGER.warning("Failed to load settings from %s: %s", active_store.path, exc)
        return Settings()


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point invoked by the ``smartcompile`` console script."""

    args, passthrough = _parse_cli_args(argv)

    debug = _env_flag("SMARTCOMPILE_DEBUG", default=False)
    configure_logging(debug)

    settings_path = args.settings_path or os.environ.get("SMARTCOMPILE_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    settings_store = SettingsStore(resolved_path)
    try:
        cli_overrides = _coerce_cli_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        return 2

    settings = load_settings(resolved_path, store=settings_store, overrides=cli_overrides or None)

    if args.dump_settings:
        _dump_settings(settings, settings_store, overrides=cli_overrides)
        return 0

    if args.save_settings:
        try:
            saved_path = settings_store.save(settings)
        except OSError as exc:
            print(f"smartcompile: unable to save settings: {exc}", file=sys.stderr)
            return 2
        print(f"Settings saved to {saved_path}")
        return 0

    if settings.debug_logging and not debug:
        configure_logging(True, force=True)

    if args.actions:
        try:
            return asyncio.run(
                run_headless(settings, args.actions, source_path=args.file, language=args.language)
            )
        except (OSError, ValueError) as exc:
            print(f"smartcompile: {exc}", file=sys.stderr)
            return 2

    return _run_gui(settings, passthrough)


async def run_headless(
    settings: Settings,
    actions: Sequence[str],
    *,
    source_path: str | None = None,
    language: str | None = None,
    client: BackendTransport | None = None,
    stream: TextIO | None = None,
) -> int:
    """Run ``actions`` in order against one workbench session and print each output.

    Returns 0 when every remote operation succeeded, 1 otherwise.
    """

    destination = stream or sys.stdout
    source = Path(source_path).expanduser().read_text(encoding="utf-8") if source_path else None
    selected = Language.coerce(language) if language else None

    owned_client = BackendClient(settings.client_settings()) if client is None else None
    controller = create_workbench(settings, client=client or owned_client)
    if selected is not None:
        controller.select_language(selected)
    if source is not None:
        controller.edit_code(source)

    failures = _FailureCounter(controller)
    try:
        for action in actions:
            state = await controller.perform(action)
            destination.write(f"=== {action} ===\n{state.output}\n")
            if action == "auto-comment" and failures.last_succeeded:
                destination.write(f"--- code ---\n{state.code}\n")
    finally:
        failures.detach()
        if owned_client is not None:
            await owned_client.aclose()
    return 1 if failures.count else 0


class _FailureCounter:
    """Tracks failed operations via the controller's completion events."""

    def __init__(self, controller: WorkbenchController) -> None:
        self.count = 0
        self.last_succeeded = False
        self._bus = controller.event_bus
        self._bus.subscribe(OperationCompleted, self._on_completed)

    def detach(self) -> None:
        self._bus.unsubscribe(OperationCompleted, self._on_completed)

    def _on_completed(self, event: OperationCompleted) -> None:
        self.last_succeeded = event.succeeded
        if not event.succeeded:
            self.count += 1


def _run_gui(settings: Settings, passthrough: Sequence[str]) -> int:
    from PySide6.QtWidgets import QApplication
    from qasync import QEventLoop

    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")
    program = sys.argv[0] if sys.argv else "smartcompile"
    app = cast(Any, QApplication.instance() or QApplication([program, *passthrough]))
    app.setApplicationName("SmartCompile")
    app.setApplicationDisplayName("Smart Compile")
    if (settings.theme or "").lower() == "dark":
        app.setStyle("Fusion")

    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)
    app.aboutToQuit.connect(loop.stop)

    client = BackendClient(settings.client_settings())
    controller = create_workbench(settings, client=client)
    window = create_window(controller, settings)
    window.show()

    try:
        loop.run_forever()
    except KeyboardInterrupt:  # pragma: no cover - manual shutdown path
        _LOGGER.info("Shutdown requested by user.")
    finally:
        with contextlib.suppress(RuntimeError):
            loop.run_until_complete(client.aclose())
        _drain_event_loop(loop)
        loop.close()
    return 0


def _env_flag(name: str, *, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _drain_event_loop(loop: asyncio.AbstractEventLoop) -> None:
    """Cancel requests still in flight before the loop closes."""

    if loop.is_closed():
        return

    async def _cleanup() -> None:
        current_task = asyncio.current_task()
        tasks = [task for task in asyncio.all_tasks() if not task.done() and task is not current_task]
        if tasks:
            _LOGGER.debug("Canceling %s pending request(s) before shutdown.", len(tasks))
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
        await loop.shutdown_asyncgens()

    try:
        loop.run_until_complete(_cleanup())
    except RuntimeError as exc:  # pragma: no cover - loop already stopping
        _LOGGER.debug("Unable to drain asyncio loop: %s", exc)


def _install_qt_message_handler() -> None:
    """Redirect Qt warnings to the Python logging stack."""

    from PySide6.QtCore import QtMsgType, qInstallMessageHandler

    level_map = {
        QtMsgType.QtDebugMsg: logging.DEBUG,
        QtMsgType.QtInfoMsg: logging.INFO,
        QtMsgType.QtWarningMsg: logging.WARNING,
        QtMsgType.QtCriticalMsg: logging.ERROR,
        QtMsgType.QtFatalMsg: logging.CRITICAL,
    }

    def _handler(mode, context, message):  # type: ignore[no-untyped-def]
        del context
        logging.getLogger("PySide6").log(level_map.get(mode, logging.INFO), message)

    qInstallMessageHandler(_handler)


def _parse_cli_args(argv: Sequence[str] | None) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(
        prog="smartcompile",
        add_help=True,
        description="Launch the Smart Compile workbench, or run workbench actions from the terminal.",
    )
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings payload and exit.",
    )
    parser.add_argument(
        "--save-settings",
        action="store_true",
        help="Write the effective settings (including --set overrides) to the settings file and exit.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.smartcompile/settings.json path.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override persisted settings before launch (repeatable).",
    )
    parser.add_argument(
        "--action",
        dest="actions",
        choices=ACTION_NAMES,
        action="append",
        default=[],
        help="Run a workbench action without the window (repeatable, runs in order).",
    )
    parser.add_argument(
        "--file",
        metavar="PATH",
        help="Load the editor buffer from PATH instead of the language template (headless only).",
    )
    parser.add_argument(
        "--language",
        choices=[language.value for language in Language],
        help="Language to select before running actions (headless only).",
    )
    return parser.parse_known_args(argv)


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if not items:
        return overrides

    fields = Settings.__dataclass_fields__  # type: ignore[attr-defined]
    type_hints = get_type_hints(Settings)
    for entry in items:
        if "=" not in entry:
            raise ValueError(f"Override '{entry}' must use KEY=VALUE syntax.")
        key, raw_value = entry.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError("Override is missing a field name.")
        if key not in fields:
            raise ValueError(f"Unknown setting '{key}'.")
        annotation = type_hints.get(key, fields[key].type)
        overrides[key] = _coerce_value(annotation, raw_value.strip())
    return overrides


def _coerce_value(annotation: Any, raw_value: str) -> Any:
    normalized = raw_value.strip()
    if normalized.lower() in {"none", "null"} and type(None) in get_args(annotation):
        return None
    target = _resolve_annotation(annotation)

    if target is str or target is Any:
        return normalized
    if target is bool:
        return _parse_bool(normalized)
    if target is int:
        return int(normalized, 10)
    if target is float:
        return float(normalized)
    if target is dict:
        try:
            payload = json.loads(normalized or "{}")
        except json.JSONDecodeError as exc:
            raise ValueError("Dict overrides must be valid JSON objects") from exc
        if not isinstance(payload, dict):
            raise ValueError("Dict overrides must be valid JSON objects")
        return payload
    return normalized


def _resolve_annotation(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is None:
        return annotation
    if origin is dict:
        return origin
    args = [arg for arg in get_args(annotation) if arg is not type(None)]
    if not args:
        return origin
    return args[0]


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Cannot coerce '{value}' to a boolean.")


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO | None = None,
) -> None:
    destination = stream or sys.stdout
    metadata = {
        "path": str(store.path),
        "cli_overrides": sorted(overrides.keys()),
        "environment_variables": sorted(name for name in os.environ if name.startswith("SMARTCOMPILE_")),
    }
    json.dump({"settings": asdict(settings), "meta": metadata}, destination, indent=2)
    destination.write("\n")


__all__ = ["main", "configure_logging", "load_settings", "run_headless"]
