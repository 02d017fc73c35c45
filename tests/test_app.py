"""Tests covering the application bootstrap and CLI helpers."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from smartcompile import app
from smartcompile.core.languages import Language, default_template
from smartcompile.services.backend_types import BackendHTTPError
from smartcompile.services.settings import Settings, SettingsStore


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(app, "configure_logging", lambda debug=False, force=False: None)


class TestCliOverrides:
    def test_values_are_coerced_to_field_types(self) -> None:
        overrides = app._coerce_cli_overrides(
            [
                "backend_url=http://remote:8000",
                "request_timeout=2.5",
                "debug_logging=yes",
                "font_size=14",
                'default_headers={"X-Team": "qa"}',
            ]
        )

        assert overrides == {
            "backend_url": "http://remote:8000",
            "request_timeout": 2.5,
            "debug_logging": True,
            "font_size": 14,
            "default_headers": {"X-Team": "qa"},
        }

    def test_optional_field_accepts_none(self) -> None:
        assert app._coerce_cli_overrides(["request_timeout=none"]) == {"request_timeout": None}

    @pytest.mark.parametrize(
        "entry, message",
        [
            ("backend_url", "KEY=VALUE"),
            ("=x", "missing a field name"),
            ("api_key=secret", "Unknown setting"),
            ("debug_logging=maybe", "boolean"),
        ],
    )
    def test_invalid_overrides(self, entry: str, message: str) -> None:
        with pytest.raises(ValueError, match=message):
            app._coerce_cli_overrides([entry])


class TestMain:
    def test_dump_settings(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        settings_path = tmp_path / "settings.json"

        exit_code = app.main(
            ["--settings-path", str(settings_path), "--set", "backend_url=http://b:1", "--dump-settings"]
        )

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert payload["settings"]["backend_url"] == "http://b:1"
        assert payload["meta"]["path"] == str(settings_path)
        assert payload["meta"]["cli_overrides"] == ["backend_url"]

    def test_save_settings_persists_overrides(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        settings_path = tmp_path / "settings.json"

        exit_code = app.main(
            ["--settings-path", str(settings_path), "--set", "theme=light", "--set", "font_size=16", "--save-settings"]
        )

        stored = json.loads(settings_path.read_text(encoding="utf-8"))
        assert exit_code == 0
        assert stored["theme"] == "light"
        assert stored["font_size"] == 16
        assert stored["version"] == 1
        assert str(settings_path) in capsys.readouterr().out
        assert SettingsStore(settings_path).load().theme == "light"

    def test_invalid_override_exits_with_usage_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert app.main(["--set", "nope"]) == 2
        assert "Invalid --set override" in capsys.readouterr().err

    def test_missing_source_file_is_reported(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = app.main(
            [
                "--settings-path",
                str(tmp_path / "settings.json"),
                "--action",
                "run",
                "--file",
                str(tmp_path / "missing.py"),
            ]
        )

        assert exit_code == 2
        assert "smartcompile:" in capsys.readouterr().err


class TestRunHeadless:
    @pytest.mark.asyncio
    async def test_run_then_explain(self, fake_backend) -> None:
        fake_backend.respond("run", {"output": "Traceback...", "raw_error": "ZeroDivisionError"})
        fake_backend.respond("explain", {"explanation": "You divided by zero."})
        stream = io.StringIO()

        exit_code = await app.run_headless(Settings(), ["run", "explain"], client=fake_backend, stream=stream)

        assert exit_code == 0
        assert stream.getvalue() == "=== run ===\nTraceback...\n=== explain ===\nYou divided by zero.\n"
        assert fake_backend.calls[1][1]["raw_error"] == "ZeroDivisionError"

    @pytest.mark.asyncio
    async def test_loads_source_file_and_language(self, fake_backend, tmp_path: Path) -> None:
        source = tmp_path / "Main.java"
        source.write_text("class Main {}", encoding="utf-8")
        fake_backend.respond("auto_comment", {"output": "// commented\nclass Main {}"})
        stream = io.StringIO()

        exit_code = await app.run_headless(
            Settings(),
            ["auto-comment"],
            source_path=str(source),
            language="java",
            client=fake_backend,
            stream=stream,
        )

        assert exit_code == 0
        assert fake_backend.calls == [("/auto_comment", {"code": "class Main {}", "language": "java"})]
        assert stream.getvalue().endswith("--- code ---\n// commented\nclass Main {}\n")

    @pytest.mark.asyncio
    async def test_failures_set_exit_code(self, fake_backend) -> None:
        fake_backend.respond("code_review", BackendHTTPError(500))
        stream = io.StringIO()

        exit_code = await app.run_headless(Settings(), ["review", "format"], client=fake_backend, stream=stream)

        assert exit_code == 1
        output = stream.getvalue()
        assert "Error connecting to backend for AI Code Review: HTTP error! status: 500" in output
        assert "Feature Format Code is not yet implemented." in output

    @pytest.mark.asyncio
    async def test_default_language_comes_from_settings(self, fake_backend) -> None:
        fake_backend.respond("run", {"output": "Hello, Smart Compile!", "raw_error": ""})

        await app.run_headless(
            Settings(default_language="cpp"), ["run"], client=fake_backend, stream=io.StringIO()
        )

        assert fake_backend.calls[0][1] == {"code": default_template(Language.CPP), "language": "cpp"}
