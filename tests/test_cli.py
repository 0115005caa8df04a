"""CLI mode dispatch tests.

Verifies how ``fjsf.cli.main`` maps words to modes and acts on the outcome.
The interactive session and process spawning are patched out.
"""

from __future__ import annotations

import contextlib
import io
import json
import tempfile
import termios
import unittest
from pathlib import Path
from unittest import mock

from fjsf import cli
from fjsf.discovery import JsonEntry, ScriptEntry
from fjsf.errors import FjsfError
from fjsf.session import SessionOutcome, SessionResult


def _write_project(root: Path) -> None:
    (root / "package.json").write_text(
        json.dumps({"name": "mono", "version": "1.2.3", "workspaces": ["packages/*"], "scripts": {"build": "tsc"}}),
        encoding="utf-8",
    )
    web = root / "packages" / "web"
    web.mkdir(parents=True)
    (web / "package.json").write_text(
        json.dumps({"name": "web", "scripts": {"dev": "vite", "test": "vitest"}}),
        encoding="utf-8",
    )


def _run_main(argv: list[str]) -> tuple[int, str, str]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    with mock.patch("fjsf.cli.configure_logging"), mock.patch(
        "fjsf.cli.load_log_level", return_value=None
    ), contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
        code = cli.main(argv)
    return code, stdout.getvalue(), stderr.getvalue()


class ParseCommandTests(unittest.TestCase):
    def test_mode_words_and_aliases(self) -> None:
        self.assertEqual(cli.parse_command([]), cli.Command("scripts"))
        self.assertEqual(cli.parse_command(["f", "tsconfig.json"]), cli.Command("find", file_path="tsconfig.json"))
        self.assertEqual(cli.parse_command(["find"]), cli.Command("find", file_path="package.json"))
        self.assertEqual(cli.parse_command(["path", "a.json"]), cli.Command("path", file_path="a.json"))
        self.assertEqual(
            cli.parse_command(["r", "package.json", "scripts.build"]),
            cli.Command("run", file_path="package.json", key="scripts.build"),
        )
        self.assertEqual(cli.parse_command(["completions", "we"]), cli.Command("completions", query="we"))
        self.assertEqual(cli.parse_command(["q"]), cli.Command("quit"))
        self.assertEqual(cli.parse_command(["help"]), cli.Command("help"))
        self.assertEqual(cli.parse_command(["h"]), cli.Command("help"))

    def test_json_argument_selects_manifest_and_unknown_words_fall_back(self) -> None:
        self.assertEqual(cli.parse_command(["apps/web/package.json"]), cli.Command("scripts", file_path="apps/web/package.json"))
        self.assertEqual(cli.parse_command(["whatever"]), cli.Command("scripts"))


class CompletionTests(unittest.TestCase):
    def test_completion_lines_filter_by_name_or_workspace(self) -> None:
        scripts = [
            ScriptEntry(name="build", command="tsc", workspace="mono", package_path="package.json"),
            ScriptEntry(name="dev", command="vite", workspace="web", package_path="packages/web/package.json"),
        ]

        self.assertEqual(cli.completion_lines(scripts, ""), ["build:[mono] tsc", "dev:[web] vite"])
        self.assertEqual(cli.completion_lines(scripts, "WE"), ["dev:[web] vite"])
        self.assertEqual(cli.completion_lines(scripts, "bu"), ["build:[mono] tsc"])

    def test_completions_mode_prints_discovered_scripts(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            _write_project(Path(tmp))

            code, out, _err = _run_main(["--cwd", tmp, "completions"])

        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), ["build:[mono] tsc", "dev:[web] vite", "test:[web] vitest"])


class ScriptsModeTests(unittest.TestCase):
    def test_no_scripts_reports_error_and_exit_one(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            code, _out, err = _run_main(["--cwd", tmp])

        self.assertEqual(code, 1)
        self.assertEqual(err.strip(), "Error: No scripts found in this repository")

    def test_confirmed_script_is_run(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write_project(root)
            chosen = ScriptEntry(name="dev", command="vite", workspace="web", package_path="packages/web/package.json")

            with mock.patch("fjsf.cli._open_terminal"), mock.patch(
                "fjsf.cli.drive_session",
                return_value=SessionResult(SessionOutcome.CONFIRMED, chosen),
            ) as drive_mock, mock.patch("fjsf.cli.run_script", return_value=5) as run_mock:
                code, _out, _err = _run_main(["--cwd", tmp])

        self.assertEqual(code, 5)
        items = drive_mock.call_args.args[0]
        self.assertEqual([item.name for item in items], ["build", "dev", "test"])
        self.assertEqual(run_mock.call_args.args[:2], (chosen, root))

    def test_exit_without_selection_is_success(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            _write_project(Path(tmp))

            with mock.patch("fjsf.cli._open_terminal"), mock.patch(
                "fjsf.cli.drive_session",
                return_value=SessionResult(SessionOutcome.EXITED),
            ), mock.patch("fjsf.cli.run_script") as run_mock:
                code, _out, _err = _run_main(["--cwd", tmp])

        self.assertEqual(code, 0)
        run_mock.assert_not_called()

    def test_confirm_without_match_exits_one(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            _write_project(Path(tmp))

            with mock.patch("fjsf.cli._open_terminal"), mock.patch(
                "fjsf.cli.drive_session",
                return_value=SessionResult(SessionOutcome.CONFIRMED, None),
            ):
                code, _out, err = _run_main(["--cwd", tmp])

        self.assertEqual(code, 1)
        self.assertIn("No matching script selected", err)

    def test_non_terminal_stdin_is_reported(self) -> None:
        with mock.patch("fjsf.cli.sys.stdin") as stdin_mock, mock.patch(
            "fjsf.cli.TerminalController",
            side_effect=termios.error(25, "not a tty"),
        ):
            stdin_mock.fileno.return_value = 0
            with self.assertRaises(FjsfError) as ctx:
                cli._open_terminal(1)

        self.assertIn("requires a terminal", ctx.exception.message)


class JsonModesTests(unittest.TestCase):
    def test_path_mode_prints_selected_value(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            _write_project(Path(tmp))
            entry = JsonEntry(path="version", value="1.2.3", key="version", file_path="package.json", workspace="mono")

            with mock.patch("fjsf.cli._open_terminal"), mock.patch(
                "fjsf.cli.drive_session",
                return_value=SessionResult(SessionOutcome.CONFIRMED, entry),
            ) as drive_mock:
                code, out, _err = _run_main(["--cwd", tmp, "path", "package.json"])

        self.assertEqual(code, 0)
        self.assertEqual(out, "1.2.3\n")
        paths = [item.path for item in drive_mock.call_args.args[0]]
        self.assertIn("scripts.build", paths)
        self.assertIn("workspaces[0]", paths)

    def test_find_mode_searches_every_matching_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            _write_project(Path(tmp))

            with mock.patch("fjsf.cli._open_terminal"), mock.patch(
                "fjsf.cli.drive_session",
                return_value=SessionResult(SessionOutcome.EXITED),
            ) as drive_mock:
                code, _out, _err = _run_main(["--cwd", tmp, "find", "package.json"])

        self.assertEqual(code, 0)
        files = {item.file_path for item in drive_mock.call_args.args[0]}
        self.assertEqual(files, {"package.json", "packages/web/package.json"})

    def test_path_mode_without_entries_fails(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            code, _out, err = _run_main(["--cwd", tmp, "path", "missing.json"])

        self.assertEqual(code, 1)
        self.assertIn("No JSON entries found", err)

    def test_run_mode_delegates_to_executor(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("fjsf.cli.run_json_key", return_value=0) as run_mock:
                code, _out, _err = _run_main(["--cwd", tmp, "run", "package.json", "scripts.build"])

        self.assertEqual(code, 0)
        self.assertEqual(run_mock.call_args.args, ("package.json", "scripts.build", Path(tmp)))

    def test_run_mode_errors_are_printed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            code, _out, err = _run_main(["--cwd", tmp, "run", "package.json"])

        self.assertEqual(code, 1)
        self.assertEqual(err.strip(), "Error: No key provided")


class WidgetModeTests(unittest.TestCase):
    def test_widget_prints_script_name_when_stdout_is_not_tty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            _write_project(Path(tmp))
            chosen = ScriptEntry(name="test", command="vitest", workspace="web", package_path="packages/web/package.json")

            with mock.patch("fjsf.cli.os.open", return_value=99), mock.patch("fjsf.cli.os.close") as close_mock, mock.patch(
                "fjsf.cli._open_terminal"
            ) as open_terminal_mock, mock.patch(
                "fjsf.cli.drive_session",
                return_value=SessionResult(SessionOutcome.CONFIRMED, chosen),
            ) as drive_mock:
                code, out, _err = _run_main(["--cwd", tmp, "--widget", "te"])

        self.assertEqual(code, 0)
        self.assertEqual(out, "test")
        close_mock.assert_called_once_with(99)
        self.assertEqual(drive_mock.call_args.kwargs["initial_query"], "te")
        open_terminal_mock.assert_called_once_with(99, alternate_screen=False)

    def test_widget_with_no_scripts_is_silent_success(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            code, out, _err = _run_main(["--cwd", tmp, "--widget"])

        self.assertEqual(code, 0)
        self.assertEqual(out, "")


class VersionTests(unittest.TestCase):
    def test_help_word_prints_usage_without_opening_picker(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            _write_project(Path(tmp))

            with mock.patch("fjsf.cli.drive_session") as drive_mock:
                code, out, _err = _run_main(["--cwd", tmp, "help"])

        self.assertEqual(code, 0)
        self.assertIn("usage: fjsf", out)
        self.assertIn("completions", out)
        drive_mock.assert_not_called()

    def test_version_flag_exits_cleanly(self) -> None:
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout), self.assertRaises(SystemExit) as ctx:
            cli.main(["--version"])

        self.assertEqual(ctx.exception.code, 0)
        self.assertIn("fjsf", stdout.getvalue())


if __name__ == "__main__":
    unittest.main()
