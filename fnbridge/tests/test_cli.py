from unittest.mock import patch

from fnbridge import cli


def test_build_command(write_function, functions_src, functions_output, capsys):
    write_function("hello", "def handler(event, context):\n    return {}\n")

    with patch.object(cli, "setup_logging"):
        code = cli.main(
            [
                "build",
                "--functions-src",
                str(functions_src),
                "--functions-output",
                str(functions_output),
            ]
        )

    assert code == 0
    assert (functions_output / "hello.py").exists()
    assert "Compiled 1 functions" in capsys.readouterr().out


def test_build_command_missing_source(tmp_path, capsys):
    with patch.object(cli, "setup_logging"):
        code = cli.main(
            [
                "build",
                "--functions-src",
                str(tmp_path / "nope"),
                "--functions-output",
                str(tmp_path / "out"),
            ]
        )

    assert code == 1
    assert "existing folder" in capsys.readouterr().err


def test_build_command_transpile_failure(write_function, functions_src, functions_output, capsys):
    write_function("broken", "def handler(:\n")

    with patch.object(cli, "setup_logging"):
        code = cli.main(
            [
                "build",
                "--functions-src",
                str(functions_src),
                "--functions-output",
                str(functions_output),
            ]
        )

    assert code == 1
    assert "Build failed" in capsys.readouterr().err


def test_serve_command_runs_uvicorn(functions_src, functions_output):
    with patch.object(cli, "setup_logging"), patch("uvicorn.run") as run:
        code = cli.main(
            [
                "serve",
                "--functions-src",
                str(functions_src),
                "--functions-output",
                str(functions_output),
                "--bind",
                "0.0.0.0:9999",
            ]
        )

    assert code == 0
    _, kwargs = run.call_args
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 9999
    assert functions_output.is_dir()
