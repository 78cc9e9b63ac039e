import os

import pytest
from typer.testing import CliRunner

from valuerender.cli.app import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def hello(write_file):
    return write_file("hello.tmpl", "Hello {{ Values.name }}")


def test_hello_world_to_stderr(runner, hello):
    result = runner.invoke(app, ["--set", "name=World", str(hello)])

    assert result.exit_code == 0, result.output
    assert result.output == "Hello World\n"


def test_hello_world_to_file(runner, hello, tmp_path):
    out = tmp_path / "out.txt"

    result = runner.invoke(app, ["--set", "name=World", "-o", str(out), str(hello)])

    assert result.exit_code == 0, result.output
    assert out.read_text() == "Hello World"
    assert oct(os.stat(out).st_mode & 0o777) == oct(0o600)


def test_values_from_file(runner, write_file):
    values = write_file("values.yaml", "foo: bar\n")
    page = write_file("page.tmpl", "{{ Values.data.foo }}")

    result = runner.invoke(app, ["--set-from-file", f"data={values}", str(page)])

    assert result.exit_code == 0, result.output
    assert result.output == "bar\n"


def test_file_values_win_regardless_of_order(runner, write_file):
    values = write_file("values.json", '{"foo": "from-file"}')
    page = write_file("page.tmpl", "{{ Values.data.foo }}")

    result = runner.invoke(
        app,
        ["--set-from-file", f"data={values}", "--set", "data=inline", str(page)],
    )

    assert result.exit_code == 0, result.output
    assert result.output == "from-file\n"


def test_comma_separated_values(runner, write_file):
    page = write_file("page.tmpl", "{{ Values.a }}-{{ Values.b }}-{{ Values.c }}")

    result = runner.invoke(app, ["--set", "a=1,b=2", "--set", "c=3", str(page)])

    assert result.exit_code == 0, result.output
    assert result.output == "1-2-3\n"


def test_last_template_wins_in_output_file(runner, write_file, tmp_path):
    a = write_file("a.tmpl", "rendered a")
    b = write_file("b.tmpl", "rendered b")
    out = tmp_path / "out.txt"

    result = runner.invoke(app, ["-o", str(out), str(a), str(b)])

    assert result.exit_code == 0, result.output
    assert out.read_text() == "rendered b"


def test_library_template_not_printed(runner, write_file):
    lib = write_file("_lib.tmpl", "LIB")
    page = write_file("page.tmpl", "page {{ include('_lib.tmpl') }}")

    result = runner.invoke(app, [str(lib), str(page)])

    assert result.exit_code == 0, result.output
    assert result.output == "page LIB\n"


def test_missing_key_fails(runner, hello):
    result = runner.invoke(app, [str(hello)])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_malformed_set_fails(runner, hello):
    result = runner.invoke(app, ["--set", "name", str(hello)])

    assert result.exit_code == 1
    assert "Error: expected key=value string" in result.output


def test_missing_template_file_fails(runner, tmp_path):
    result = runner.invoke(app, [str(tmp_path / "missing.tmpl")])

    assert result.exit_code == 1
    assert "Error: reading template file" in result.output


def test_no_templates_is_usage_error(runner):
    result = runner.invoke(app, [])

    assert result.exit_code == 2


def test_invalid_mode_is_usage_error(runner, hello):
    result = runner.invoke(app, ["--set", "name=x", "--mode", "9z", str(hello)])

    assert result.exit_code == 2


def test_help(runner):
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "--set-from-file" in result.output


def test_include_depth_from_environment(runner, write_file, monkeypatch):
    monkeypatch.setenv("VALUERENDER_INCLUDE_MAX_DEPTH", "3")
    lib = write_file("_loop.tmpl", "{{ include('_loop.tmpl') }}")
    page = write_file("page.tmpl", "{{ include('_loop.tmpl') }}")

    result = runner.invoke(app, [str(lib), str(page)])

    assert result.exit_code == 1
    assert "nested reference name: _loop.tmpl" in result.output


def test_helper_type_mismatch_reports_error(runner, write_file):
    page = write_file("page.tmpl", "{{ values(Values.name) }}")

    result = runner.invoke(app, ["--set", "name=World", str(page)])

    assert result.exit_code == 1
    assert "Error: values: expected a mapping, got str" in result.output


def test_runaway_include_names_included_template(runner, write_file):
    lib = write_file("_loop.tmpl", "{{ include('_loop.tmpl') }}")
    page = write_file("page.tmpl", "{{ include('_loop.tmpl') }}")

    result = runner.invoke(app, [str(lib), str(page)])

    assert result.exit_code == 1
    assert "nested reference name: _loop.tmpl" in result.output
    assert "page.tmpl" not in result.output


@pytest.mark.parametrize(
    "name,value",
    [
        ("VALUERENDER_INCLUDE_MAX_DEPTH", "deep"),
        ("VALUERENDER_INCLUDE_MAX_DEPTH", "0"),
        ("VALUERENDER_LOG_LEVEL", "LOUD"),
    ],
)
def test_invalid_settings_report_error(runner, hello, monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    result = runner.invoke(app, ["--set", "name=x", str(hello)])

    assert result.exit_code == 1
    assert f"Error: invalid settings: {name}" in result.output
