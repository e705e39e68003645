import pytest

from fnbridge.core.exceptions import TranspileError
from fnbridge.core.transpiler import Transpiler

TYPED_SOURCE = '''
from dataclasses import dataclass

counter: int = 0
name: str


@dataclass
class Greeting:
    text: str
    times: int = 1


def handler(event: dict, context: dict, *args: object, **kwargs: object) -> dict:
    greeting: Greeting = Greeting("hi")
    pending: list
    return {"statusCode": 200, "body": greeting.text}


def declared_only() -> None:
    value: int
'''


def test_transpile_strips_signature_and_variable_annotations(tmp_path, write_function):
    source = write_function("typed", TYPED_SOURCE, ext=".pyt")
    output = tmp_path / "out" / "typed.py"

    Transpiler().transpile(source.parent, source, output)

    code = output.read_text()
    assert "def handler(event, context, *args, **kwargs):" in code
    assert "->" not in code
    assert "counter = 0" in code
    assert "name: str" not in code
    assert "greeting = Greeting('hi')" in code
    assert "pending" not in code
    # Class fields carry runtime meaning and stay annotated.
    assert "text: str" in code
    assert "times: int = 1" in code


def test_transpile_keeps_emptied_blocks_valid(tmp_path, write_function):
    source = write_function("typed", TYPED_SOURCE, ext=".pyt")
    output = tmp_path / "typed.py"

    Transpiler().transpile(source.parent, source, output)

    code = output.read_text()
    assert "def declared_only():\n    pass" in code
    compile(code, str(output), "exec")


def test_transpile_overwrites_existing_output(tmp_path, write_function):
    source = write_function("hello", "def handler(event, context):\n    return {}\n")
    output = tmp_path / "hello.py"
    output.write_text("stale content\n")

    Transpiler().transpile(source.parent, source, output)

    assert "stale content" not in output.read_text()
    assert "def handler(event, context):" in output.read_text()


def test_transpile_syntax_error_raises(tmp_path, write_function):
    source = write_function("broken", "def handler(:\n")
    output = tmp_path / "broken.py"

    with pytest.raises(TranspileError) as exc_info:
        Transpiler().transpile(source.parent, source, output)

    assert exc_info.value.source_path == str(source)
    assert isinstance(exc_info.value.cause, SyntaxError)
    assert not output.exists()


MATCH_SOURCE = """
def handler(event, context):
    match event["httpMethod"]:
        case "GET":
            return {"statusCode": 200}
        case _:
            return {"statusCode": 405}
"""


def test_transpile_rejects_syntax_newer_than_target(tmp_path, write_function):
    source = write_function("router", MATCH_SOURCE)

    with pytest.raises(TranspileError):
        Transpiler(target=(3, 8)).transpile(source.parent, source, tmp_path / "router.py")


def test_options_file_overrides_target(tmp_path, functions_src, write_function):
    (functions_src / ".transpilerc.yml").write_text('target: "3.10"\n')
    source = write_function("router", MATCH_SOURCE)
    output = tmp_path / "router.py"

    Transpiler(target=(3, 8)).transpile(functions_src, source, output)

    assert "match event['httpMethod']:" in output.read_text()


def test_options_file_can_keep_annotations(tmp_path, functions_src, write_function):
    (functions_src / ".transpilerc.yaml").write_text("strip_annotations: false\nunknown: 1\n")
    source = write_function("hello", "def handler(event: dict, context) -> dict:\n    return {}\n")
    output = tmp_path / "hello.py"

    Transpiler().transpile(functions_src, source, output)

    assert "def handler(event: dict, context) -> dict:" in output.read_text()


def test_nearest_options_file_wins(tmp_path, functions_src, write_function):
    (functions_src / ".transpilerc.yml").write_text("strip_annotations: false\n")
    nested = functions_src / "nested"
    nested.mkdir()
    (nested / ".transpilerc.yml").write_text("strip_annotations: true\n")
    source = write_function("hello", "def handler(event: dict, context):\n    return {}\n", directory=nested)

    options = Transpiler().discover_options(functions_src, source)

    assert options == {"strip_annotations": True}


def test_options_outside_source_root_are_ignored(tmp_path, functions_src, write_function):
    (tmp_path / ".transpilerc.yml").write_text("strip_annotations: false\n")
    source = write_function("hello", "def handler(event, context):\n    return {}\n")

    assert Transpiler().discover_options(functions_src, source) == {}


def test_malformed_options_file_raises(tmp_path, functions_src, write_function):
    (functions_src / ".transpilerc.yml").write_text("- not\n- a mapping\n")
    source = write_function("hello", "def handler(event, context):\n    return {}\n")

    with pytest.raises(TranspileError):
        Transpiler().transpile(functions_src, source, tmp_path / "hello.py")
