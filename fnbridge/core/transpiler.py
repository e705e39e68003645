"""
Source-to-source compilation of function modules.

Function sources may use annotation syntax the deployment runtime does not
need. The transpiler parses each source against a target interpreter
baseline, erases signature and variable annotations, and writes the
unparsed code to the compiled output.
"""

import ast
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from .exceptions import TranspileError

logger = logging.getLogger("fnbridge.transpiler")

OPTIONS_FILENAMES = (".transpilerc.yml", ".transpilerc.yaml")
KNOWN_OPTIONS = {"target", "strip_annotations"}
DEFAULT_TARGET = (3, 8)
BLOCK_FIELDS = ("body", "orelse", "finalbody")


class AnnotationStripper(ast.NodeTransformer):
    """
    Erase annotations from function signatures and from module or function
    level variable declarations.

    Class bodies keep their annotations: dataclasses and pydantic models
    read them at runtime.
    """

    def __init__(self):
        self._scopes = ["module"]

    def _visit_function(self, node):
        args = node.args
        for arg in args.posonlyargs + args.args + args.kwonlyargs:
            arg.annotation = None
        if args.vararg:
            args.vararg.annotation = None
        if args.kwarg:
            args.kwarg.annotation = None
        node.returns = None
        self._scopes.append("function")
        self.generic_visit(node)
        self._scopes.pop()
        return node

    visit_FunctionDef = _visit_function
    visit_AsyncFunctionDef = _visit_function

    def visit_ClassDef(self, node):
        self._scopes.append("class")
        self.generic_visit(node)
        self._scopes.pop()
        return node

    def visit_AnnAssign(self, node):
        if self._scopes[-1] == "class":
            return node
        if node.value is None:
            return None
        return ast.copy_location(ast.Assign(targets=[node.target], value=node.value), node)

    def generic_visit(self, node):
        filled = [
            field
            for field in BLOCK_FIELDS
            if isinstance(getattr(node, field, None), list) and getattr(node, field)
        ]
        super().generic_visit(node)
        # Dropping a bare declaration may leave a block empty.
        if not isinstance(node, ast.Module):
            for field in filled:
                if not getattr(node, field):
                    setattr(node, field, [ast.Pass()])
        return node


class Transpiler:
    """
    Compile function sources to deployable modules.

    Args:
        target: interpreter baseline the emitted code must run on
        strip_annotations: erase the typed-superset syntax by default
    """

    def __init__(self, target: Tuple[int, int] = DEFAULT_TARGET, strip_annotations: bool = True):
        self.target = tuple(target)
        self.strip_annotations = strip_annotations

    def transpile(
        self,
        source_root: Union[str, Path],
        source_file: Union[str, Path],
        output_file: Union[str, Path],
    ) -> None:
        """
        Compile ``source_file`` and write the result to ``output_file``.

        Raises:
            TranspileError: the source cannot be read, parsed or emitted
        """
        source_file = Path(source_file)
        output_file = Path(output_file)
        logger.info(f"Compile module: {source_file}")

        options = self.discover_options(source_root, source_file)
        code = self.compile_source(source_file, options)

        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(code, encoding="utf-8")

    def compile_source(self, source_file: Path, options: Optional[Dict[str, Any]] = None) -> str:
        options = options or {}
        target = options.get("target", self.target)
        strip = options.get("strip_annotations", self.strip_annotations)

        try:
            source = source_file.read_text(encoding="utf-8")
            tree = ast.parse(source, filename=str(source_file), feature_version=target)
            if strip:
                tree = ast.fix_missing_locations(AnnotationStripper().visit(tree))
            return ast.unparse(tree) + "\n"
        except (OSError, SyntaxError, ValueError, UnicodeDecodeError) as e:
            raise TranspileError(source_file, e) from e

    def discover_options(self, source_root: Union[str, Path], source_file: Path) -> Dict[str, Any]:
        """
        Find the nearest options file between the source's directory and
        ``source_root`` (inclusive).
        """
        root = Path(source_root).resolve()
        for directory in _search_dirs(root, source_file.resolve().parent):
            for filename in OPTIONS_FILENAMES:
                candidate = directory / filename
                if candidate.is_file():
                    return self._load_options(candidate, source_file)
        return {}

    def _load_options(self, options_path: Path, source_file: Path) -> Dict[str, Any]:
        try:
            with open(options_path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise TranspileError(source_file, e) from e

        if not isinstance(raw, dict):
            raise TranspileError(
                source_file, ValueError(f"{options_path} must contain a mapping")
            )

        unknown = set(raw) - KNOWN_OPTIONS
        if unknown:
            logger.warning(
                f"Ignoring unknown transpile options in {options_path}: {sorted(unknown)}"
            )

        options: Dict[str, Any] = {}
        if "target" in raw:
            try:
                major, minor = (int(part) for part in str(raw["target"]).split("."))
            except ValueError as e:
                raise TranspileError(source_file, e) from e
            options["target"] = (major, minor)
        if "strip_annotations" in raw:
            options["strip_annotations"] = bool(raw["strip_annotations"])
        logger.debug(f"Using transpile options from {options_path}: {options}")
        return options


def _search_dirs(root: Path, directory: Path):
    if directory != root and root not in directory.parents:
        return [root]
    dirs = [directory]
    while dirs[-1] != root:
        dirs.append(dirs[-1].parent)
    return dirs
