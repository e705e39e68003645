"""
Batch compilation of the functions directory.

Runs on a full build: every recognized source is compiled unconditionally.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..core.resolver import DEFAULT_EXTENSIONS, compiled_path
from ..core.transpiler import Transpiler

logger = logging.getLogger("fnbridge.builder")


class FunctionBuilder:
    def __init__(
        self,
        functions_src: Path,
        functions_output: Path,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        transpiler: Optional[Transpiler] = None,
    ):
        self.functions_src = Path(functions_src)
        self.functions_output = Path(functions_output)
        self.extensions = list(extensions)
        self.transpiler = transpiler or Transpiler()

    def discover_sources(self) -> List[Tuple[Path, str]]:
        """
        (source, logical name) pairs directly inside the functions directory,
        lowest priority first.

        When two files share a name the preferred extension comes last, so its
        output is the one left on disk.
        """
        found = []
        for path in self.functions_src.iterdir():
            if not path.is_file() or path.name.startswith("."):
                continue
            for index, ext in enumerate(self.extensions):
                if path.name.endswith(ext) and len(path.name) > len(ext):
                    found.append((index, path, path.name[: -len(ext)]))
                    break
        found.sort(key=lambda item: (-item[0], item[1].name))
        return [(path, name) for _, path, name in found]

    def build_all(self) -> List[Path]:
        """
        Compile every source to the output directory.

        Returns:
            Compiled output paths, in build order

        Raises:
            TranspileError: on the first source that fails to compile
        """
        built = []
        for source, name in self.discover_sources():
            output = compiled_path(self.functions_output, name)
            self.transpiler.transpile(self.functions_src, source, output)
            built.append(output)
        logger.info(f"Compiled {len(built)} function modules into {self.functions_output}")
        return built
