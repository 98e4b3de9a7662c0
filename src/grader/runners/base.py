from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

# argv templates; "{source}" and "{artifact}" are substituted per evaluation
SOURCE = "{source}"
ARTIFACT = "{artifact}"


def _fill(template: List[str], source: Path, artifact: Path) -> List[str]:
    return [part.replace(SOURCE, str(source)).replace(ARTIFACT, str(artifact)) for part in template]


@dataclass(frozen=True)
class LanguageSpec:
    name: str
    extension: str
    run_argv: List[str]
    compile_argv: Optional[List[str]] = None
    env: dict = field(default_factory=dict)

    @property
    def needs_compile(self) -> bool:
        return self.compile_argv is not None

    def compile_command(self, source: Path, artifact: Path) -> List[str]:
        if self.compile_argv is None:
            raise ValueError(f"{self.name} has no compile step")
        return _fill(self.compile_argv, source, artifact)

    def run_command(self, source: Path, artifact: Path) -> List[str]:
        return _fill(self.run_argv, source, artifact)
