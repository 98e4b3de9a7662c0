from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Union

from ..settings import Settings
from .base import LanguageSpec
from .cpp_runner import cpp_language
from .python_runner import python_language


@dataclass(frozen=True)
class UnsupportedLanguage:
    language: str


class LanguageRegistry:
    """Maps a language id ("python", "cpp", ...) to its LanguageSpec entry."""

    def __init__(self, languages: Iterable[LanguageSpec]):
        self._languages: Dict[str, LanguageSpec] = {lang.name: lang for lang in languages}

    @classmethod
    def from_settings(cls, s: Settings) -> "LanguageRegistry":
        return cls([
            python_language(s.python_bin),
            cpp_language(s.cxx_bin, s.cxx_flags),
        ])

    def dispatch(self, language: str) -> Union[LanguageSpec, UnsupportedLanguage]:
        spec = self._languages.get(language)
        if spec is None:
            return UnsupportedLanguage(language)
        return spec

    def supported(self) -> List[str]:
        return sorted(self._languages)
