from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml

DEFAULT_WORDS_FILE = Path(__file__).resolve().parent.parent / "data" / "words" / "english.yaml"


@dataclass(frozen=True)
class WordList:
    language: str
    words: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.words)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "WordList":
        """Load a vocabulary file: a YAML mapping with ``language`` and ``words``."""
        word_path = Path(path) if path is not None else DEFAULT_WORDS_FILE
        if not word_path.exists():
            raise FileNotFoundError(f"Word list not found: {word_path}")

        raw = yaml.safe_load(word_path.read_text(encoding="utf-8"))
        if not raw or not isinstance(raw, dict):
            raise ValueError(f"{word_path.name}: expected YAML with 'language' and 'words'")
        language = raw.get("language", "english")
        if not isinstance(language, str) or not language.strip():
            raise ValueError(f"{word_path.name}: invalid 'language'")
        content = raw.get("words")
        if content is None:
            raise ValueError(f"{word_path.name}: missing 'words'")
        if isinstance(content, list):
            words = [str(item).strip() for item in content if str(item).strip()]
        else:
            # allow words as a whitespace separated string
            words = str(content).split()
        if not words:
            raise ValueError(f"{word_path.name}: 'words' is empty")
        for word in words:
            if any(ch.isspace() for ch in word):
                raise ValueError(f"{word_path.name}: word {word!r} contains whitespace")
        return cls(language=language.strip(), words=tuple(words))
