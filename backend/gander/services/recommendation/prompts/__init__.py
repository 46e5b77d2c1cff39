"""Prompt loader for the maintenance scheduler guides."""

from functools import lru_cache
from pathlib import Path

_PROMPT_DIR = Path(__file__).parent


@lru_cache(maxsize=None)
def load_prompt(name: str) -> str:
    """Load a prompt file from the prompts directory (cached per name)."""
    return (_PROMPT_DIR / name).read_text(encoding="utf-8")
