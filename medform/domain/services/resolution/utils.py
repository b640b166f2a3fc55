from functools import lru_cache
import re
import unicodedata

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-zà-ÿ])(?=[A-Z])")
_DIGIT_BOUNDARY_RE = re.compile(r"(?<=[A-Za-zÀ-ÿ])(?=\d)|(?<=\d)(?=[A-Za-zÀ-ÿ])")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


@lru_cache(maxsize=4096)
def fold(name: str) -> str:
    """Fold a destination name into lowercase, accent-free words.

    ``"Séquelle Code2"`` and ``"sequelleCode 2"`` both fold to
    ``"sequelle code 2"``.
    """
    text = _CAMEL_BOUNDARY_RE.sub(" ", name)
    text = _DIGIT_BOUNDARY_RE.sub(" ", text)
    text = strip_accents(text).lower().replace("%", " pct ")
    text = _NON_ALNUM_RE.sub(" ", text)
    return " ".join(text.split())


def compact(name: str) -> str:
    """Lowercase accent-free alphanumerics only, used for key comparisons."""
    return re.sub("[^a-z0-9]", "", strip_accents(name).lower())


@lru_cache(maxsize=2048)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def numbers_in(folded: str) -> tuple[int, ...]:
    return tuple(int(token) for token in folded.split() if token.isdigit())
