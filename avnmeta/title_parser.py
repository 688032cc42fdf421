import re
from typing import NamedTuple, Optional

from avnmeta.config import SITE_TITLE_SUFFIX
from avnmeta.entities import decode_entities
from avnmeta.models import GameEngine, GameStatus, UNKNOWN_TITLE

# "Ren'Py - Completed - Name [v1.0] [Dev]": name sits after the last prefix separator
NAME_AFTER_PREFIX_RE = re.compile(r".*-\s(.+?)\s\[")
STRUCTURED_TITLE_RE = re.compile(r"^(?P<name>.*?)\s*\[(?P<version>[^\]]+)\]\s*\[(?P<developer>[^\]]+)\]\s*$")
BRACKET_RE = re.compile(r"\[([^\]]+)\]")
# Prefix words are the tokens directly followed by " -"
TITLE_WORD_RE = re.compile(r"([\w'’]+)(?=\s-)")

VERSION_PATTERNS = (
    re.compile(r"^v", re.IGNORECASE),
    re.compile(r"^\d+\.\d+"),
    re.compile(r"^(?:final|completed|abandoned)$", re.IGNORECASE),
    re.compile(r"^(?:arc|chapter|ch\.?|episode|ep\.?|season|s)\s*\d+", re.IGNORECASE),
    re.compile(r"^s\d+\s+(?:ch|chapter|ep|episode)\.?\s*\d+", re.IGNORECASE),
)
VERSION_WORD_RE = re.compile(r"^(?:version|ver\.?)\s*", re.IGNORECASE)

# Only Ren'Py and RPGM are stripped on bare whitespace; other engine names are real words
ENGINE_PREFIX_RE = re.compile(
    r"^(?:(?:Ren['’]?Py|RPGM)\s+(?:-\s+)?|(?:Unity|Unreal(?:\s+Engine)?|Flash|HTML|QSP|Others)\s+-\s+)",
    re.IGNORECASE,
)

STATUS_WORDS = {
    "ongoing": GameStatus.ONGOING,
    "completed": GameStatus.COMPLETED,
    "abandoned": GameStatus.ABANDONED,
}
ENGINE_WORDS = {
    "ren'py": GameEngine.RENPY,
    "ren’py": GameEngine.RENPY,
    "renpy": GameEngine.RENPY,
    "rpgm": GameEngine.RPGM,
    "unity": GameEngine.UNITY,
    "unreal": GameEngine.UNREAL,
    "flash": GameEngine.FLASH,
    "html": GameEngine.HTML,
    "qsp": GameEngine.QSP,
    "others": GameEngine.OTHER,
}


class TitleParts(NamedTuple):
    name: str
    version: Optional[str]
    developer: Optional[str]
    status: GameStatus
    engine: GameEngine


def clean_title(text):
    """Decodes entities, drops the site suffix and collapses whitespace."""
    text = re.sub(r"\s+", " ", decode_entities(text)).strip()
    if text.lower().endswith(SITE_TITLE_SUFFIX.lower()):
        text = text[:-len(SITE_TITLE_SUFFIX)].strip()
    return text


def looks_like_version(token):
    token = (token or "").strip()
    return bool(token) and any(pattern.search(token) for pattern in VERSION_PATTERNS)


def normalize_version(value):
    """Returns the version as a `v`-prefixed token, or None when empty."""
    value = (value or "").strip()
    if not value:
        return None
    value = VERSION_WORD_RE.sub("", value, count=1).strip() or value
    if value.startswith("v"):
        return value
    if re.match(r"^V[\d.]", value):
        return "v" + value[1:]
    return "v" + value


def last_version_bracket(title):
    """
    Returns the last bracket group of the title that looks like a version.
    Version markers conventionally sit closest to the end of the title, so
    when several groups qualify the last one wins.
    """
    found = None
    for match in BRACKET_RE.finditer(title):
        candidate = match.group(1).strip()
        if looks_like_version(candidate):
            found = candidate
    return found


def strip_engine_prefix(name):
    stripped = ENGINE_PREFIX_RE.sub("", name, count=1).strip()
    return stripped or name


def classify_title(title, labels=()):
    """
    Status and engine from the heading label chips and the prefix words of
    the title, in that order. Each vocabulary is checked independently; the
    last matching word wins.
    """
    status = GameStatus.ONGOING
    engine = GameEngine.OTHER
    words = [label.strip() for label in labels] + TITLE_WORD_RE.findall(title)
    for word in words:
        key = word.lower()
        if key in STATUS_WORDS:
            status = STATUS_WORDS[key]
        if key in ENGINE_WORDS:
            engine = ENGINE_WORDS[key]
    return status, engine


def parse_title(title, heading=None, labels=()):
    """
    Splits a thread title into name, version, developer, status and engine.

    `title` is the cleaned <title> text; `heading` is the optional page heading
    text, preferred as the source of bracket groups because it carries no
    site decorations. `labels` are the heading's prefix label chips.
    """
    raw = heading or title
    name = ""
    version = None
    developer = None

    # 1. Structured: "prefix - name [version] [developer]"
    prefix_match = NAME_AFTER_PREFIX_RE.match(title)
    if prefix_match:
        name = prefix_match.group(1).strip()

    structured = STRUCTURED_TITLE_RE.match(raw)
    if structured:
        if not name:
            name = structured.group('name').strip()
        version = structured.group('version').strip() or None
        developer = structured.group('developer').strip() or None
    else:
        # 2. Separate bracket groups: leading version, trailing developer
        brackets = list(BRACKET_RE.finditer(raw))
        if brackets:
            first = brackets[0].group(1).strip()
            if looks_like_version(first):
                version = first
            last = brackets[-1]
            trailing = last.group(1).strip()
            if not raw[last.end():].strip() and not looks_like_version(trailing):
                developer = trailing or None

    # 3. Raw fallback: the title without any bracket group
    if not name:
        name = re.sub(r"\s+", " ", BRACKET_RE.sub(" ", raw)).strip()
    if not name:
        name = title.strip()

    name = strip_engine_prefix(name) if name else UNKNOWN_TITLE

    if not version:
        version = last_version_bracket(title)

    status, engine = classify_title(title, labels)
    return TitleParts(
        name=name,
        version=normalize_version(version),
        developer=developer.strip() if developer and developer.strip() else None,
        status=status,
        engine=engine,
    )
