from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

UNKNOWN_TITLE = "Unknown title"


class GameStatus(str, Enum):
    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    ABANDONED = "Abandoned"


class GameEngine(str, Enum):
    RENPY = "RenPy"
    RPGM = "RPGM"
    UNITY = "Unity"
    UNREAL = "Unreal"
    FLASH = "Flash"
    HTML = "HTML"
    QSP = "QSP"
    OTHER = "Other"


@dataclass(frozen=True)
class GameMetadata:
    """
    Catalog record scraped from a single thread page.
    Built once by the parser and handed to the caller as-is.
    """
    name: str
    source_url: str = ""
    version: Optional[str] = None
    developer: Optional[str] = None
    status: GameStatus = GameStatus.ONGOING
    engine: GameEngine = GameEngine.OTHER
    tags: Tuple[str, ...] = field(default_factory=tuple)
    image: Optional[str] = None

    def to_dict(self):
        """Plain dict for the persistence layer."""
        return {
            "name": self.name,
            "version": self.version,
            "developer": self.developer,
            "status": self.status.value,
            "engine": self.engine.value,
            "tags": list(self.tags),
            "image": self.image,
            "source_url": self.source_url,
        }
