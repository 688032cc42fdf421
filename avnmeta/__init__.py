from avnmeta.errors import FetchError, MissingTitleError, ScraperError
from avnmeta.models import GameEngine, GameMetadata, GameStatus
from avnmeta.parser import parse_thread_page
from avnmeta.scraper import ThreadScraper, extract_game_metadata, thread_url_for_id

__all__ = [
    "FetchError",
    "GameEngine",
    "GameMetadata",
    "GameStatus",
    "MissingTitleError",
    "ScraperError",
    "ThreadScraper",
    "extract_game_metadata",
    "parse_thread_page",
    "thread_url_for_id",
]
