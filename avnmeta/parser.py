import re

from avnmeta.errors import MissingTitleError
from avnmeta.image_resolver import resolve_image
from avnmeta.logging_config import logger
from avnmeta.models import GameMetadata
from avnmeta.page import ThreadPage
from avnmeta.tag_extractor import TAG_TIERS, extract_tags
from avnmeta.title_parser import clean_title, parse_title

TITLE_TAG_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
HEADING_LABEL_CLASSES = ("labelLink", "label", "label-append")


def _heading_parts(soup):
    """
    Text of the thread heading without its prefix label chips, and the chip
    texts themselves ("Ren'Py", "Completed", ...) in document order.
    """
    heading = soup.select_one(".p-title-value")
    if heading is None:
        return "", []
    parts = []
    labels = []
    for text in heading.find_all(string=True):
        if text.find_parent(class_=HEADING_LABEL_CLASSES) is not None:
            label = clean_title(str(text))
            if label:
                labels.append(label)
            continue
        parts.append(str(text))
    return clean_title(" ".join(parts)), labels


def parse_thread_page(markup, source_url="", tag_tiers=TAG_TIERS):
    """
    Parses the markup of a thread page into a GameMetadata record.
    Never touches the network; the same markup always gives the same record.
    Raises MissingTitleError when the page has no title text at all.
    """
    page = ThreadPage(markup)

    title_match = TITLE_TAG_RE.search(page.markup)
    title = clean_title(title_match.group(1)) if title_match else ""
    heading, labels = _heading_parts(page.soup)
    if not title:
        title = heading
    if not title:
        raise MissingTitleError(f"No title found in thread page {source_url or '(unknown url)'}")

    parts = parse_title(title, heading or None, labels)
    image = resolve_image(page.soup)
    tags = extract_tags(page, tiers=tag_tiers)

    logger.info(f"PARSE: '{parts.name}' version={parts.version} developer={parts.developer} "
                f"status={parts.status.value} engine={parts.engine.value} tags={len(tags)} image={'yes' if image else 'no'}")

    return GameMetadata(
        name=parts.name,
        source_url=source_url,
        version=parts.version,
        developer=parts.developer,
        status=parts.status,
        engine=parts.engine,
        tags=tags,
        image=image,
    )
