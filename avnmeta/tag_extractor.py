import json
import re

from avnmeta.config import MIN_EXPECTED_TAGS
from avnmeta.entities import decode_entities
from avnmeta.logging_config import logger

MAX_TAG_LENGTH = 50
NON_TAG_LINK_TEXTS = {'Join Now!', 'Menu', 'Forums', 'RSS', 'Top', 'Bottom'}

# Literal tag-item markers in the raw markup. The live DOM can under-report
# while the list is still rendering, so this count is the reference.
TAG_ITEM_CLASS_RE = re.compile(r'class="[^"]*tagItem[^"]*"', re.IGNORECASE)

# --- Embedded data ---
JS_TAG_ARRAY_RE = re.compile(r"(?:var|let|const)\s+\w*tag\w*\s*=\s*\[([^\]]+)\]", re.IGNORECASE)
JS_STRING_RE = re.compile(r"""["']([^"']+)["']""")
JSON_SCRIPT_RE = re.compile(r"""<script[^>]*type=["']application/(?:json|ld\+json)["'][^>]*>([\s\S]*?)</script>""", re.IGNORECASE)
DATA_TAG_ATTR_RE = re.compile(r"""data-[^=]*tag[^=]*=["']([^"']+)["']""", re.IGNORECASE)

# --- Raw markup ---
TAG_LIST_SPAN_RE = re.compile(r'<span[^>]*class="[^"]*js-tagList[^"]*"[^>]*>([\s\S]*?)</span>', re.IGNORECASE)
TAG_ITEM_ANCHOR_RE = re.compile(r'<a[^>]*class="[^"]*tagItem[^"]*"[^>]*>([\s\S]*?)</a>', re.IGNORECASE)
TAG_HREF_ANCHOR_RE = re.compile(r'<a[^>]*href="/tags/[^"]*"[^>]*>([\s\S]*?)</a>', re.IGNORECASE)
TAG_ITEM_ELEMENT_RES = tuple(
    re.compile(r'<%s[^>]*class="[^"]*tagItem[^"]*"[^>]*>([\s\S]*?)</%s>' % (name, name), re.IGNORECASE)
    for name in ('a', 'span', 'div', 'li')
)
TAG_SECTION_RES = tuple(
    re.compile(r'<%s[^>]*class="[^"]*tag[^"]*"[^>]*>([\s\S]*?)</%s>' % (name, name), re.IGNORECASE)
    for name in ('div', 'ul', 'section')
)
ANCHOR_RE = re.compile(r'<a[^>]*>([\s\S]*?)</a>', re.IGNORECASE)
MARKUP_RE = re.compile(r'<[^>]*>')


class TagAccumulator:
    """Ordered tag set; membership ignores case, first spelling seen is kept."""

    def __init__(self):
        self._tags = []
        self._seen = set()

    def add(self, tag):
        tag = (tag or "").strip()
        key = tag.lower()
        if not tag or key in self._seen:
            return False
        self._seen.add(key)
        self._tags.append(tag)
        return True

    def extend(self, tags):
        return sum(1 for tag in tags if self.add(tag))

    def __len__(self):
        return len(self._tags)

    @property
    def tags(self):
        return tuple(self._tags)


def count_tag_items(markup):
    return len(TAG_ITEM_CLASS_RE.findall(markup or ""))


def expected_tag_count(markup, minimum=None):
    """Literal tag-item count, or the tuned minimum when the markup has none."""
    count = count_tag_items(markup)
    if count:
        return count
    return MIN_EXPECTED_TAGS if minimum is None else minimum


def _collapse(text):
    return re.sub(r"\s+", " ", text or "").strip()


def _clean_fragment(fragment):
    """Inner markup of a matched element reduced to its decoded text."""
    return _collapse(decode_entities(MARKUP_RE.sub("", fragment)))


def _looks_like_tag(text):
    return 0 < len(text) < MAX_TAG_LENGTH and 'http' not in text and '@' not in text


def _looks_like_site_tag(text):
    return (_looks_like_tag(text)
            and not text.startswith('www.')
            and not text.isdigit()
            and text not in NON_TAG_LINK_TEXTS)


def _json_tag_values(obj, path=""):
    if isinstance(obj, list):
        for item in obj:
            yield from _json_tag_values(item, path)
    elif isinstance(obj, dict):
        for key, value in obj.items():
            key = str(key)
            current_path = f"{path}.{key}" if path else key
            if 'tag' in key.lower() and isinstance(value, list):
                for item in value:
                    if isinstance(item, str):
                        yield item
            elif isinstance(value, str) and len(value) < MAX_TAG_LENGTH and 'tag' in current_path.lower():
                yield value
            elif isinstance(value, (dict, list)):
                yield from _json_tag_values(value, current_path)


# --- Tiers ---
# Each tier is a pure function of the page returning candidate tags in
# document order. extract_tags() runs them in sequence into one accumulator.

def embedded_data_tags(page):
    """Tier 1: tag arrays in inline scripts, JSON blocks and data-* attributes."""
    markup = page.markup
    found = []

    for array_match in JS_TAG_ARRAY_RE.finditer(markup):
        for string_match in JS_STRING_RE.finditer(array_match.group(1)):
            found.append(string_match.group(1).strip())

    for script_match in JSON_SCRIPT_RE.finditer(markup):
        try:
            data = json.loads(script_match.group(1))
        except ValueError:
            continue
        found.extend(value.strip() for value in _json_tag_values(data))

    for attr_match in DATA_TAG_ATTR_RE.finditer(markup):
        found.append(decode_entities(attr_match.group(1)).strip())

    return [tag for tag in found if _looks_like_tag(tag)]


def dom_tags(page):
    """Tier 2: tag items of the tag list container, or anywhere on the page."""
    soup = page.soup
    elements = []
    container = soup.select_one(".js-tagList")
    if container is not None:
        elements = container.select(".tagItem")
    if not elements:
        elements = soup.select(".tagItem")
    return [text for text in (_collapse(el.get_text()) for el in elements) if text]


def tag_list_markup_tags(page):
    """Tier 3: tag-item anchors read straight from the tag list's raw markup."""
    span_match = TAG_LIST_SPAN_RE.search(page.markup)
    if not span_match:
        return []
    content = span_match.group(1)

    found = [_clean_fragment(m.group(1)) for m in TAG_ITEM_ANCHOR_RE.finditer(content)]
    found = [tag for tag in found if tag]
    if count_tag_items(content) > len(found):
        # Some anchors lost their class; fall back to their /tags/ links
        found.extend(_clean_fragment(m.group(1)) for m in TAG_HREF_ANCHOR_RE.finditer(content))
    return [tag for tag in found if tag]


def document_markup_tags(page):
    """Tier 4: tag-item shaped elements anywhere in the raw markup."""
    found = []
    for pattern in TAG_ITEM_ELEMENT_RES:
        found.extend(_clean_fragment(m.group(1)) for m in pattern.finditer(page.markup))
    return [tag for tag in found if tag]


def generic_container_tags(page):
    """Tier 5: links inside any tag-like container, minus site navigation."""
    found = []
    for pattern in TAG_SECTION_RES:
        for section_match in pattern.finditer(page.markup):
            found.extend(_clean_fragment(m.group(1)) for m in ANCHOR_RE.finditer(section_match.group(1)))

    container = page.soup.select_one(".js-tagList")
    if container is not None:
        for link in container.find_all("a"):
            if 'tagItem' in (link.get("class") or []):
                found.append(_collapse(link.get_text()))

    return [tag for tag in found if _looks_like_site_tag(tag)]


TAG_TIERS = (
    embedded_data_tags,
    dom_tags,
    tag_list_markup_tags,
    document_markup_tags,
    generic_container_tags,
)


def extract_tags(page, tiers=TAG_TIERS, minimum=None):
    """
    Runs the tag tiers in order, stopping as soon as the collected tags reach
    the expected count. Returns the tags as a tuple in first-seen order.
    """
    target = expected_tag_count(page.markup, minimum)
    accumulator = TagAccumulator()

    for tier in tiers:
        if len(accumulator) >= target:
            break
        added = accumulator.extend(tier(page))
        logger.debug(f"TAGS: {tier.__name__} added {added} tag(s), total {len(accumulator)}/{target}")

    if len(accumulator) < target:
        logger.info(f"TAGS: Collected {len(accumulator)} tag(s), expected {target}.")
    return accumulator.tags
