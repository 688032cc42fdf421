import html


def decode_entities(text):
    """Decodes HTML character entities (named and numeric) in a text fragment."""
    if not text:
        return ""
    # &nbsp; decodes to U+00A0; callers collapse whitespace, so map it to a plain space
    return html.unescape(text).replace("\xa0", " ")
