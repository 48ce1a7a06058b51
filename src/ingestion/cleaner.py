"""Text cleaning for portfolio site HTML pages."""

import re

from bs4 import BeautifulSoup

BOILERPLATE_TAGS = ["script", "style", "noscript", "nav", "footer", "header", "aside", "svg", "form"]


def clean_html_text(html: str) -> str:
    """Extract and clean the readable text from a site page.

    Prefers the <main> region, strips navigation, footer and other
    boilerplate regions, and normalizes whitespace while keeping
    paragraph breaks for the chunker.
    """
    soup = BeautifulSoup(html, "html.parser")

    content = soup.find("main") or soup.find(attrs={"role": "main"}) or soup.body
    if content is None:
        # Fragment without <body>: use the whole document
        content = soup

    for tag in content.find_all(BOILERPLATE_TAGS):
        tag.decompose()

    # Chat widget markup is rendered on every page
    for tag in content.select("[data-chat-widget], #chatbot"):
        tag.decompose()

    text = content.get_text(separator="\n", strip=False)
    text = _normalize_whitespace(text)
    return text.strip()


def _normalize_whitespace(text: str) -> str:
    """Collapse runs of spaces and blank lines, preserving paragraph breaks."""
    text = text.replace("\r\n", "\n").replace("\xa0", " ")
    text = re.sub(r"[ \t\f\v]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text
