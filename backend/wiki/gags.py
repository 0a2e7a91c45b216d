"""
Extraction of running-gag data from an episode's wiki Gags subpage.

The page is split into sections by its h2/h3 headings. Bold fragments in
the "Store Next Door", "Pest Control Truck" and "Burger of the Day"
sections become the store name, the truck name and the burger entries.
A "Running Gags"/"Gags" section serves as a fallback source of burgers
when the dedicated section yields none.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup
from pydantic import BaseModel

if TYPE_CHECKING:
    from bs4 import Tag

_QUOTE_CHARS = "\"'‘’“”"
_DESCRIPTION_SEPARATOR_RE = re.compile(r"\s+[-–—]\s+")
_TRAILING_PARENS_RE = re.compile(r"^(.+?)\s*\(([^)]+)\)$")
_CHARACTER_LABEL_RE = re.compile(r"^(bob|gene|tina|linda|louise):?$", re.IGNORECASE)

# Case-insensitive substrings that mark a fragment as something other than a burger.
_DENYLIST_SUBSTRINGS = ("burger of the day", "there are no burgers", "prices", "end credits sequence")
_DENYLIST_EXACT = ("none", "running gags")

_MIN_FRAGMENT_LENGTH = 3
_MIN_NAME_LENGTH = 3

_SECTION_HEADINGS = ("h2", "h3")


class BurgerEntry(BaseModel, frozen=True):
    name: str
    description: str | None = None


class ExtractedGagsData(BaseModel, frozen=True):
    store_next_door: str | None = None
    pest_control_truck: str | None = None
    burgers: tuple[BurgerEntry, ...] = ()


def normalize_burger_text(text: str, episode_title: str) -> BurgerEntry | None:
    """
    Turn a raw bold fragment into a burger entry, or None if it is noise.

    The name is split from its description at the first spaced dash
    (hyphen, en dash or em dash), else at a trailing parenthesized clause.
    A bare description is wrapped in parentheses.
    """
    name = text.strip().strip(_QUOTE_CHARS).strip()
    description: str | None = None

    separator = _DESCRIPTION_SEPARATOR_RE.search(name)
    if separator:
        description = name[separator.end() :].strip() or None
        name = name[: separator.start()].strip()
    else:
        parens = _TRAILING_PARENS_RE.match(name)
        if parens:
            name = parens.group(1).strip()
            description = f"({parens.group(2).strip()})"

    name = name.strip(_QUOTE_CHARS).strip()
    if _is_noise(name, episode_title):
        return None

    if description and not description.startswith("(") and not description.endswith(")"):
        description = f"({description})"
    return BurgerEntry(name=name, description=description)


def _is_noise(name: str, episode_title: str) -> bool:
    lowered = name.lower()
    return (
        len(name) < _MIN_NAME_LENGTH
        or bool(_CHARACTER_LABEL_RE.match(name))
        or lowered in _DENYLIST_EXACT
        or lowered == episode_title.lower()
        or any(phrase in lowered for phrase in _DENYLIST_SUBSTRINGS)
    )


def _section_fragments(heading: Tag) -> list[str]:
    """Bold texts between heading and the next h2/h3, in document order."""
    fragments: list[str] = []
    for sibling in heading.find_next_siblings():
        if sibling.name in _SECTION_HEADINGS:
            break
        bolds = [sibling] if sibling.name in ("b", "strong") else []
        bolds.extend(sibling.find_all(["b", "strong"]))
        for bold in bolds:
            text = bold.get_text().strip()
            if len(text) >= _MIN_FRAGMENT_LENGTH:
                fragments.append(text)
    return fragments


def _first_named(fragments: list[str], heading_phrase: str) -> str | None:
    """First fragment that is not a restatement of the section heading."""
    for fragment in fragments:
        if heading_phrase not in fragment.lower():
            return fragment
    return None


def _add_burger(burgers: list[BurgerEntry], text: str, episode_title: str) -> None:
    entry = normalize_burger_text(text, episode_title)
    if entry is not None and all(b.name != entry.name for b in burgers):
        burgers.append(entry)


def extract_gags(html: str, episode_title: str) -> ExtractedGagsData:
    """Extract store, truck and burger entries from Gags subpage markup."""
    soup = BeautifulSoup(html, "html.parser")
    content = soup.select_one("#mw-content-text") or soup

    store: str | None = None
    truck: str | None = None
    burgers: list[BurgerEntry] = []
    fallback: list[str] = []

    for heading in content.find_all(_SECTION_HEADINGS):
        heading_text = heading.get_text().strip().lower()
        fragments = _section_fragments(heading)
        if not fragments:
            continue

        if "running gags" in heading_text or heading_text == "gags":
            fallback.extend(fragments)

        if "store next door" in heading_text:
            store = _first_named(fragments, "store next door") or store
        elif "pest control" in heading_text:
            truck = _first_named(fragments, "pest control truck") or truck
        elif "burger of the day" in heading_text:
            for text in fragments:
                _add_burger(burgers, text, episode_title)

    if not burgers:
        for text in fallback:
            if text in (store, truck):
                continue
            _add_burger(burgers, text, episode_title)

    return ExtractedGagsData(store_next_door=store, pest_control_truck=truck, burgers=tuple(burgers))
