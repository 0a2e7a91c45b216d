"""Parsers for the wiki's Episode Guide and individual episode pages."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from pydantic import BaseModel

_SEASON_RE = re.compile(r"Season\s*(\d+)", re.IGNORECASE)
_CITATION_RE = re.compile(r"\[\d+\]")

_MIN_EPISODE_CELLS = 3
_MIN_TITLE_LENGTH = 2
_MIN_PLOT_LENGTH = 30
_MAX_PLOT_LENGTH = 500


class GuideEpisode(BaseModel, frozen=True):
    """An episode listed in the Episode Guide, numbered by its position in the season."""

    title: str
    url: str
    season: int
    episode_number: int

    @property
    def code(self) -> str:
        return f"S{self.season:02d}E{self.episode_number:02d}"


class EpisodePageDetails(BaseModel, frozen=True):
    plot_summary: str | None = None
    image_url: str | None = None


def _strip_one_quote(title: str) -> str:
    return re.sub(r"^[\"']|[\"']$", "", title)


def parse_episode_guide(html: str, base_url: str) -> list[GuideEpisode]:
    """
    List episodes from the Episode Guide season tables.

    Each ``table.wiki.fries-background`` belongs to the season named by the
    nearest preceding h2/h3. Tables seen before any season heading are
    skipped. Episode rows have at least three cells with the title link in
    the second; links to namespaced pages or season pages are ignored and
    each episode URL is listed once.
    """
    soup = BeautifulSoup(html, "html.parser")
    base = base_url.rstrip("/")

    episodes: list[GuideEpisode] = []
    seen_urls: set[str] = set()
    season = 0
    number_in_season = 0

    for table in soup.select("table.wiki.fries-background"):
        heading = table.find_previous_sibling(["h2", "h3"])
        if heading is not None:
            match = _SEASON_RE.search(heading.get_text())
            if match:
                season = int(match.group(1))
                number_in_season = 0
        if season == 0:
            continue

        for row in table.find_all("tr"):
            cells = row.find_all("td")
            if len(cells) < _MIN_EPISODE_CELLS:
                continue
            link = cells[1].select_one('a[href^="/wiki/"]')
            if link is None:
                continue
            href = str(link.get("href", ""))
            if ":" in href or "Season" in href:
                continue
            title = _strip_one_quote(link.get_text().strip())
            if len(title) < _MIN_TITLE_LENGTH or href in seen_urls:
                continue
            seen_urls.add(href)
            number_in_season += 1
            episodes.append(
                GuideEpisode(title=title, url=f"{base}{href}", season=season, episode_number=number_in_season)
            )

    return episodes


def _infobox_image(soup: BeautifulSoup) -> str | None:
    infobox = soup.select_one(".portable-infobox, .infobox")
    if infobox is None:
        return None
    image = infobox.find("img")
    if image is None:
        return None
    src = str(image.get("src") or "").split("/revision/")[0]
    if not src or "placeholder" in src or "data:" in src:
        return None
    return src


def _plot_text(soup: BeautifulSoup) -> str:
    for headline in soup.select("h2 .mw-headline"):
        if "Plot" not in headline.get_text():
            continue
        heading = headline.find_parent("h2")
        paragraph = heading.find_next_sibling("p") if heading is not None else None
        text = paragraph.get_text().strip() if paragraph is not None else ""
        if text:
            return text
        break
    first = soup.select_one("#mw-content-text .mw-parser-output > p")
    return first.get_text().strip() if first is not None else ""


def parse_episode_page(html: str) -> EpisodePageDetails:
    """Pull the infobox image and a plot summary from an episode page."""
    soup = BeautifulSoup(html, "html.parser")
    plot = _plot_text(soup)
    summary = None
    if len(plot) > _MIN_PLOT_LENGTH:
        summary = _CITATION_RE.sub("", plot)[:_MAX_PLOT_LENGTH].strip()
    return EpisodePageDetails(plot_summary=summary, image_url=_infobox_image(soup))
