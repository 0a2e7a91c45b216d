"""Parsing of the episode search box input."""

import re

from shared.dal.models import EpisodeQuery

_SEASON_AND_EPISODE_RE = re.compile(r"S(\d+)E(\d+)")
_SEASON_ONLY_RE = re.compile(r"^S(\d+)$")
_EPISODE_ONLY_RE = re.compile(r"^E(\d+)$")


def parse_episode_query(raw: str) -> EpisodeQuery:
    """
    Turn the search text into a structured query.

    "S3E12"/"s03e12" (anywhere in the text) selects one episode, "S3" a
    season, "E12" that episode number in every season; anything else is a
    case-insensitive title substring. Blank input matches everything.
    """
    text = raw.strip()
    if not text:
        return EpisodeQuery()

    upper = text.upper()
    combined = _SEASON_AND_EPISODE_RE.search(upper)
    if combined:
        return EpisodeQuery(season=int(combined.group(1)), episode_number=int(combined.group(2)))
    season = _SEASON_ONLY_RE.match(upper)
    if season:
        return EpisodeQuery(season=int(season.group(1)))
    episode = _EPISODE_ONLY_RE.match(upper)
    if episode:
        return EpisodeQuery(episode_number=int(episode.group(1)))
    return EpisodeQuery(title=text)
