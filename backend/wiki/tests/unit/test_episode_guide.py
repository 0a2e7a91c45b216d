"""Tests for the Episode Guide and episode page parsers."""

from wiki.episode_guide import GuideEpisode, parse_episode_guide, parse_episode_page

BASE = "https://wiki.test"


def _row(href: str, title: str) -> str:
    return f'<tr><td>1</td><td><a href="{href}">{title}</a></td><td>2011</td></tr>'


GUIDE_HTML = (
    "<html><body>"
    '<table class="wiki fries-background">' + _row("/wiki/Shorts", "Shorts") + "</table>"
    "<h2>Season 1</h2>"
    '<table class="wiki fries-background">'
    "<tr><th>#</th><th>Title</th><th>Air date</th></tr>"
    + _row("/wiki/Human_Flesh", '"Human Flesh"')
    + _row("/wiki/Crawl_Space", "Crawl Space")
    + _row("/wiki/Category:Episodes", "Episodes")
    + _row("/wiki/Season_2", "Season 2")
    + _row("/wiki/Human_Flesh", "Human Flesh")
    + _row("https://elsewhere.test/x", "External")
    + "</table>"
    "<h2>Season 2</h2>"
    '<table class="wiki fries-background">' + _row("/wiki/The_Belchies", "The Belchies") + "</table>"
    "</body></html>"
)


class TestParseEpisodeGuide:
    def test_numbers_episodes_within_season(self):
        episodes = parse_episode_guide(GUIDE_HTML, BASE + "/")
        assert episodes == [
            GuideEpisode(title="Human Flesh", url=f"{BASE}/wiki/Human_Flesh", season=1, episode_number=1),
            GuideEpisode(title="Crawl Space", url=f"{BASE}/wiki/Crawl_Space", season=1, episode_number=2),
            GuideEpisode(title="The Belchies", url=f"{BASE}/wiki/The_Belchies", season=2, episode_number=1),
        ]

    def test_episode_code(self):
        episode = GuideEpisode(title="x", url="u", season=3, episode_number=12)
        assert episode.code == "S03E12"

    def test_empty_page(self):
        assert parse_episode_guide("<html></html>", BASE) == []


class TestParseEpisodePage:
    def test_plot_section_and_infobox_image(self):
        html = (
            '<aside class="portable-infobox"><img src="https://img.test/a.png/revision/latest?cb=1"></aside>'
            '<h2><span class="mw-headline">Plot</span></h2>'
            "<p>Bob faces a health inspector after rumors spread about his burgers.[1]</p>"
        )
        details = parse_episode_page(html)
        assert details.image_url == "https://img.test/a.png"
        assert details.plot_summary == "Bob faces a health inspector after rumors spread about his burgers."

    def test_falls_back_to_first_paragraph(self):
        html = (
            '<div id="mw-content-text"><div class="mw-parser-output">'
            "<p>The Belchers go on a long adventure through an abandoned taffy factory.</p>"
            "</div></div>"
        )
        assert parse_episode_page(html).plot_summary.startswith("The Belchers go on")

    def test_short_plot_and_placeholder_image_dropped(self):
        html = (
            '<aside class="portable-infobox"><img src="https://img.test/placeholder.png"></aside>'
            '<h2><span class="mw-headline">Plot</span></h2><p>Too short.</p>'
        )
        details = parse_episode_page(html)
        assert details.plot_summary is None
        assert details.image_url is None

    def test_long_plot_is_truncated(self):
        html = f'<h2><span class="mw-headline">Plot</span></h2><p>{"a" * 800}</p>'
        assert len(parse_episode_page(html).plot_summary) == 500
