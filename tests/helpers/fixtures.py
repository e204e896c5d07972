import json
import logging
from pathlib import Path
from types import TracebackType
from typing import Any, Dict, List, Optional, Sequence, Tuple, cast

from domain.models import RatingCategory

logger = logging.getLogger(__name__)

BASE_URL = "https://www.ville-ideale.fr/"
INDEX_URL = BASE_URL + "villespardepts.php"


def load_html_fixture(fixture_name: str, fixtures_dir: Path) -> str:
    """
    Load HTML fixture content from the fixtures directory.

    Raises:
        FileNotFoundError: If fixture doesn't exist
    """
    fixture_path = fixtures_dir / "html" / fixture_name
    if not fixture_path.exists():
        raise FileNotFoundError(f"Fixture not found: {fixture_path}")
    return fixture_path.read_text(encoding="utf-8")


def load_expected_json(fixture_name: str, fixtures_dir: Path) -> Dict[str, Any]:
    """
    Load the expected JSON record for an HTML fixture.

    Raises:
        FileNotFoundError: If expected output doesn't exist
    """
    json_name = fixture_name.replace(".html", ".json")
    expected_path = fixtures_dir / "expected" / json_name
    if not expected_path.exists():
        raise FileNotFoundError(f"Expected output not found: {expected_path}")

    logger.debug("Loading JSON from %s", expected_path)
    return cast(Dict[str, Any], json.loads(expected_path.read_text(encoding="utf-8")))


def get_all_fixtures(fixtures_dir: Path) -> List[str]:
    """Get list of all HTML fixture files that have an expected output."""
    html_dir = fixtures_dir / "html"
    expected_dir = fixtures_dir / "expected"
    return sorted(
        f.name
        for f in html_dir.glob("*.html")
        if (expected_dir / f.name.replace(".html", ".json")).exists()
    )


def full_ratings(value: str = "7,5") -> Dict[str, str]:
    """Rating cell texts for every category, keyed by row label."""
    return {category.label: value for category in RatingCategory}


def city_page(
    name: str,
    code: str,
    insee_code: str,
    sample_count: Optional[str] = None,
    ratings: Optional[Dict[str, str]] = None,
    heading: Optional[str] = None,
) -> str:
    """Render a city page laid out like the ratings site."""
    heading = heading if heading is not None else f"{name} ({code})"
    sample = (
        ""
        if sample_count is None
        else f'<p id="nobt"><a href="#avis">Notes obtenues sur {sample_count} évaluations</a></p>'
    )
    rows = "".join(
        f"<tr><th>{label}</th><td>{value}</td></tr>"
        for label, value in (ratings or {}).items()
    )
    return f"""<html>
<head><title>{name}</title></head>
<body>
<div id="page">
  <div id="colleft">
    <h1>{heading}</h1>
    {sample}
    <table id="tablonotes"><tbody>{rows}</tbody></table>
  </div>
  <div id="info">
    <p>Code postal : {code}</p>
    <p><a href="https://www.insee.fr/">Statistiques INSEE : {insee_code}</a></p>
  </div>
</div>
</body>
</html>"""


def department_page(title: str, links: Sequence[Tuple[str, str]]) -> str:
    """Render a department listing with (href, text) city links."""
    paragraphs = "".join(f'<p><a href="{href}">{text}</a></p>' for href, text in links)
    return f"""<html>
<body>
<div id="page">
  <h1 id="titredept">{title}</h1>
  <div id="depart">{paragraphs}</div>
</div>
</body>
</html>"""


def index_page(links: Sequence[Tuple[str, str]]) -> str:
    """Render the department index with (href, text) department links."""
    anchors = " ".join(f'<a href="{href}">{text}</a>' for href, text in links)
    return f"""<html>
<body>
<div id="listedepts">{anchors}</div>
</body>
</html>"""


def paris_site() -> Dict[str, str]:
    """
    Pages of a site with one department (75 - Paris) listing two cities:
    CityA with 25 evaluations and CityB without any.
    """
    return {
        INDEX_URL: index_page(
            [
                ("departement75.php", "Paris (75)"),
                ("departement77.php", "Seine-et-Marne (77)"),
            ]
        ),
        BASE_URL + "departement75.php": department_page(
            "75 - Paris",
            [("citya_75101.php", "CityA"), ("cityb_75102.php", "CityB")],
        ),
        BASE_URL + "citya_75101.php": city_page(
            "CityA", "101", "75101", sample_count="25", ratings=full_ratings("7,5")
        ),
        BASE_URL + "cityb_75102.php": city_page("CityB", "102", "75102"),
    }


class DummySpan:
    """Simple mock for an OpenTelemetry span."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.attributes: Dict[str, Any] = {}

    def __enter__(self) -> "DummySpan":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        pass

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def set_attributes(self, attrs: Dict[str, Any]) -> None:
        self.attributes.update(attrs)


class DummyTracer:
    """Tracer mock that records every span it starts."""

    def __init__(self) -> None:
        self.spans: List[DummySpan] = []

    def start_as_current_span(self, name: str) -> DummySpan:
        span = DummySpan(name)
        self.spans.append(span)
        return span

    def span(self, name: str) -> DummySpan:
        """Return the last span started under a name."""
        return [s for s in self.spans if s.name == name][-1]
