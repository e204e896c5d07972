import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from adapters.extract_cli import ExtractCLI
from tests.helpers.fixtures import (
    BASE_URL,
    city_page,
    get_all_fixtures,
    load_expected_json,
    load_html_fixture,
)


class TestExtractCLI:
    """Test the ExtractCLI end-to-end functionality."""

    @pytest.mark.e2e
    def test_setup_argument_parser(self) -> None:
        """Test argument parser setup."""
        parser = ExtractCLI().parser

        with pytest.raises(SystemExit):
            parser.parse_args([])

        args = parser.parse_args(["-in", "page.html"])
        assert args.source == "page.html"
        assert args.output_file is None
        assert args.kind == "city"

        args = parser.parse_args(["--input", "page.html", "--kind", "department"])
        assert args.kind == "department"

        with pytest.raises(SystemExit):
            parser.parse_args(["-in", "page.html", "--kind", "region"])

    @pytest.mark.e2e
    def test_complete_extraction_workflow(
        self, tmp_path: Path, fixtures_dir: Path
    ) -> None:
        """Test complete extraction workflow for all saved city pages."""
        fixtures = get_all_fixtures(fixtures_dir)
        assert fixtures

        for fixture_name in fixtures:
            html_file = tmp_path / fixture_name
            html_file.write_text(
                load_html_fixture(fixture_name, fixtures_dir), encoding="utf-8"
            )
            output_file = tmp_path / "out" / f"{fixture_name}.json"

            exit_code = ExtractCLI().run(
                ["-in", str(html_file), "-out", str(output_file)]
            )

            assert exit_code == 0
            actual = json.loads(output_file.read_text(encoding="utf-8"))
            assert actual == load_expected_json(fixture_name, fixtures_dir)

    @pytest.mark.e2e
    def test_print_to_console(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test the record is printed when no output file is given."""
        html_file = tmp_path / "vanves.html"
        html_file.write_text(city_page("Vanves", "92170", "92075"), encoding="utf-8")

        exit_code = ExtractCLI().run(["-in", str(html_file)])

        assert exit_code == 0
        record = json.loads(capsys.readouterr().out)
        assert record == {
            "code": "92170",
            "name": "Vanves",
            "insee_code": "92075",
            "ratings": {},
        }

    @pytest.mark.e2e
    def test_department_page(
        self, tmp_path: Path, fixtures_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test extraction of a saved department page."""
        html_file = tmp_path / "department-92.html"
        html_file.write_text(
            load_html_fixture("department-92.html", fixtures_dir), encoding="utf-8"
        )

        exit_code = ExtractCLI().run(["-in", str(html_file), "--kind", "department"])

        assert exit_code == 0
        record = json.loads(capsys.readouterr().out)
        assert (record["code"], record["name"]) == ("92", "Hauts-de-Seine")
        assert len(record["city_links"]) == 3
        assert record["city_links"][0] == (
            tmp_path.resolve() / "antony_92160.php"
        ).as_uri()
        assert record["city_links"][2] == BASE_URL + "marnes-la-coquette_92430.php"

    @pytest.mark.e2e
    def test_url_source(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a URL source is fetched over HTTP."""
        url = BASE_URL + "vanves_92170.php"
        client = MagicMock()
        client.get.return_value = (city_page("Vanves", "92170", "92075"), 200)

        exit_code = ExtractCLI(http_client=client).run(["-in", url])

        assert exit_code == 0
        client.get.assert_called_once_with(url)
        assert json.loads(capsys.readouterr().out)["insee_code"] == "92075"

    @pytest.mark.e2e
    def test_missing_input_file(self) -> None:
        """Test a missing input file is reported with exit code 1."""
        assert ExtractCLI().run(["-in", "/nonexistent/page.html"]) == 1

    @pytest.mark.e2e
    def test_unexpected_page(self, tmp_path: Path) -> None:
        """Test a page of the wrong kind is reported with exit code 1."""
        html_file = tmp_path / "vanves.html"
        html_file.write_text(city_page("Vanves", "92170", "92075"), encoding="utf-8")
        output_file = tmp_path / "out.json"

        exit_code = ExtractCLI().run(
            ["-in", str(html_file), "--kind", "department", "-out", str(output_file)]
        )

        assert exit_code == 1
        assert not output_file.exists()

    @pytest.mark.e2e
    def test_directory_input(self, tmp_path: Path) -> None:
        """Test a directory given as input is reported with exit code 1."""
        assert ExtractCLI().run(["-in", str(tmp_path)]) == 1

    @pytest.mark.e2e
    def test_non_utf8_input(self, tmp_path: Path) -> None:
        """Test an undecodable input file is reported with exit code 1."""
        html_file = tmp_path / "latin1.html"
        html_file.write_bytes("<h1>Cr\xe9teil (94000)</h1>".encode("latin-1"))

        assert ExtractCLI().run(["-in", str(html_file)]) == 1

    @pytest.mark.e2e
    def test_invalid_http_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a bad HTTP_TIMEOUT is reported with exit code 1."""
        monkeypatch.setenv("HTTP_TIMEOUT", "abc")

        assert ExtractCLI().run(["-in", BASE_URL + "creteil_94000.php"]) == 1
