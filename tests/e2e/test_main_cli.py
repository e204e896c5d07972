from unittest.mock import patch

import pytest

from adapters.main_cli import main


@pytest.fixture(autouse=True)
def no_infrastructure():
    with patch("adapters.main_cli.setup_logger"), patch(
        "adapters.main_cli.setup_opentelemetry"
    ):
        yield


@pytest.mark.e2e
def test_dispatch_extract() -> None:
    with patch("adapters.main_cli.ExtractCLI") as extract_cli:
        extract_cli.return_value.run.return_value = 0
        exit_code = main(["extract", "-in", "page.html", "--kind", "department"])

    assert exit_code == 0
    extract_cli.return_value.run.assert_called_once_with(
        ["-in", "page.html", "--kind", "department"]
    )


@pytest.mark.e2e
def test_dispatch_scrape() -> None:
    with patch("adapters.main_cli.ScrapeCLI") as scrape_cli:
        scrape_cli.return_value.run.return_value = 1
        exit_code = main(["scrape", "--other", "/usr/bin/tor", "/usr/bin/chromedriver"])

    assert exit_code == 1
    scrape_cli.return_value.run.assert_called_once_with(
        ["--other", "/usr/bin/tor", "/usr/bin/chromedriver"]
    )


@pytest.mark.e2e
def test_missing_subcommand() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 2


@pytest.mark.e2e
def test_script_entry_point() -> None:
    import main as script

    with patch.object(script, "unified_main", return_value=0):
        with pytest.raises(SystemExit) as exc_info:
            script.main()
    assert exc_info.value.code == 0
