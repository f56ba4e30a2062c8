"""Tests for the Node runner scraper backend."""

import json
import subprocess
from datetime import datetime
from unittest.mock import patch

import pytest

from finfamily_sync.exceptions import ScrapeFailure
from finfamily_sync.scrapers.base import ScrapeOptions
from finfamily_sync.scrapers.node_scraper import NodeBankScraper

OPTIONS = ScrapeOptions("leumi", datetime(2024, 1, 1))
CREDENTIALS = {"username": "u", "password": "p"}


def completed(stdout: str = "", returncode: int = 0, stderr: str = ""):  # type: ignore[no-untyped-def]
    return subprocess.CompletedProcess(
        args=["node"], returncode=returncode, stdout=stdout, stderr=stderr
    )


@pytest.fixture
def mock_run():  # type: ignore[no-untyped-def]
    with patch("finfamily_sync.scrapers.node_scraper.subprocess.run") as run:
        yield run


class TestNodeBankScraper:
    """Tests for NodeBankScraper.scrape."""

    def test_sends_request_on_stdin(self, mock_run) -> None:  # type: ignore[no-untyped-def]
        mock_run.return_value = completed(json.dumps({"success": True, "accounts": []}))

        NodeBankScraper("node scraper/run.js", timeout_seconds=60).scrape(
            OPTIONS, CREDENTIALS
        )

        args, kwargs = mock_run.call_args
        assert args[0] == ["node", "scraper/run.js"]
        assert kwargs["timeout"] == 60
        request = json.loads(kwargs["input"])
        assert request["options"]["companyId"] == "leumi"
        assert request["credentials"] == CREDENTIALS

    def test_parses_result(self, mock_run) -> None:  # type: ignore[no-untyped-def]
        mock_run.return_value = completed(
            json.dumps(
                {
                    "success": True,
                    "accounts": [{"accountNumber": "1", "balance": 10, "txns": []}],
                }
            )
        )

        result = NodeBankScraper(["node", "run.js"]).scrape(OPTIONS, CREDENTIALS)

        assert result.success is True
        assert result.accounts[0].account_number == "1"

    def test_in_band_failure_is_returned(self, mock_run) -> None:  # type: ignore[no-untyped-def]
        mock_run.return_value = completed(
            json.dumps({"success": False, "errorMessage": "invalid credentials"})
        )

        result = NodeBankScraper("node run.js").scrape(OPTIONS, CREDENTIALS)

        assert result.success is False
        assert result.error_message == "invalid credentials"

    def test_runner_missing(self, mock_run) -> None:  # type: ignore[no-untyped-def]
        mock_run.side_effect = FileNotFoundError()

        with pytest.raises(ScrapeFailure, match="Scraper runner not found: node"):
            NodeBankScraper("node run.js").scrape(OPTIONS, CREDENTIALS)

    def test_timeout(self, mock_run) -> None:  # type: ignore[no-untyped-def]
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="node", timeout=5)

        with pytest.raises(ScrapeFailure, match="timed out after 5s for leumi"):
            NodeBankScraper("node run.js", timeout_seconds=5).scrape(OPTIONS, CREDENTIALS)

    def test_non_zero_exit_uses_last_stderr_line(self, mock_run) -> None:  # type: ignore[no-untyped-def]
        mock_run.return_value = completed(
            returncode=1, stderr="at foo\nError: browser crashed\n"
        )

        with pytest.raises(ScrapeFailure, match="Error: browser crashed"):
            NodeBankScraper("node run.js").scrape(OPTIONS, CREDENTIALS)

    def test_non_zero_exit_without_stderr(self, mock_run) -> None:  # type: ignore[no-untyped-def]
        mock_run.return_value = completed(returncode=3)

        with pytest.raises(ScrapeFailure, match="exit code 3"):
            NodeBankScraper("node run.js").scrape(OPTIONS, CREDENTIALS)

    @pytest.mark.parametrize(
        ("stdout", "message"),
        [("not json", "invalid JSON"), ("[1, 2]", "unexpected payload")],
    )
    def test_bad_output(self, mock_run, stdout: str, message: str) -> None:  # type: ignore[no-untyped-def]
        mock_run.return_value = completed(stdout)

        with pytest.raises(ScrapeFailure, match=message):
            NodeBankScraper("node run.js").scrape(OPTIONS, CREDENTIALS)
