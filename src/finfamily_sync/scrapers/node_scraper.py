"""Scraper backend that delegates to an external Node.js runner.

The runner wraps the ``israeli-bank-scrapers`` package. It reads one JSON
document on stdin::

    {"options": {...ScrapeOptions.to_payload()...}, "credentials": {...}}

and writes the scraper's result object (``success``, ``accounts``,
``errorType``, ``errorMessage``) as JSON on stdout.
"""

import json
import logging
import shlex
import subprocess
from collections.abc import Sequence
from typing import Any

from finfamily_sync.exceptions import ScrapeFailure
from finfamily_sync.scrapers.base import ScrapeOptions, ScrapeResult

logger = logging.getLogger(__name__)


class NodeBankScraper:
    """Runs one scrape per subprocess invocation of the Node runner."""

    def __init__(self, command: str | Sequence[str], timeout_seconds: float = 300) -> None:
        """Initialize the backend.

        Args:
            command: Runner command line, as a string or argv list.
            timeout_seconds: Kill the runner after this many seconds.
        """
        self._argv = shlex.split(command) if isinstance(command, str) else list(command)
        self._timeout = timeout_seconds

    def scrape(
        self, options: ScrapeOptions, credentials: dict[str, Any]
    ) -> ScrapeResult:
        """Run the external scraper and parse its result.

        Raises:
            ScrapeFailure: If the runner cannot be started, times out, exits
                non-zero or prints something that is not a result object.
        """
        request = json.dumps({"options": options.to_payload(), "credentials": credentials})
        logger.debug("Starting scraper runner for %s", options.company_id)

        try:
            completed = subprocess.run(
                self._argv,
                input=request,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise ScrapeFailure(f"Scraper runner not found: {self._argv[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise ScrapeFailure(
                f"Scraper timed out after {self._timeout:g}s for {options.company_id}"
            ) from e

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip().splitlines()
            detail = stderr[-1] if stderr else f"exit code {completed.returncode}"
            raise ScrapeFailure(f"Scraper runner failed: {detail}")

        try:
            data = json.loads(completed.stdout)
        except json.JSONDecodeError as e:
            raise ScrapeFailure("Scraper runner returned invalid JSON") from e

        if not isinstance(data, dict):
            raise ScrapeFailure("Scraper runner returned an unexpected payload")

        return ScrapeResult.from_dict(data)
