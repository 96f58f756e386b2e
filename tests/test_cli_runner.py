# tests/test_cli_runner.py

"""Tests for the headless CLI commands."""

import io
import json
import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from src.cli.runner import (
    cli_checkout,
    cli_list,
    parse_ids,
    run_health_check,
)
from src.models.product import Product, Rating
from src.services.errors import TransportError
from src.services.health_checker import HealthResult

_PRODUCTS = [
    Product(id=3, title="Hard Drive", price=64.0, rating=Rating(3.3, 203)),
    Product(id=7, title="Ring", price=9.99, rating=Rating(3.0, 400)),
]


def _patch_fetcher(
    products: list[Product] | None = None,
    error: Exception | None = None,
) -> Any:
    """Patch the fetcher class used by the runner."""
    fetcher = MagicMock()
    if error is not None:
        fetcher.fetch.side_effect = error
    else:
        fetcher.fetch.return_value = list(products or [])
    return patch(
        "src.cli.runner.ProductCatalogFetcher", return_value=fetcher
    )


class TestParseIds(unittest.TestCase):
    """Comma-separated id parsing."""

    def test_parses_and_keeps_duplicates(self) -> None:
        """Whitespace and empty parts are ignored; order is kept."""
        self.assertEqual(parse_ids(" 3, 7,,3 "), [3, 7, 3])

    def test_rejects_non_integers(self) -> None:
        """A non-numeric id exits with status 1."""
        with self.assertRaises(SystemExit) as ctx:
            parse_ids("3,abc")
        self.assertEqual(ctx.exception.code, 1)


class TestCliList(unittest.IsolatedAsyncioTestCase):
    """`--list` output and exit codes."""

    async def test_json_output(self) -> None:
        """JSON mode prints every product with its rating."""
        out = io.StringIO()
        with _patch_fetcher(_PRODUCTS), patch("sys.stdout", out):
            code = await cli_list("json")
        self.assertEqual(code, 0)
        data = json.loads(out.getvalue())
        self.assertEqual([d["id"] for d in data], [3, 7])
        self.assertEqual(data[0]["rating"], {"rate": 3.3, "count": 203})

    async def test_fetch_error_returns_one(self) -> None:
        """A fetch failure exits 1 without output on stdout."""
        out = io.StringIO()
        with _patch_fetcher(error=TransportError("offline")), patch(
            "sys.stdout", out
        ):
            code = await cli_list("json")
        self.assertEqual(code, 1)
        self.assertEqual(out.getvalue(), "")

    async def test_empty_catalog_is_not_a_failure(self) -> None:
        """An empty catalog prints an empty array and exits 0."""
        out = io.StringIO()
        with _patch_fetcher([]), patch("sys.stdout", out):
            code = await cli_list("json")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out.getvalue()), [])

    async def test_table_output(self) -> None:
        """Table mode renders through rich and exits 0."""
        with _patch_fetcher(_PRODUCTS), patch(
            "src.cli.runner._print_table"
        ) as mock_print:
            code = await cli_list("table")
        self.assertEqual(code, 0)
        mock_print.assert_called_once_with(_PRODUCTS)


class TestCliCheckout(unittest.IsolatedAsyncioTestCase):
    """`--checkout` runs the store end to end."""

    async def test_duplicates_collapsed_in_order(self) -> None:
        """3, 7, 3 checks out [3, 7] with the summed total."""
        out = io.StringIO()
        with _patch_fetcher(_PRODUCTS), patch("sys.stdout", out):
            code = await cli_checkout("3,7,3", "json")
        self.assertEqual(code, 0)
        data = json.loads(out.getvalue())
        self.assertEqual([d["id"] for d in data["items"]], [3, 7])
        self.assertTrue(all(d["favorite"] for d in data["items"]))
        self.assertEqual(data["item_count"], 2)
        self.assertAlmostEqual(data["total"], 73.99)
        self.assertIn("successfully", data["message"])

    async def test_unknown_ids_only(self) -> None:
        """Only unknown ids means an empty cart and exit 1."""
        with _patch_fetcher(_PRODUCTS):
            code = await cli_checkout("99", "json")
        self.assertEqual(code, 1)

    async def test_fetch_error(self) -> None:
        """A fetch failure exits 1."""
        with _patch_fetcher(error=TransportError("offline")):
            code = await cli_checkout("3", "table")
        self.assertEqual(code, 1)


class TestRunHealthCheck(unittest.IsolatedAsyncioTestCase):
    """`--health` exit codes."""

    async def _run_with(self, status: str) -> int:
        with patch(
            "src.services.health_checker.probe_endpoint",
            return_value=HealthResult("https://x.test/p", status, 12.0, ""),
        ), patch("src.cli.runner.Console"):
            return await run_health_check()

    async def test_override_url_is_checked(self) -> None:
        """-u URL is checked instead of the configured default."""
        with patch(
            "src.services.health_checker.probe_endpoint",
            side_effect=lambda url: HealthResult(url, "ok", 5.0, ""),
        ) as mock_check, patch("src.cli.runner.Console"):
            code = await run_health_check("https://mirror.test/products")
        self.assertEqual(code, 0)
        mock_check.assert_called_once_with("https://mirror.test/products")

    async def test_malformed_override_is_down(self) -> None:
        """A malformed URL reports down without any request."""
        with patch(
            "src.services.health_checker.curl_requests.Session"
        ) as mock_session_cls, patch("src.cli.runner.Console"):
            code = await run_health_check("not-a-url")
        self.assertEqual(code, 1)
        mock_session_cls.assert_not_called()

    async def test_ok_exits_zero(self) -> None:
        """Healthy endpoint exits 0."""
        self.assertEqual(await self._run_with("ok"), 0)

    async def test_slow_exits_zero(self) -> None:
        """Slow is a warning, not a failure."""
        self.assertEqual(await self._run_with("slow"), 0)

    async def test_down_exits_one(self) -> None:
        """Down endpoint exits 1."""
        self.assertEqual(await self._run_with("down"), 1)


if __name__ == "__main__":
    unittest.main()
