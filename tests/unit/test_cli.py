"""
Unit Tests for the CLI API examples.

The examples run against a mock Bakong client and must tolerate
provider responses without a data payload.
"""

from io import StringIO

import pytest
from rich.console import Console

from src.cli import main as cli
from tests.conftest import COMPLETED, MockBakongAPIClient


@pytest.fixture
def output(monkeypatch) -> StringIO:
    buffer = StringIO()
    monkeypatch.setattr(cli, "console", Console(file=buffer, width=120))
    return buffer


async def run_examples(client: MockBakongAPIClient) -> None:
    await cli._api_examples(client, "qr-string", "md5-hash", "john_smith@devb", "Demo Shop")


class TestApiExamples:

    @pytest.mark.asyncio
    async def test_deeplink_success_prints_link(self, output):
        client = MockBakongAPIClient()

        await run_examples(client)

        assert "https://bakong.page.link/demo" in output.getvalue()

    @pytest.mark.asyncio
    async def test_deeplink_success_without_data(self, output):
        client = MockBakongAPIClient()
        client.deeplink_response = {"responseCode": 0, "errorCode": None, "data": None}

        await run_examples(client)

        text = output.getvalue()
        assert "Deeplink response carried no link" in text
        assert "Example 6: Check Account" in text

    @pytest.mark.asyncio
    async def test_payment_status_printed(self, output):
        client = MockBakongAPIClient()
        client.md5_response = COMPLETED

        await run_examples(client)

        text = output.getvalue()
        assert "Status: completed" in text
        assert "payer@devb" in text
