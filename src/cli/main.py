"""CLI for KHQR Gateway.

Provides token registration, an example walkthrough, and the API server.
"""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.core.config import settings
from src.domain.exceptions import KHQRGenerationException
from src.application.services import KHQRService
from src.application.services.payment_service import deeplink_short_link
from src.infrastructure.clients import HttpBakongAPIClient
from src.infrastructure.clients.bakong_client import DEFAULT_BASE_URL
from src.service.settlement import resolve_payment_status

app = typer.Typer(
    name="khqr-gateway",
    help="KHQR Gateway - Bakong KHQR payment integration",
    add_completion=False,
)

console = Console()


@app.command("register-token")
def register_token(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL,
        "--base-url",
        "-u",
        help="Bakong API base URL",
    ),
) -> None:
    """Request and verify a Bakong API token."""
    console.print(Panel("Bakong API Token Registration", style="bold blue"))
    console.print("Step 1: Enter your information\n")

    email = typer.prompt("Email address")
    organization = typer.prompt("Organization/Business name")
    project = typer.prompt("Project name")

    client = HttpBakongAPIClient(api_token="", base_url=base_url)

    console.print("\n[blue]Requesting token...[/blue]")
    requested = asyncio.run(client.request_token(email, organization, project))

    if requested.get("responseCode") != 0:
        console.print(f"[red]Request failed:[/red] {requested.get('responseMessage')}")
        console.print(f"Error code: {requested.get('errorCode')}")
        raise typer.Exit(1)

    console.print(f"[green]{requested.get('responseMessage')}[/green]")
    console.print("Please check your email for the verification code.\n")

    code = typer.prompt("Enter verification code")

    console.print("\n[blue]Verifying code...[/blue]")
    verified = asyncio.run(client.verify_token(code))

    data = verified.get("data") if isinstance(verified.get("data"), dict) else {}
    token = data.get("token")
    if verified.get("responseCode") != 0 or not token:
        console.print(f"[red]Verification failed:[/red] {verified.get('responseMessage')}")
        console.print(f"Error code: {verified.get('errorCode')}")
        raise typer.Exit(1)

    console.print(Panel(token, title="Your Bakong API Token", border_style="green"))
    console.print("[yellow]Keep this token secure![/yellow] Add it to your .env file:\n")
    console.print(f"BAKONG_API_TOKEN={token}\n", markup=False)


@app.command()
def examples() -> None:
    """Run the KHQR generation, decode, verify, and status walkthrough."""
    account_id = settings.bakong_account_id
    merchant_name = settings.merchant_name

    if not account_id or not merchant_name:
        console.print("[yellow]Missing required configuration.[/yellow]")
        console.print("Set BAKONG_ACCOUNT_ID and MERCHANT_NAME in .env before running examples.")
        raise typer.Exit(1)

    khqr_service = KHQRService()

    console.print(Panel("Example 1: Generate USD Payment QR", style="bold blue"))
    try:
        usd = khqr_service.generate_individual_qr(
            account_id=account_id,
            merchant_name=merchant_name,
            merchant_city=settings.merchant_city,
            amount=5.00,
            currency="USD",
            bill_number="TEST-001",
            purpose_of_transaction="Coffee Purchase",
        )
    except KHQRGenerationException as e:
        console.print(f"[red]Failed:[/red] {e.message}")
        console.print("Check BAKONG_ACCOUNT_ID and MERCHANT_NAME values in .env.")
        raise typer.Exit(1)

    console.print("[green]Payment QR generated[/green]")
    console.print(f"  Bill Number: TEST-001\n  Amount: 5.00 USD\n  MD5: {usd.md5}")
    console.print(f"  QR String Length: {len(usd.qr_string)} characters")

    console.print(Panel("Example 2: Generate KHR Payment QR", style="bold blue"))
    try:
        khr = khqr_service.generate_individual_qr(
            account_id=account_id,
            merchant_name=merchant_name,
            merchant_city=settings.merchant_city,
            amount=20000,
            currency="KHR",
            bill_number="TEST-002",
            store_label="My Coffee Shop",
        )
        console.print("[green]KHR payment QR generated[/green]")
        console.print(f"  Bill Number: TEST-002\n  Amount: 20,000 KHR\n  MD5: {khr.md5}")
    except KHQRGenerationException as e:
        console.print(f"[red]Failed:[/red] {e.message}")

    console.print(Panel("Example 3: Decode QR", style="bold blue"))
    decoded = khqr_service.decode_khqr(usd.qr_string)
    table = Table(show_header=True)
    table.add_column("Field")
    table.add_column("Value")
    for field in ("bakongAccountID", "merchantName", "transactionAmount",
                  "transactionCurrency", "billNumber"):
        table.add_row(field, str(decoded.get(field)))
    console.print(table)

    console.print(Panel("Example 4: Verify QR", style="bold blue"))
    is_valid = khqr_service.verify_khqr(usd.qr_string)
    console.print(f"QR Code Valid: {'[green]Yes[/green]' if is_valid else '[red]No[/red]'}")

    client = HttpBakongAPIClient()
    if not client.has_token:
        console.print("\n[yellow]Skipping API examples - no token configured.[/yellow]")
        console.print("Run: khqr-gateway register-token")
        return

    asyncio.run(_api_examples(client, usd.qr_string, usd.md5, account_id, merchant_name))
    console.print("\n[green]Examples completed![/green]")


async def _api_examples(
    client: HttpBakongAPIClient,
    qr_string: str,
    md5: str,
    account_id: str,
    merchant_name: str,
) -> None:
    console.print(Panel("Example 5: Generate Deeplink", style="bold blue"))
    deeplink = await client.generate_deeplink(
        qr_string,
        {
            "appIconUrl": "https://bakong.nbc.org.kh/images/logo.svg",
            "appName": merchant_name,
            "appDeepLinkCallback": "https://example.com/payment/success",
        },
    )
    short_link = deeplink_short_link(deeplink)
    if short_link:
        console.print(f"[green]Deeplink generated:[/green] {short_link}")
    elif deeplink.get("responseCode") == 0:
        console.print("[yellow]Deeplink response carried no link[/yellow]")
    else:
        console.print(f"[red]Failed:[/red] {deeplink.get('responseMessage')}")

    console.print(Panel("Example 6: Check Account", style="bold blue"))
    account = await client.check_bakong_account(account_id)
    if account.get("responseCode") == 0:
        console.print(f"[green]Account exists:[/green] {account_id}")
    else:
        console.print(f"[red]Account not found:[/red] {account_id}")

    console.print(Panel("Example 7: Check Payment Status", style="bold blue"))
    result = await client.check_transaction_by_md5(md5)
    status = resolve_payment_status(result)
    console.print(f"Status: [bold]{status.value}[/bold]")
    if isinstance(result.get("data"), dict):
        data = result["data"]
        console.print(f"  From: {data.get('fromAccountId')}")
        console.print(f"  Amount: {data.get('amount')} {data.get('currency')}")
        console.print(f"  Hash: {data.get('hash')}")
    elif result.get("responseMessage"):
        console.print(f"  {result['responseMessage']}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
