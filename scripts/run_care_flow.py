"""Carebook End-to-End Run - login to booked appointment against the configured tenant."""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv
from pydantic import ValidationError

# Load environment variables ONCE before any settings objects are created
load_dotenv(dotenv_path=project_root / ".env")

from carebook_sdk.client import CareApiClient
from carebook_sdk.logging import configure_logging
from carebook_sdk.transport import AiohttpTransport
from core.application.use_cases.care_flow import CareFlowOptions, CareFlowUseCase, ContextKeys
from core.reporting.summary import format_outcome_line, render_summary
from core.settings import CareSettings, get_care_settings
from orchestration import Event, InMemoryEventBus, Orchestrator


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--transport",
        choices=("api", "browser"),
        default="api",
        help="send requests directly (api) or from a provider-portal browser session (browser)",
    )
    parser.add_argument("--headed", action="store_true", help="show the browser window")
    parser.add_argument("--threshold", type=int, default=None, help="override the success threshold")
    parser.add_argument("--no-pause", action="store_true", help="skip pacing delays between steps")
    return parser.parse_args(argv)


def build_transport(settings: CareSettings, args: argparse.Namespace):
    if args.transport == "browser":
        from carebook_sdk.browser_transport import BrowserTransport

        return BrowserTransport(
            base_url=settings.api.base_url,
            portal_url=settings.api.portal_url,
            headless=not args.headed,
            timeout=settings.api.request_timeout,
        )
    return AiohttpTransport(settings.api.base_url, timeout=settings.api.request_timeout)


async def print_step(event: Event) -> None:
    print(f"   {format_outcome_line(event.payload['recorded'])}")


async def run(args: argparse.Namespace) -> int:
    """Run the flow once and return the process exit code."""
    try:
        settings = get_care_settings()
    except ValidationError as exc:
        print(f"❌ Invalid configuration:\n{exc}")
        return 2
    configure_logging(settings.run.log_level)

    options = CareFlowOptions.from_settings(settings)
    if args.threshold is not None:
        options.success_threshold = args.threshold
    if args.no_pause:
        options.availability_settle_seconds = 0.0
        options.strategy_pause_seconds = 0.0

    bus = InMemoryEventBus()
    bus.subscribe("workflow.step.succeeded", print_step)
    bus.subscribe("workflow.step.failed", print_step)
    orchestrator = Orchestrator(
        event_bus=bus,
        pause_seconds=0.0 if args.no_pause else settings.run.step_pause,
    )

    print("=" * 80)
    print("🚀 CAREBOOK END-TO-END RUN")
    print(f"Environment: {settings.api.base_url}")
    print(f"Tenant: {settings.api.tenant}")
    print(f"Transport: {args.transport}")
    print("=" * 80)

    client = CareApiClient(build_transport(settings, args), settings.api.tenant)
    try:
        response = await CareFlowUseCase(client, options).execute(orchestrator)
    finally:
        await client.close()

    result = response.result
    print()
    print(render_summary(result.report, settings.api.base_url, settings.api.tenant, response.verdict))

    ctx = result.context
    print(f"\nRun status: {result.status.value}")
    print(f"📝 Provider: {ctx.get(ContextKeys.PROVIDER_NAME)} ({ctx.get(ContextKeys.PROVIDER_ID)})")
    print(f"👤 Patient: {ctx.get(ContextKeys.PATIENT_NAME)} ({ctx.get(ContextKeys.PATIENT_ID)})")
    if ctx.has(ContextKeys.APPOINTMENT_ID):
        print(f"📅 Appointment: {ctx[ContextKeys.APPOINTMENT_ID]}")
    if ctx.has(ContextKeys.AVAILABLE_SLOTS):
        print(f"🕐 Available Slots Found: {len(ctx[ContextKeys.AVAILABLE_SLOTS])}")

    if response.accepted:
        print("\n✅ RUN ACCEPTED")
        return 0
    print("\n❌ RUN REJECTED")
    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    return asyncio.run(run(parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())
