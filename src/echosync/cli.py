"""
CLI entry point.

Commands:
- ask <message> [--nodes all|auto|key1,key2]: Fan one message out and print replies
- chat: Interactive loop, every line goes to all nodes
- status: Provider keys and node metrics
- health: Request counters and active key count
- key set <provider> <secret> / key unset <provider>: Manage the vault
- init: Create the data directory

Flags:
- --debug: Enable debug logging
"""

import asyncio
import logging
import sys

from echosync.core.config import Settings, get_settings
from echosync.core.coordinator import DispatchCoordinator, DispatchValidationError
from echosync.core.logging import get_logger, setup_logging
from echosync.core.types import DispatchOutcome, NodeResponse
from echosync.vault.store import CredentialVault

USAGE = """Usage: echosync [--debug] <command>
Commands: ask, chat, status, health, key, init
  ask <message> [--nodes all|auto|key1,key2]
  key set <provider> <secret>
  key unset <provider>"""


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = list(sys.argv[1:] if argv is None else argv)
    settings = get_settings()

    debug_mode = "--debug" in args
    if debug_mode:
        args.remove("--debug")

    log_level = logging.DEBUG if debug_mode else logging.INFO
    log_file = settings.log_path if settings.log_to_file else None
    setup_logging(level=log_level, log_file=log_file)
    logger = get_logger("cli")

    if not args:
        print(USAGE)
        return 1

    command, rest = args[0], args[1:]

    if command == "init":
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Initialized data directory: {settings.data_dir}")
        print(f"Created: {settings.data_dir}")
        return 0

    if command == "ask":
        return asyncio.run(_ask(settings, rest))

    if command == "chat":
        logger.info("Starting CLI chat mode")
        return asyncio.run(_chat_loop(settings))

    if command == "status":
        return asyncio.run(_status(settings))

    if command == "health":
        return asyncio.run(_health(settings))

    if command == "key":
        return asyncio.run(_key(settings, rest))

    print(f"Unknown command: {command}")
    return 1


def _parse_nodes(value: str) -> str | list[str]:
    if value in ("all", "auto"):
        return value
    keys = [k.strip() for k in value.split(",") if k.strip()]
    return keys[0] if len(keys) == 1 else keys


def _print_outcome(outcome: DispatchOutcome) -> None:
    analysis = outcome.task_analysis
    print(f"[{analysis.primary_type.value} {analysis.confidence:.2f}]")
    for key, result in outcome.responses.items():
        if isinstance(result, NodeResponse):
            marker = "" if result.success else " FAILED"
            print(f"\n{key.upper()} ({result.mode}, {result.response_time_ms}ms){marker}:")
            print(f"  {result.message}")
        else:
            print(f"\n{key.upper()} FAILED: {result.error}")
    print()


def _build(settings: Settings) -> DispatchCoordinator:
    coordinator = DispatchCoordinator(settings, CredentialVault(settings))
    coordinator.initialize()
    return coordinator


async def _ask(settings: Settings, args: list[str]) -> int:
    nodes: str | list[str] = "all"
    if "--nodes" in args:
        index = args.index("--nodes")
        if index + 1 >= len(args):
            print("--nodes needs a value")
            return 1
        nodes = _parse_nodes(args[index + 1])
        del args[index:index + 2]

    coordinator = _build(settings)
    try:
        outcome = await coordinator.dispatch_all(" ".join(args), nodes=nodes)
    except DispatchValidationError as e:
        print(f"Error: {e}")
        return 1
    finally:
        await coordinator.close()

    _print_outcome(outcome)
    return 0


async def _chat_loop(settings: Settings) -> int:
    """Interactive chat with every node."""
    coordinator = _build(settings)

    print("EchoSync CLI Chat")
    print("Commands: /status, /exit")
    print("-" * 40)

    try:
        while True:
            try:
                user_input = input("> ").strip()
            except EOFError:
                break

            if not user_input:
                continue
            if user_input.lower() in ("/exit", "exit", "quit", "q"):
                break
            if user_input == "/status":
                metrics = coordinator.metrics
                print(f"Requests: {metrics.total_requests} ({metrics.failed_requests} failed)\n")
                continue

            try:
                outcome = await coordinator.dispatch_all(user_input)
            except DispatchValidationError as e:
                print(f"Error: {e}\n")
                continue
            _print_outcome(outcome)

    except KeyboardInterrupt:
        print("\n\nShutting down...")
    finally:
        await coordinator.close()

    print("Goodbye!")
    return 0


async def _status(settings: Settings) -> int:
    coordinator = _build(settings)
    try:
        print("API keys:")
        for entry in coordinator.credential_status():
            print(f"  {entry.provider_id:<12} {entry.state.value:<8} {entry.preview}")
        print("Nodes:")
        for node in coordinator.nodes.values():
            mode = node.effective_mode(coordinator.vault)
            print(f"  {node.key:<12} {node.name:<24} {mode}")
    finally:
        await coordinator.close()
    return 0


async def _health(settings: Settings) -> int:
    coordinator = _build(settings)
    try:
        health = coordinator.health()
    finally:
        await coordinator.close()
    print(f"Status: {health['status']} (v{health['version']})")
    print(f"Nodes: {health['nodes']}, active keys: {health['credentials']}")
    return 0


async def _key(settings: Settings, args: list[str]) -> int:
    if len(args) == 3 and args[0] == "set":
        provider_id, secret = args[1], args[2]
    elif len(args) == 2 and args[0] == "unset":
        provider_id, secret = args[1], ""
    else:
        print(USAGE)
        return 1

    coordinator = _build(settings)
    try:
        saved = await coordinator.set_credential(provider_id, secret)
    finally:
        await coordinator.close()

    if not saved:
        print("Failed to save credentials")
        return 1
    state = "stored" if coordinator.vault.has(provider_id) else "removed"
    print(f"Key for {provider_id} {state}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
