"""TuriX - Entry point. Shows the setup wizard on first run, chat afterwards."""

import sys

import yaml
from loguru import logger
from rich.console import Console
from rich.table import Table

from turix.storage.store import AppStore
from turix.utils.logger import setup_logging

console = Console()


def _parse_config_args(args: list[str]) -> tuple[str, bool]:
    """Parse config CLI args: [--yaml|--json]. Returns (format, ok)."""
    fmt = "json"
    for arg in args:
        if arg == "--yaml":
            fmt = "yaml"
        elif arg == "--json":
            fmt = "json"
        else:
            return fmt, False
    return fmt, True


def _print_main_usage() -> None:
    print("turix commands:")
    print("  turix                    # setup wizard on first run, chat afterwards")
    print("  turix setup              # run the setup wizard (alias: init)")
    print("  turix chat               # open the chat")
    print("  turix status             # setup status and model roles")
    print("  turix config [--yaml]    # print the saved configuration")
    print("  turix reset              # run the setup wizard again on next launch")
    print("Environment:")
    print("  TURIX_HOME               # application directory (default ~/.turix)")
    print("  TURIX_LOG_LEVEL          # log level (default WARNING)")


def _print_status(store: AppStore) -> int:
    completed = store.is_setup_completed()
    console.print(f"Application directory: [bold]{store.app_dir}[/bold]")
    console.print(f"Setup completed: {'[green]yes[/green]' if completed else '[yellow]no[/yellow]'}")
    config = store.load_configuration()
    if config is None:
        console.print("[dim]No saved configuration.[/dim]")
        return 0

    table = Table(show_header=True, width=70)
    table.add_column("Role", width=10)
    table.add_column("Provider", width=14)
    table.add_column("Model", width=20)
    table.add_column("Endpoint", width=22)
    for role, llm in config.roles().items():
        endpoint = llm.base_url if llm.provider == "ollama" else ("API key set" if llm.api_key else "no API key")
        table.add_row(role.title(), llm.provider, llm.model_name, endpoint)
    console.print(table)
    agent = config.agent
    console.print(
        f"[dim]Max actions per step: {agent.max_actions_per_step}  Max steps: {agent.max_steps}  "
        f"Memory budget: {agent.memory_budget}  Force stop: {agent.force_stop_hotkey}[/dim]"
    )
    return 0


def _print_config(store: AppStore, args: list[str]) -> int:
    fmt, ok = _parse_config_args(args)
    if not ok:
        print("Usage: turix config [--yaml|--json]")
        return 2
    config = store.load_configuration()
    if config is None:
        print(f"No configuration found at {store.config_path}. Run: turix setup")
        return 1
    if fmt == "yaml":
        print(yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False), end="")
    else:
        print(config.to_json())
    return 0


def _run_setup(store: AppStore) -> int:
    from turix.setup import run_setup
    config = run_setup(store)
    return 0 if config is not None else 1


def _run_chat(store: AppStore) -> int:
    from turix.chat.console import run_chat
    run_chat(store.load_configuration())
    return 0


def launch(store: AppStore) -> int:
    """Default action: the wizard until setup has completed, then chat."""
    if not store.is_setup_completed():
        logger.info("Setup not completed; starting wizard")
        code = _run_setup(store)
        if code != 0:
            return code
    return _run_chat(store)


def main():
    """CLI entry point."""
    args = sys.argv[1:]

    if args and args[0] in {"-h", "--help", "help"}:
        _print_main_usage()
        return

    setup_logging()
    store = AppStore()

    if not args or args[0] == "launch":
        raise SystemExit(launch(store))

    command, rest = args[0], args[1:]
    if command in {"setup", "init"}:
        raise SystemExit(_run_setup(store))
    if command == "chat":
        raise SystemExit(_run_chat(store))
    if command == "status":
        raise SystemExit(_print_status(store))
    if command == "config":
        raise SystemExit(_print_config(store, rest))
    if command == "reset":
        store.reset_setup()
        console.print("[green]Setup reset.[/green] The wizard will run on next launch.")
        return

    print(f"Unknown command: {command}")
    _print_main_usage()
    raise SystemExit(2)


if __name__ == "__main__":
    main()
