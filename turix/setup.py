"""Interactive setup wizard for TuriX (terminal host for SetupWizard)."""

import asyncio

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from turix.config import Configuration
from turix.storage.store import AppStore
from turix.wizard.flow import SetupStep, SetupWizard
from turix.wizard.permissions import (
    ACCESSIBILITY_SETTINGS_URL,
    NOTIFICATION_SETTINGS_URL,
    SCREEN_RECORDING_SETTINGS_URL,
    PermissionChecker,
)
from turix.wizard.probes import GoogleProbe, OllamaProbe
from turix.wizard.state import (
    GOOGLE_MODELS,
    LLMProvider,
    ModelRole,
    OllamaConnectionType,
    SetupMode,
)
from turix.wizard.status import ConnectionStatus, StatusKind

console = Console()

BACK = "back"
NEXT = "next"
SKIP = "skip"
QUIT = "quit"

STATUS_ICONS = {
    StatusKind.NOT_TESTED: "[dim]o[/dim]",
    StatusKind.TESTING: "[yellow]~[/yellow]",
    StatusKind.SUCCESS: "[green]v[/green]",
    StatusKind.FAILED: "[red]x[/red]",
}


def _status_line(status: ConnectionStatus) -> str:
    return f"{STATUS_ICONS[status.kind]} {status.message}"


def _open_browser(url: str) -> bool:
    """Open URL (including System Settings deep links) with the default handler."""
    try:
        import webbrowser
        return webbrowser.open(url)
    except Exception:
        return False


def _step_header(wizard: SetupWizard) -> None:
    """Print a step header with progress indicator."""
    num, total = wizard.progress()
    progress = f"[dim]({num}/{total})[/dim]"
    bar = f"[green]{'*' * num}[/green][dim]{'.' * (total - num)}[/dim]"
    console.print(f"\n{bar}  [bold cyan]Step {num}[/bold cyan] {progress}  [bold]{wizard.current.title}[/bold]\n")


def _nav_prompt(wizard: SetupWizard, extra: dict[str, str] | None = None) -> str:
    """Ask for the next action. Continue is only offered when the step's gate is open."""
    options: dict[str, str] = dict(extra or {})
    if wizard.can_continue():
        options["c"] = "continue"
    options["b"] = "back"
    options["q"] = "quit"
    hint = "  ".join(f"[bold]{k}[/bold]={v}" for k, v in options.items())
    console.print(f"[dim]{hint}[/dim]")
    default = "c" if "c" in options else next(iter(options))
    return Prompt.ask("Choose", choices=list(options), default=default)


def _welcome(wizard: SetupWizard) -> str:
    console.print(Panel(
        "[bold]Welcome to TuriX[/bold]\n\n"
        "TuriX lets powerful AI models take real, hands-on actions directly on\n"
        "your desktop. Let's get you set up in just a few steps.\n\n"
        "[dim]Skip to save a default hybrid configuration and finish now.[/dim]",
        title="TuriX setup",
        border_style="blue",
        width=70,
    ))
    choice = Prompt.ask("Get started?", choices=["start", "skip", "quit"], default="start")
    return {"start": NEXT, "skip": SKIP, "quit": QUIT}[choice]


def _permissions(wizard: SetupWizard, checker: PermissionChecker | None) -> str:
    state = wizard.state
    while True:
        state.refresh_permissions(checker)
        table = Table(show_header=True, width=70)
        table.add_column("Permission", width=20)
        table.add_column("Needed for", width=30)
        table.add_column("Status", width=12)
        rows = [
            ("Screen Recording", "Seeing what is on screen", state.has_screen_recording, True),
            ("Accessibility", "Controlling mouse and keyboard", state.has_accessibility, True),
            ("Notifications", "Task updates (optional)", state.has_notifications, False),
        ]
        for title, purpose, granted, required in rows:
            status = "[green]Granted[/green]" if granted else ("[red]Required[/red]" if required else "[yellow]Off[/yellow]")
            table.add_row(title, purpose, status)
        console.print(table)

        action = _nav_prompt(wizard, {"s": "open screen recording", "a": "open accessibility", "n": "open notifications", "r": "re-check"})
        if action == "c":
            return NEXT
        if action == "b":
            return BACK
        if action == "q":
            return QUIT
        url = {"s": SCREEN_RECORDING_SETTINGS_URL, "a": ACCESSIBILITY_SETTINGS_URL, "n": NOTIFICATION_SETTINGS_URL}.get(action)
        if url and not _open_browser(url):
            console.print("[dim]Couldn't open System Settings. Open Privacy & Security manually.[/dim]")


def _llm_choice(wizard: SetupWizard) -> str:
    state = wizard.state
    modes = list(SetupMode)
    table = Table(show_header=True, show_lines=True, width=70)
    table.add_column("#", style="bold", width=3)
    table.add_column("Setup", width=22)
    table.add_column("What it means", width=40)
    for i, mode in enumerate(modes, 1):
        table.add_row(str(i), mode.display_name, mode.description)
    console.print(table)

    choice = Prompt.ask(
        "Enter a number [dim](or b to go back)[/dim]",
        choices=[str(i) for i in range(1, len(modes) + 1)] + ["b"],
        default=str(modes.index(state.llm_choice) + 1),
    )
    if choice == "b":
        return BACK
    mode = modes[int(choice) - 1]
    if mode is not state.llm_choice:
        state.llm_choice = mode
        state.apply_recommended_models()
    console.print(f"[green]v[/green] {mode.display_name}")
    return NEXT


def _ollama_config(wizard: SetupWizard, probe: OllamaProbe | None) -> str:
    state = wizard.state
    while True:
        console.print(f"Endpoint: [bold]{state.ollama_base_url()}[/bold]  {_status_line(state.ollama_connection_status)}")
        if state.ollama_models:
            console.print(f"Model: [bold]{state.selected_ollama_model or '(none)'}[/bold]")

        extra = {"e": "edit endpoint", "t": "test connection"}
        if state.ollama_models:
            extra["m"] = "pick model"
        action = _nav_prompt(wizard, extra)
        if action == "c":
            return NEXT
        if action == "b":
            return BACK
        if action == "q":
            return QUIT
        if action == "e":
            kind = OllamaConnectionType(Prompt.ask(
                "Connection", choices=[t.value for t in OllamaConnectionType], default=state.ollama_connection_type.value
            ))
            host = state.ollama_host
            if kind is OllamaConnectionType.REMOTE:
                host = Prompt.ask("IP address", default=state.ollama_host).strip()
            port = Prompt.ask("Port", default=state.ollama_port).strip()
            state.set_ollama_endpoint(kind, host, port)
        elif action == "t":
            with console.status("[bold cyan]Testing Ollama connection...[/bold cyan]", spinner="dots"):
                asyncio.run(state.test_ollama_connection(probe))
        elif action == "m":
            state.selected_ollama_model = _pick(state.ollama_models, state.selected_ollama_model, "Ollama model")


def _google_config(wizard: SetupWizard, probe: GoogleProbe | None) -> str:
    state = wizard.state
    while True:
        key_label = "(set)" if state.google_api_key else "(not set)"
        console.print(
            f"API key: [bold]{key_label}[/bold]  Model: [bold]{state.selected_google_model}[/bold]  "
            f"{_status_line(state.google_connection_status)}"
        )
        extra = {"k": "enter API key", "m": "pick model"}
        if state.google_api_key:
            extra["t"] = "test connection"
        action = _nav_prompt(wizard, extra)
        if action == "c":
            return NEXT
        if action == "b":
            return BACK
        if action == "q":
            return QUIT
        if action == "k":
            console.print("[dim]Get a key at https://aistudio.google.com/apikey[/dim]")
            state.set_google_api_key(Prompt.ask("Google AI API key", password=True).strip())
        elif action == "m":
            state.selected_google_model = _pick([m for m, _ in GOOGLE_MODELS], state.selected_google_model, "Google model")
        elif action == "t":
            with console.status("[bold cyan]Testing your API key...[/bold cyan]", spinner="dots"):
                asyncio.run(state.test_google_connection(probe))


def _pick(options: list[str], current: str, label: str) -> str:
    for i, option in enumerate(options, 1):
        marker = "[green]*[/green]" if option == current else " "
        console.print(f"  {marker} {i}. {option}")
    default = str(options.index(current) + 1) if current in options else "1"
    choice = Prompt.ask(label, choices=[str(i) for i in range(1, len(options) + 1)], default=default)
    return options[int(choice) - 1]


def _render_assignments(wizard: SetupWizard) -> None:
    state = wizard.state
    table = Table(show_header=True, width=70)
    table.add_column("#", style="bold", width=3)
    table.add_column("Role", width=12)
    table.add_column("Purpose", width=20)
    table.add_column("Model", width=30)
    for i, role in enumerate(ModelRole, 1):
        a = state.model_assignments[role]
        table.add_row(str(i), role.display_name, role.description, f"{a.provider.display_name}: {a.model}")
    console.print(table)
    console.print(f"[dim]RAM usage: {state.estimated_ram()}   Cost per task: {state.estimated_cost()}[/dim]")


def _model_assignment(wizard: SetupWizard) -> str:
    state = wizard.state
    roles = list(ModelRole)
    while True:
        _render_assignments(wizard)
        extra = {str(i): f"change {role.value}" for i, role in enumerate(roles, 1)}
        extra["r"] = "use recommended"
        action = _nav_prompt(wizard, extra)
        if action == "c":
            return NEXT
        if action == "b":
            return BACK
        if action == "q":
            return QUIT
        if action == "r":
            state.apply_recommended_models()
            continue

        role = roles[int(action) - 1]
        providers = [p for p in LLMProvider if state.available_models(p)]
        if not providers:
            console.print("[yellow]No models available yet. Configure Ollama or Google AI first.[/yellow]")
            continue
        provider_name = Prompt.ask("Provider", choices=[p.value for p in providers], default=providers[0].value)
        provider = LLMProvider(provider_name)
        models = state.available_models(provider)
        current = state.model_assignments[role].model
        state.assign_model(role, provider, _pick(models, current, f"{role.display_name} model"))


def _optional_features(wizard: SetupWizard) -> str:
    state = wizard.state
    state.enable_discord = Confirm.ask("Enable Discord integration?", default=state.enable_discord)
    state.enable_notifications = Confirm.ask("Enable desktop notifications?", default=state.enable_notifications)
    state.start_minimized = Confirm.ask("Start minimized to menu bar?", default=state.start_minimized)
    state.launch_at_login = Confirm.ask("Launch at login?", default=state.launch_at_login)
    action = _nav_prompt(wizard)
    return {"c": NEXT, "b": BACK, "q": QUIT}[action]


def _summary(wizard: SetupWizard) -> str:
    table = Table(show_header=False, width=70, padding=(0, 1))
    table.add_column("Setting", style="bold", width=22)
    table.add_column("Value", width=44)
    for label, value in wizard.state.summary_rows():
        table.add_row(label, value)
    console.print(Panel(table, title="Configuration summary", border_style="cyan", width=70))
    action = Prompt.ask("Finish setup?", choices=["finish", "back", "quit"], default="finish")
    return {"finish": NEXT, "back": BACK, "quit": QUIT}[action]


def run_setup(
    store: AppStore,
    ollama_probe: OllamaProbe | None = None,
    google_probe: GoogleProbe | None = None,
    permission_checker: PermissionChecker | None = None,
) -> Configuration | None:
    """Walk the user through setup. Returns the saved Configuration, or None if they quit."""
    wizard = SetupWizard(store)

    while not wizard.completed:
        step = wizard.current
        if step is not SetupStep.WELCOME:
            _step_header(wizard)

        if step is SetupStep.WELCOME:
            action = _welcome(wizard)
        elif step is SetupStep.PERMISSIONS:
            action = _permissions(wizard, permission_checker)
        elif step is SetupStep.LLM_CHOICE:
            action = _llm_choice(wizard)
        elif step is SetupStep.OLLAMA_CONFIG:
            action = _ollama_config(wizard, ollama_probe)
        elif step is SetupStep.GOOGLE_CONFIG:
            action = _google_config(wizard, google_probe)
        elif step is SetupStep.MODEL_ASSIGNMENT:
            action = _model_assignment(wizard)
        elif step is SetupStep.OPTIONAL_FEATURES:
            action = _optional_features(wizard)
        else:
            action = _summary(wizard)

        if action == QUIT:
            console.print("[yellow]Setup cancelled. Nothing was saved.[/yellow]")
            return None
        if action == BACK:
            if step is not SetupStep.WELCOME:
                wizard.back()
            continue

        try:
            if action == SKIP:
                wizard.skip()
            else:
                wizard.advance()
        except OSError as e:
            logger.error(f"Setup could not be saved: {e}")
            console.print(f"[red]Could not save settings to {store.app_dir}: {e}[/red]")
            if not Confirm.ask("Try again?", default=True):
                return None

    console.print(Panel(
        f"[bold green]Setup complete![/bold green]\n\n"
        f"Config saved to: [bold]{store.config_path}[/bold]\n\n"
        "[bold]To start chatting, run:[/bold]\n\n"
        "  turix chat\n\n"
        "[dim]To run setup again later: turix reset && turix[/dim]",
        title="All done!",
        border_style="green",
        width=70,
    ))
    return wizard.configuration
