"""Setup wizard working set and the derivations that turn it into a Configuration."""

from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from turix.config import (
    DEFAULT_GOOGLE_MODEL,
    DEFAULT_OLLAMA_MODEL,
    GOOGLE_PROVIDER,
    OLLAMA_PROVIDER,
    AgentConfig,
    Configuration,
    GoogleLLMConfig,
    OllamaLLMConfig,
)
from turix.wizard.permissions import PermissionChecker, check_system_permissions
from turix.wizard.probes import (
    GoogleCredentials,
    GoogleProbe,
    OllamaCredentials,
    OllamaProbe,
    simulated_google_probe,
    simulated_ollama_probe,
)
from turix.wizard.status import ConnectionStatus


class LLMProvider(str, Enum):
    OLLAMA = OLLAMA_PROVIDER
    GOOGLE = GOOGLE_PROVIDER

    @property
    def display_name(self) -> str:
        return "Ollama (Local)" if self is LLMProvider.OLLAMA else "Google AI (Cloud)"


class SetupMode(str, Enum):
    LOCAL_ONLY = "local"
    CLOUD_ONLY = "cloud"
    HYBRID = "hybrid"

    @classmethod
    def _missing_(cls, value: object) -> "SetupMode | None":
        # Accept "local-only" / "cloud_only" spellings.
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "-")
            return {"local-only": cls.LOCAL_ONLY, "cloud-only": cls.CLOUD_ONLY}.get(key)
        return None

    @property
    def display_name(self) -> str:
        return _MODE_LABELS[self][0]

    @property
    def description(self) -> str:
        return _MODE_LABELS[self][1]

    @property
    def uses_ollama(self) -> bool:
        return self is not SetupMode.CLOUD_ONLY

    @property
    def uses_google(self) -> bool:
        return self is not SetupMode.LOCAL_ONLY


_MODE_LABELS: dict[SetupMode, tuple[str, str]] = {
    SetupMode.LOCAL_ONLY: ("Local Only (Ollama)", "Free, private, requires ~16GB RAM"),
    SetupMode.CLOUD_ONLY: ("Cloud (Google AI)", "Best performance, API costs"),
    SetupMode.HYBRID: ("Hybrid", "Mix of local and cloud models (Recommended)"),
}


class ModelRole(str, Enum):
    BRAIN = "brain"
    ACTOR = "actor"
    PLANNER = "planner"
    MEMORY = "memory"

    @property
    def display_name(self) -> str:
        return self.value.title()

    @property
    def description(self) -> str:
        return _ROLE_DESCRIPTIONS[self]


_ROLE_DESCRIPTIONS: dict[ModelRole, str] = {
    ModelRole.BRAIN: "Main reasoning",
    ModelRole.ACTOR: "Action execution",
    ModelRole.PLANNER: "Task planning",
    ModelRole.MEMORY: "Context management",
}


class OllamaConnectionType(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


# (model id, label) in picker order; the first entry is the recommended one.
GOOGLE_MODELS: list[tuple[str, str]] = [
    ("gemini-2.0-flash", "Gemini 2.0 Flash (Recommended)"),
    ("gemini-2.0-pro", "Gemini 2.0 Pro"),
    ("gemini-1.5-flash", "Gemini 1.5 Flash"),
    ("gemini-1.5-pro", "Gemini 1.5 Pro"),
]


@dataclass(frozen=True)
class ModelAssignment:
    provider: LLMProvider
    model: str


RECOMMENDED_MODELS: dict[SetupMode, dict[ModelRole, ModelAssignment]] = {
    SetupMode.LOCAL_ONLY: {
        ModelRole.BRAIN: ModelAssignment(LLMProvider.OLLAMA, DEFAULT_OLLAMA_MODEL),
        ModelRole.ACTOR: ModelAssignment(LLMProvider.OLLAMA, DEFAULT_OLLAMA_MODEL),
        ModelRole.PLANNER: ModelAssignment(LLMProvider.OLLAMA, DEFAULT_OLLAMA_MODEL),
        ModelRole.MEMORY: ModelAssignment(LLMProvider.OLLAMA, DEFAULT_OLLAMA_MODEL),
    },
    SetupMode.CLOUD_ONLY: {
        ModelRole.BRAIN: ModelAssignment(LLMProvider.GOOGLE, "gemini-2.0-pro"),
        ModelRole.ACTOR: ModelAssignment(LLMProvider.GOOGLE, "gemini-2.0-flash"),
        ModelRole.PLANNER: ModelAssignment(LLMProvider.GOOGLE, "gemini-2.0-flash"),
        ModelRole.MEMORY: ModelAssignment(LLMProvider.GOOGLE, "gemini-1.5-flash"),
    },
    SetupMode.HYBRID: {
        ModelRole.BRAIN: ModelAssignment(LLMProvider.GOOGLE, DEFAULT_GOOGLE_MODEL),
        ModelRole.ACTOR: ModelAssignment(LLMProvider.OLLAMA, DEFAULT_OLLAMA_MODEL),
        ModelRole.PLANNER: ModelAssignment(LLMProvider.OLLAMA, DEFAULT_OLLAMA_MODEL),
        ModelRole.MEMORY: ModelAssignment(LLMProvider.OLLAMA, DEFAULT_OLLAMA_MODEL),
    },
}


def ollama_base_url(connection_type: OllamaConnectionType, host: str, port: str) -> str:
    """Build the Ollama endpoint URL. Host and port are passed through unvalidated."""
    if connection_type is OllamaConnectionType.LOCAL:
        return f"http://localhost:{port}"
    return f"http://{host}:{port}"


def _default_assignments() -> dict[ModelRole, ModelAssignment]:
    return dict(RECOMMENDED_MODELS[SetupMode.HYBRID])


@dataclass
class SetupState:
    """Mutable record of everything chosen so far in the wizard.

    Created fresh each time the wizard starts and discarded once the
    Configuration has been derived and saved. Rendering layers observe it
    by reading attributes after each action; it has no notification hooks.
    """
    current_step: int = 0
    llm_choice: SetupMode = SetupMode.HYBRID

    # Ollama
    ollama_connection_type: OllamaConnectionType = OllamaConnectionType.LOCAL
    ollama_host: str = ""
    ollama_port: str = "11434"
    ollama_models: list[str] = field(default_factory=list)
    ollama_connection_status: ConnectionStatus = field(default_factory=ConnectionStatus.not_tested)
    selected_ollama_model: str = ""

    # Google AI
    google_api_key: str = ""
    selected_google_model: str = DEFAULT_GOOGLE_MODEL
    google_connection_status: ConnectionStatus = field(default_factory=ConnectionStatus.not_tested)

    model_assignments: dict[ModelRole, ModelAssignment] = field(default_factory=_default_assignments)

    # Optional features
    enable_discord: bool = False
    enable_notifications: bool = True
    start_minimized: bool = False
    launch_at_login: bool = False

    # Permissions, refreshed from the OS only
    has_screen_recording: bool = False
    has_accessibility: bool = False
    has_notifications: bool = False

    def ollama_base_url(self) -> str:
        return ollama_base_url(self.ollama_connection_type, self.ollama_host, self.ollama_port)

    def set_ollama_endpoint(self, connection_type: OllamaConnectionType, host: str, port: str) -> None:
        """Update the endpoint. A changed URL needs a fresh connection test."""
        before = self.ollama_base_url()
        self.ollama_connection_type = OllamaConnectionType(connection_type)
        self.ollama_host = host
        self.ollama_port = port
        if self.ollama_base_url() != before:
            self.ollama_connection_status = ConnectionStatus.not_tested()

    def set_google_api_key(self, api_key: str) -> None:
        if api_key != self.google_api_key:
            self.google_connection_status = ConnectionStatus.not_tested()
        self.google_api_key = api_key

    def _llm_config(self, role: ModelRole) -> OllamaLLMConfig | GoogleLLMConfig:
        assignment = self.model_assignments[role]
        if assignment.provider is LLMProvider.GOOGLE:
            return GoogleLLMConfig(model_name=assignment.model, api_key=self.google_api_key)
        return OllamaLLMConfig(model_name=assignment.model, base_url=self.ollama_base_url())

    def build_configuration(self) -> Configuration:
        """Derive the persisted Configuration from the current assignments."""
        return Configuration(
            brain_llm=self._llm_config(ModelRole.BRAIN),
            actor_llm=self._llm_config(ModelRole.ACTOR),
            planner_llm=self._llm_config(ModelRole.PLANNER),
            memory_llm=self._llm_config(ModelRole.MEMORY),
            agent=AgentConfig(),
        )

    def apply_recommended_models(self, mode: SetupMode | None = None) -> None:
        """Overwrite all four role assignments with the preset for a setup mode."""
        mode = SetupMode(mode) if mode is not None else self.llm_choice
        self.model_assignments = dict(RECOMMENDED_MODELS[mode])
        logger.debug(f"Applied recommended models for {mode.value} setup")

    def assign_model(self, role: ModelRole, provider: LLMProvider, model: str) -> None:
        self.model_assignments[ModelRole(role)] = ModelAssignment(LLMProvider(provider), model)

    def available_models(self, provider: LLMProvider) -> list[str]:
        """Models offered for role assignment from a provider."""
        if LLMProvider(provider) is LLMProvider.OLLAMA:
            return list(self.ollama_models)
        if not self.google_api_key:
            return []
        return [model_id for model_id, _label in GOOGLE_MODELS]

    def _count_provider(self, provider: LLMProvider) -> int:
        return sum(1 for a in self.model_assignments.values() if a.provider is provider)

    def estimated_ram(self) -> str:
        ollama_count = self._count_provider(LLMProvider.OLLAMA)
        return f"~{ollama_count * 4}GB" if ollama_count > 0 else "Minimal"

    def estimated_cost(self) -> str:
        return "$0.01 - $0.10" if self._count_provider(LLMProvider.GOOGLE) > 0 else "Free"

    def summary_rows(self) -> list[tuple[str, str]]:
        rows: list[tuple[str, str]] = [("Setup Type", self.llm_choice.display_name)]
        if self.ollama_models:
            rows.append(("Ollama", f"Connected ({self.ollama_base_url()})"))
        if self.google_api_key:
            rows.append(("Google AI", "Configured"))
        for role in ModelRole:
            assignment = self.model_assignments.get(role)
            if assignment:
                rows.append((role.display_name, f"{assignment.provider.display_name}: {assignment.model}"))
        rows.append(("RAM Usage", self.estimated_ram()))
        rows.append(("Cost per Task", self.estimated_cost()))
        rows.append(("Discord Integration", "Enabled" if self.enable_discord else "Disabled"))
        rows.append(("Notifications", "Enabled" if self.enable_notifications else "Disabled"))
        rows.append(("Start Minimized", "Yes" if self.start_minimized else "No"))
        rows.append(("Launch at Login", "Yes" if self.launch_at_login else "No"))
        return rows

    def refresh_permissions(self, checker: PermissionChecker | None = None) -> None:
        snapshot = (checker or check_system_permissions)()
        self.has_screen_recording = snapshot.screen_recording
        self.has_accessibility = snapshot.accessibility
        self.has_notifications = snapshot.notifications

    def ollama_credentials(self) -> OllamaCredentials:
        return OllamaCredentials(
            connection_type=self.ollama_connection_type.value,
            host=self.ollama_host,
            port=self.ollama_port,
            base_url=self.ollama_base_url(),
        )

    async def test_ollama_connection(self, probe: OllamaProbe | None = None) -> ConnectionStatus:
        """Probe the Ollama endpoint and record the outcome.

        A second call while one is in flight is not guarded; whichever
        resolves last determines the stored status.
        """
        self.ollama_connection_status = ConnectionStatus.testing()
        credentials = self.ollama_credentials()
        result = await (probe or simulated_ollama_probe)(credentials)
        if result.status.is_success:
            self.ollama_models = list(result.models)
            if self.ollama_models and self.selected_ollama_model not in self.ollama_models:
                self.selected_ollama_model = self.ollama_models[0]
            logger.info(f"Ollama reachable at {credentials.base_url} ({len(self.ollama_models)} models)")
        else:
            logger.info(f"Ollama test failed for {credentials.base_url}: {result.status.reason}")
        self.ollama_connection_status = result.status
        return result.status

    async def test_google_connection(self, probe: GoogleProbe | None = None) -> ConnectionStatus:
        self.google_connection_status = ConnectionStatus.testing()
        credentials = GoogleCredentials(api_key=self.google_api_key, model=self.selected_google_model)
        result = await (probe or simulated_google_probe)(credentials)
        if not result.status.is_success:
            logger.info(f"Google AI test failed: {result.status.reason}")
        self.google_connection_status = result.status
        return result.status
