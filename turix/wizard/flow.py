"""Setup wizard step sequencer."""

from enum import Enum

from loguru import logger

from turix.config import Configuration
from turix.storage.store import AppStore
from turix.wizard.state import SetupMode, SetupState


class SetupStep(str, Enum):
    WELCOME = "welcome"
    PERMISSIONS = "permissions"
    LLM_CHOICE = "llm_choice"
    OLLAMA_CONFIG = "ollama_config"
    GOOGLE_CONFIG = "google_config"
    MODEL_ASSIGNMENT = "model_assignment"
    OPTIONAL_FEATURES = "optional_features"
    SUMMARY = "summary"
    COMPLETED = "completed"

    @property
    def title(self) -> str:
        return _STEP_TITLES[self]


_STEP_TITLES: dict[SetupStep, str] = {
    SetupStep.WELCOME: "Welcome",
    SetupStep.PERMISSIONS: "Grant permissions",
    SetupStep.LLM_CHOICE: "Choose how to run models",
    SetupStep.OLLAMA_CONFIG: "Connect to Ollama",
    SetupStep.GOOGLE_CONFIG: "Connect to Google AI",
    SetupStep.MODEL_ASSIGNMENT: "Assign models to roles",
    SetupStep.OPTIONAL_FEATURES: "Optional features",
    SetupStep.SUMMARY: "Review and finish",
    SetupStep.COMPLETED: "Done",
}


def path_for_mode(mode: SetupMode) -> list[SetupStep]:
    """Steps visited, in order, for a given setup mode (terminal excluded)."""
    steps = [SetupStep.WELCOME, SetupStep.PERMISSIONS, SetupStep.LLM_CHOICE]
    if mode.uses_ollama:
        steps.append(SetupStep.OLLAMA_CONFIG)
    if mode.uses_google:
        steps.append(SetupStep.GOOGLE_CONFIG)
    steps += [SetupStep.MODEL_ASSIGNMENT, SetupStep.OPTIONAL_FEATURES, SetupStep.SUMMARY]
    return steps


class SetupWizard:
    """Linear, occasionally branching walk over SetupStep.

    Forward moves are gated per step (see ``can_continue``); ``back`` pops
    the navigation history and is never gated. The terminal step is reached
    once, by finishing from the summary or skipping from the welcome step,
    and both persist a Configuration through the store.
    """

    def __init__(self, store: AppStore, state: SetupState | None = None):
        self.store = store
        self.state = state or SetupState()
        self.history: list[SetupStep] = [SetupStep.WELCOME]
        self.configuration: Configuration | None = None

    @property
    def current(self) -> SetupStep:
        return self.history[-1]

    @property
    def completed(self) -> bool:
        return self.current is SetupStep.COMPLETED

    def restart(self) -> None:
        """Discard all choices and start again from the welcome step."""
        self.state = SetupState()
        self.history = [SetupStep.WELCOME]
        self.configuration = None

    def progress(self) -> tuple[int, int]:
        """(1-based position, total) along the path for the chosen mode."""
        path = path_for_mode(self.state.llm_choice)
        if self.completed:
            return len(path), len(path)
        if self.current not in path:
            # Mode changed after branching; fall back to history depth.
            return len(self.history), max(len(path), len(self.history))
        return path.index(self.current) + 1, len(path)

    def can_continue(self) -> bool:
        s = self.state
        step = self.current
        if step is SetupStep.COMPLETED:
            return False
        if step is SetupStep.PERMISSIONS:
            return s.has_screen_recording and s.has_accessibility
        if step is SetupStep.OLLAMA_CONFIG:
            return s.ollama_connection_status.is_success and bool(s.selected_ollama_model)
        if step is SetupStep.GOOGLE_CONFIG:
            return s.google_connection_status.is_success and bool(s.google_api_key)
        return True

    def next_step(self) -> SetupStep:
        step = self.current
        mode = self.state.llm_choice
        if step is SetupStep.WELCOME:
            return SetupStep.PERMISSIONS
        if step is SetupStep.PERMISSIONS:
            return SetupStep.LLM_CHOICE
        if step is SetupStep.LLM_CHOICE:
            return SetupStep.GOOGLE_CONFIG if mode is SetupMode.CLOUD_ONLY else SetupStep.OLLAMA_CONFIG
        if step is SetupStep.OLLAMA_CONFIG:
            return SetupStep.GOOGLE_CONFIG if mode is SetupMode.HYBRID else SetupStep.MODEL_ASSIGNMENT
        if step is SetupStep.GOOGLE_CONFIG:
            return SetupStep.MODEL_ASSIGNMENT
        if step is SetupStep.MODEL_ASSIGNMENT:
            return SetupStep.OPTIONAL_FEATURES
        if step is SetupStep.OPTIONAL_FEATURES:
            return SetupStep.SUMMARY
        if step is SetupStep.SUMMARY:
            return SetupStep.COMPLETED
        raise RuntimeError("Setup is already complete")

    def advance(self) -> SetupStep:
        """Move forward one step; from the summary this finishes setup."""
        self._ensure_active()
        if self.current is SetupStep.SUMMARY:
            self.finish()
            return self.current
        if not self.can_continue():
            raise ValueError(f"Cannot continue from {self.current.value}: requirements not met")
        target = self.next_step()
        self._push(target)
        return target

    def back(self) -> SetupStep:
        self._ensure_active()
        if self.current is SetupStep.WELCOME:
            raise ValueError("Already at the first step")
        self.history.pop()
        self.state.current_step = len(self.history) - 1
        logger.debug(f"Setup step back -> {self.current.value}")
        return self.current

    def skip(self) -> Configuration:
        """From the welcome step, persist defaults and complete immediately."""
        self._ensure_active()
        if self.current is not SetupStep.WELCOME:
            raise ValueError("Setup can only be skipped from the welcome step")
        logger.info("Setup skipped; saving default configuration")
        return self._complete()

    def finish(self) -> Configuration:
        self._ensure_active()
        if self.current is not SetupStep.SUMMARY:
            raise ValueError("Setup can only be finished from the summary step")
        return self._complete()

    def _complete(self) -> Configuration:
        config = self.state.build_configuration()
        self.store.save_configuration(config)
        self.store.mark_setup_completed()
        self.configuration = config
        self._push(SetupStep.COMPLETED)
        return config

    def _push(self, step: SetupStep) -> None:
        self.history.append(step)
        self.state.current_step = len(self.history) - 1
        logger.debug(f"Setup step -> {step.value}")

    def _ensure_active(self) -> None:
        if self.completed:
            raise RuntimeError("Setup is already complete")
