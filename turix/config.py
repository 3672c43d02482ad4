"""Configuration schema for the TuriX agent."""

import json
from typing import Annotated, Literal

from pydantic import BaseModel, Field

OLLAMA_PROVIDER = "ollama"
GOOGLE_PROVIDER = "google_flash"

DEFAULT_OLLAMA_MODEL = "qwen2.5:latest"
DEFAULT_GOOGLE_MODEL = "gemini-2.0-flash"


class OllamaLLMConfig(BaseModel):
    """A role served by a local or network Ollama instance."""
    provider: Literal["ollama"] = OLLAMA_PROVIDER
    model_name: str
    base_url: str


class GoogleLLMConfig(BaseModel):
    """A role served by Google AI (cloud)."""
    provider: Literal["google_flash"] = GOOGLE_PROVIDER
    model_name: str
    api_key: str = ""


LLMConfig = Annotated[OllamaLLMConfig | GoogleLLMConfig, Field(discriminator="provider")]


class AgentConfig(BaseModel):
    """Agent behavior block."""
    task: str = ""
    memory_budget: int = 2000
    summary_memory_budget: int = 8000
    use_ui: bool = False
    use_search: bool = False
    use_skills: bool = True
    skills_dir: str = "skills"
    skills_max_chars: int = 4000
    use_plan: bool = True
    max_actions_per_step: int = 5
    max_steps: int = 100
    force_stop_hotkey: str = "command+shift+2"
    use_turix: bool = True
    resume: bool = False
    agent_id: str | None = None
    save_brain_conversation_path: str = "brain_llm_interactions.log"
    save_actor_conversation_path: str = "actor_llm_interactions.log"
    save_planner_conversation_path: str = "planner_llm_interactions.log"
    save_brain_conversation_path_encoding: str = "utf-8"
    save_actor_conversation_path_encoding: str = "utf-8"
    save_planner_conversation_path_encoding: str = "utf-8"


class Configuration(BaseModel):
    """Root configuration, persisted as config.json."""
    logging_level: str = "DEBUG"
    output_dir: str = ".turix_tmp"
    brain_llm: LLMConfig
    actor_llm: LLMConfig
    planner_llm: LLMConfig
    memory_llm: LLMConfig
    agent: AgentConfig = Field(default_factory=AgentConfig)

    def roles(self) -> dict[str, OllamaLLMConfig | GoogleLLMConfig]:
        return {
            "brain": self.brain_llm,
            "actor": self.actor_llm,
            "planner": self.planner_llm,
            "memory": self.memory_llm,
        }

    def to_dict(self) -> dict:
        # Unset optionals (agent_id) are left out of the document entirely.
        return self.model_dump(mode="json", exclude_none=True)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, sort_keys=True, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "Configuration":
        return cls.model_validate_json(text)
