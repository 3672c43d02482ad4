from __future__ import annotations

import pytest

from turix.wizard.permissions import PermissionSnapshot
from turix.wizard.state import (
    GOOGLE_MODELS,
    LLMProvider,
    ModelAssignment,
    ModelRole,
    OllamaConnectionType,
    SetupMode,
    SetupState,
)
from turix.wizard.status import ConnectionStatus


def test_fresh_state_assigns_every_role() -> None:
    state = SetupState()
    assert set(state.model_assignments) == set(ModelRole)


def test_fresh_states_do_not_share_assignments() -> None:
    first = SetupState()
    second = SetupState()
    first.assign_model(ModelRole.ACTOR, LLMProvider.GOOGLE, "gemini-2.0-pro")
    assert second.model_assignments[ModelRole.ACTOR].provider is LLMProvider.OLLAMA


def test_ollama_base_url_local_ignores_host() -> None:
    state = SetupState(ollama_host="10.1.1.1", ollama_port="11434")
    assert state.ollama_base_url() == "http://localhost:11434"


def test_ollama_base_url_remote_passes_input_through() -> None:
    state = SetupState(
        ollama_connection_type=OllamaConnectionType.REMOTE,
        ollama_host="not a host",
        ollama_port="abc",
    )
    assert state.ollama_base_url() == "http://not a host:abc"


def test_build_configuration_cloud_role_gets_key_only() -> None:
    state = SetupState(google_api_key="K")
    state.assign_model(ModelRole.BRAIN, LLMProvider.GOOGLE, "gemini-2.0-flash")

    cfg = state.build_configuration()
    assert cfg.brain_llm.provider == "google_flash"
    assert cfg.brain_llm.api_key == "K"
    assert "base_url" not in cfg.to_dict()["brain_llm"]


def test_build_configuration_local_role_gets_url_only() -> None:
    state = SetupState(ollama_port="11434", google_api_key="K")
    state.assign_model(ModelRole.ACTOR, LLMProvider.OLLAMA, "mistral:latest")

    cfg = state.build_configuration()
    assert cfg.actor_llm.provider == "ollama"
    assert cfg.actor_llm.model_name == "mistral:latest"
    assert cfg.actor_llm.base_url == "http://localhost:11434"
    assert "api_key" not in cfg.to_dict()["actor_llm"]


def test_build_configuration_raises_on_missing_role() -> None:
    state = SetupState()
    del state.model_assignments[ModelRole.MEMORY]
    with pytest.raises(KeyError):
        state.build_configuration()


def test_untouched_state_builds_default_configuration() -> None:
    cfg = SetupState().build_configuration()
    assert cfg.brain_llm.provider == "google_flash"
    assert cfg.brain_llm.api_key == ""
    for llm in (cfg.actor_llm, cfg.planner_llm, cfg.memory_llm):
        assert llm.provider == "ollama"
        assert llm.model_name == "qwen2.5:latest"
        assert llm.base_url == "http://localhost:11434"


def test_recommended_local_only() -> None:
    state = SetupState()
    state.apply_recommended_models(SetupMode.LOCAL_ONLY)
    assignments = state.model_assignments.values()
    assert all(a.provider is LLMProvider.OLLAMA for a in assignments)
    assert len({a.model for a in assignments}) == 1


def test_recommended_cloud_only_uses_tiers() -> None:
    state = SetupState()
    state.apply_recommended_models("cloud-only")
    a = state.model_assignments
    assert all(x.provider is LLMProvider.GOOGLE for x in a.values())
    assert a[ModelRole.BRAIN] == ModelAssignment(LLMProvider.GOOGLE, "gemini-2.0-pro")
    assert a[ModelRole.ACTOR].model == "gemini-2.0-flash"
    assert a[ModelRole.PLANNER].model == "gemini-2.0-flash"
    assert a[ModelRole.MEMORY].model == "gemini-1.5-flash"


def test_recommended_hybrid_only_brain_is_cloud() -> None:
    state = SetupState()
    state.apply_recommended_models(SetupMode.LOCAL_ONLY)
    state.apply_recommended_models("hybrid")
    cloud = [r for r, a in state.model_assignments.items() if a.provider is LLMProvider.GOOGLE]
    assert cloud == [ModelRole.BRAIN]


def test_recommended_defaults_to_chosen_mode() -> None:
    state = SetupState(llm_choice=SetupMode.CLOUD_ONLY)
    state.apply_recommended_models()
    assert state.model_assignments[ModelRole.MEMORY].provider is LLMProvider.GOOGLE


def test_setup_mode_accepts_dashed_aliases() -> None:
    assert SetupMode("local-only") is SetupMode.LOCAL_ONLY
    assert SetupMode("cloud_only") is SetupMode.CLOUD_ONLY
    with pytest.raises(ValueError):
        SetupMode("everything")


def test_available_models_follow_configured_providers() -> None:
    state = SetupState()
    assert state.available_models(LLMProvider.OLLAMA) == []
    assert state.available_models(LLMProvider.GOOGLE) == []

    state.ollama_models = ["qwen2.5:latest"]
    state.google_api_key = "K"
    assert state.available_models(LLMProvider.OLLAMA) == ["qwen2.5:latest"]
    assert state.available_models(LLMProvider.GOOGLE) == [m for m, _ in GOOGLE_MODELS]


def test_resource_estimates() -> None:
    state = SetupState()
    assert state.estimated_ram() == "~12GB"
    assert state.estimated_cost() == "$0.01 - $0.10"

    state.apply_recommended_models(SetupMode.CLOUD_ONLY)
    assert state.estimated_ram() == "Minimal"

    state.apply_recommended_models(SetupMode.LOCAL_ONLY)
    assert state.estimated_ram() == "~16GB"
    assert state.estimated_cost() == "Free"


def test_summary_rows_list_roles_and_features() -> None:
    state = SetupState(ollama_models=["qwen2.5:latest"], google_api_key="K", enable_discord=True)
    rows = dict(state.summary_rows())
    assert rows["Setup Type"] == "Hybrid"
    assert rows["Ollama"] == "Connected (http://localhost:11434)"
    assert rows["Google AI"] == "Configured"
    assert rows["Brain"] == "Google AI (Cloud): gemini-2.0-flash"
    assert rows["Discord Integration"] == "Enabled"
    assert rows["Launch at Login"] == "No"


def test_refresh_permissions_copies_snapshot() -> None:
    state = SetupState()
    state.refresh_permissions(lambda: PermissionSnapshot(screen_recording=True, accessibility=False, notifications=False))
    assert state.has_screen_recording is True
    assert state.has_accessibility is False
    assert state.has_notifications is False


def test_changing_ollama_endpoint_requires_new_test() -> None:
    state = SetupState(ollama_connection_status=ConnectionStatus.success())
    state.set_ollama_endpoint(OllamaConnectionType.LOCAL, "", "11434")
    assert state.ollama_connection_status.is_success

    state.set_ollama_endpoint(OllamaConnectionType.REMOTE, "192.168.1.20", "11434")
    assert state.ollama_base_url() == "http://192.168.1.20:11434"
    assert state.ollama_connection_status == ConnectionStatus.not_tested()


def test_changing_google_key_requires_new_test() -> None:
    state = SetupState(google_api_key="old", google_connection_status=ConnectionStatus.success())
    state.set_google_api_key("old")
    assert state.google_connection_status.is_success

    state.set_google_api_key("new")
    assert state.google_api_key == "new"
    assert state.google_connection_status == ConnectionStatus.not_tested()
