"""Connection test call points.

The wizard only depends on the probe signature
``async probe(credentials) -> ProbeResult``. The simulated probes below
stand in until a real network layer is plugged in; they never contact a
provider.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from turix.wizard.status import ConnectionStatus

SIMULATED_DELAY_SECONDS = 1.5

# Models reported by the simulated Ollama probe, first one is preselected.
SIMULATED_OLLAMA_MODELS = [
    "qwen2.5:latest",
    "llama3.2:latest",
    "mistral:latest",
    "gemma2:latest",
]


@dataclass(frozen=True)
class OllamaCredentials:
    connection_type: str
    host: str
    port: str
    base_url: str


@dataclass(frozen=True)
class GoogleCredentials:
    api_key: str
    model: str = ""


@dataclass(frozen=True)
class ProbeResult:
    status: ConnectionStatus
    models: list[str] = field(default_factory=list)


OllamaProbe = Callable[[OllamaCredentials], Awaitable[ProbeResult]]
GoogleProbe = Callable[[GoogleCredentials], Awaitable[ProbeResult]]


async def simulated_ollama_probe(
    credentials: OllamaCredentials,
    delay: float = SIMULATED_DELAY_SECONDS,
) -> ProbeResult:
    await asyncio.sleep(delay)
    if not credentials.port.strip():
        return ProbeResult(ConnectionStatus.failed("Port is required"))
    if credentials.connection_type == "remote" and not credentials.host.strip():
        return ProbeResult(ConnectionStatus.failed("IP address is required for a remote connection"))
    return ProbeResult(ConnectionStatus.success(), list(SIMULATED_OLLAMA_MODELS))


async def simulated_google_probe(
    credentials: GoogleCredentials,
    delay: float = SIMULATED_DELAY_SECONDS,
) -> ProbeResult:
    await asyncio.sleep(delay)
    if not credentials.api_key:
        return ProbeResult(ConnectionStatus.failed("API key is required"))
    return ProbeResult(ConnectionStatus.success())
