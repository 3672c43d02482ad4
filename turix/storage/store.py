"""On-disk application state: config.json and the setup-completed marker."""

import os
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from turix.config import Configuration

CONFIG_FILE = "config.json"
SETUP_MARKER_FILE = "setup_completed"


def default_app_dir() -> Path:
    """Per-user application directory, ``~/.turix`` unless TURIX_HOME is set."""
    override = os.environ.get("TURIX_HOME", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".turix"


class AppStore:
    """Sole reader/writer of the persisted configuration and setup marker."""

    def __init__(self, app_dir: str | Path | None = None):
        self.app_dir = Path(app_dir).expanduser() if app_dir else default_app_dir()
        self.configuration: Configuration | None = None

    @property
    def config_path(self) -> Path:
        return self.app_dir / CONFIG_FILE

    @property
    def marker_path(self) -> Path:
        return self.app_dir / SETUP_MARKER_FILE

    def is_setup_completed(self) -> bool:
        return self.marker_path.exists()

    def mark_setup_completed(self) -> None:
        self.app_dir.mkdir(parents=True, exist_ok=True)
        self.marker_path.touch(exist_ok=True)
        logger.info(f"Setup marked complete: {self.marker_path}")

    def reset_setup(self) -> None:
        try:
            self.marker_path.unlink()
        except FileNotFoundError:
            pass
        logger.info("Setup reset; wizard will run on next launch")

    def load_configuration(self) -> Configuration | None:
        """Load config.json. Returns None when it is missing or unreadable."""
        p = self.config_path
        if not p.exists():
            logger.debug(f"No configuration at {p}")
            return None
        try:
            config = Configuration.from_json(p.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable configuration {p}: {e}")
            return None
        self.configuration = config
        return config

    def save_configuration(self, config: Configuration) -> Path:
        """Write config.json (sorted keys, indented). Write errors propagate."""
        p = self.config_path
        tmp = p.with_name(f".{p.name}.tmp")
        try:
            self.app_dir.mkdir(parents=True, exist_ok=True)
            tmp.write_text(config.to_json() + "\n", encoding="utf-8")
            os.replace(tmp, p)
        except OSError as e:
            logger.error(f"Failed to save configuration to {p}: {e}")
            if tmp.exists():
                tmp.unlink()
            raise
        self.configuration = config
        logger.info(f"Configuration saved to {p}")
        return p
