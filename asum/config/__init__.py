"""Configuration Management Package

Looks for asum.toml in (order):

1. the current directory (project-specific)
2. ~/.asum/asum.toml (global default)

Example:

    [general]
    active_provider = "ollama"
    max_diff_length = 4000

    [ai_params]
    num_predict = 256
    temperature = 0.2
    top_p = 0.9

    [ollama]
    model = "llama3"
    url = "http://localhost:11434/api/chat"
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from asum.prompts import DEFAULT_SYSTEM_PROMPT, DEFAULT_USER_PROMPT

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "asum.toml"
GLOBAL_CONFIG_DIR = ".asum"

DEFAULT_TIMEOUT = 120.0

DEFAULT_GIT_EXTENSIONS = [
    "*.java", "*.php", "*.js", "*.jsx", "*.ts", "*.tsx", "*.vue", "*.svelte", "*.scss",
    "*.css", "*.html", "*.rs", "*.py", "*.pyi", "*.go", "*.c", "*.cpp", "*.h", "*.hpp",
    "*.cs", "*.rb", "*.swift", "*.kt", "*.kts", "*.dart", "*.sh", "*.sql", "*.md", "*.yml",
    "*.yaml", "*.toml", "*.json",
]

# section -> {key: accepted types}
REQUIRED_KEYS = {
    "general": {"active_provider": (str,), "max_diff_length": (int,)},
    "ai_params": {"num_predict": (int,), "temperature": (int, float), "top_p": (int, float)},
}
OPTIONAL_TABLES = {
    "ollama": {"model": (str,), "url": (str,)},
    "gemini": {"api_key": (str,), "model": (str,)},
}


class ConfigError(Exception):
    """Raised when asum.toml is missing, unreadable or violates the schema."""
    pass


@dataclass
class AsumConfig:
    """Resolved configuration with defaults filled in."""
    active_provider: str
    max_diff_length: int
    ai_num_predict: int
    ai_temperature: float
    ai_top_p: float
    git_extensions: list[str] = field(default_factory=lambda: list(DEFAULT_GIT_EXTENSIONS))
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    user_prompt: str = DEFAULT_USER_PROMPT
    bullets_only: bool = False
    timeout: float = DEFAULT_TIMEOUT
    ollama_url: Optional[str] = None
    ollama_model: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'AsumConfig':
        """Build from the parsed TOML layout. The schema must already be valid."""
        general = data["general"]
        ai_params = data["ai_params"]
        prompts = data.get("prompts") or {}
        ollama = data.get("ollama")
        gemini = data.get("gemini")

        return cls(
            active_provider=general["active_provider"],
            max_diff_length=general["max_diff_length"],
            git_extensions=list(general.get("git_extensions", DEFAULT_GIT_EXTENSIONS)),
            bullets_only=general.get("bullets_only", False),
            system_prompt=prompts.get("system_prompt", DEFAULT_SYSTEM_PROMPT),
            user_prompt=prompts.get("user_prompt", DEFAULT_USER_PROMPT),
            ai_num_predict=ai_params["num_predict"],
            ai_temperature=float(ai_params["temperature"]),
            ai_top_p=float(ai_params["top_p"]),
            timeout=float(ai_params.get("timeout", DEFAULT_TIMEOUT)),
            ollama_url=ollama["url"] if ollama else None,
            ollama_model=ollama["model"] if ollama else None,
            gemini_api_key=gemini["api_key"] if gemini else None,
            gemini_model=gemini["model"] if gemini else None,
        )


def _check_keys(table: object, name: str, keys: dict) -> list[str]:
    if not isinstance(table, dict):
        return [f"[{name}] must be a table"]
    problems = []
    for key, types in keys.items():
        if key not in table:
            problems.append(f"[{name}] is missing '{key}'")
        elif isinstance(table[key], bool) or not isinstance(table[key], types):
            problems.append(f"[{name}] '{key}' has the wrong type")
    return problems


def validate(data: dict) -> list[str]:
    """Return a list of schema problems; empty means valid."""
    problems = []
    for section, keys in REQUIRED_KEYS.items():
        if section not in data:
            problems.append(f"missing [{section}] section")
            continue
        problems.extend(_check_keys(data[section], section, keys))

    for section, keys in OPTIONAL_TABLES.items():
        if section in data:
            problems.extend(_check_keys(data[section], section, keys))

    general = data.get("general")
    if isinstance(general, dict) and "git_extensions" in general:
        extensions = general["git_extensions"]
        if not isinstance(extensions, list) or not all(isinstance(e, str) for e in extensions):
            problems.append("[general] 'git_extensions' must be a list of strings")
    if isinstance(general, dict) and not isinstance(general.get("bullets_only", False), bool):
        problems.append("[general] 'bullets_only' must be true or false")

    max_length = general.get("max_diff_length") if isinstance(general, dict) else None
    if isinstance(max_length, int) and not isinstance(max_length, bool) and max_length < 0:
        problems.append("[general] 'max_diff_length' must not be negative")

    ai_params = data.get("ai_params")
    if isinstance(ai_params, dict) and "timeout" in ai_params:
        timeout = ai_params["timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            problems.append("[ai_params] 'timeout' must be a positive number")

    prompts = data.get("prompts")
    if prompts is not None:
        if not isinstance(prompts, dict):
            problems.append("[prompts] must be a table")
        else:
            problems.extend(
                f"[prompts] '{key}' must be a string"
                for key in ("system_prompt", "user_prompt")
                if key in prompts and not isinstance(prompts[key], str)
            )

    return problems


def _parse(path: Path) -> dict:
    try:
        with open(path, 'rb') as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read {path}: {e}") from e

    problems = validate(data)
    if problems:
        raise ConfigError(f"{path}: " + "; ".join(problems))
    return data


def load_from_toml(path: Path | str) -> AsumConfig:
    """Read, validate and resolve a single TOML file."""
    return AsumConfig.from_dict(_parse(Path(path)))


def verify_toml(path: Path | str) -> None:
    """Check syntax and schema of a TOML file. Raises ConfigError on failure."""
    _parse(Path(path))


class ConfigManager:
    """Finds and loads asum.toml. Caches the result."""

    def __init__(self):
        self._config: Optional[AsumConfig] = None
        self._config_path: Optional[Path] = None

    @staticmethod
    def local_path() -> Path:
        return Path.cwd() / CONFIG_FILENAME

    @staticmethod
    def global_path() -> Path:
        return Path.home() / GLOBAL_CONFIG_DIR / CONFIG_FILENAME

    def load(self) -> AsumConfig:
        if self._config is not None:
            return self._config

        for path in (self.local_path(), self.global_path()):
            if path.exists():
                logger.debug("Loading configuration from %s", path)
                self._config = load_from_toml(path)
                self._config_path = path
                return self._config

        raise ConfigError(
            f"Configuration file '{CONFIG_FILENAME}' not found locally "
            f"or in ~/{GLOBAL_CONFIG_DIR}/{CONFIG_FILENAME}"
        )

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


__all__ = [
    "AsumConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "ConfigManager",
    "DEFAULT_GIT_EXTENSIONS",
    "load_from_toml",
    "validate",
    "verify_toml",
]
