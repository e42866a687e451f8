import os

from dotenv import find_dotenv, load_dotenv

from lumina.logger import get_logger

logger = get_logger(__name__)


CONFIG_FILENAME = "config.yaml"

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_ANOMALY_THRESHOLD = 2000.0
DEFAULT_ADVICE_TOP_CATEGORIES = 5
DEFAULT_MAX_UPLOAD_MB = 10

_CONFIG_FILE_PATH: str | None = None
_CONFIG_FILE_VALUES: dict[str, str] = {}

_CONFIG_KEYS = (
    "LOG_LEVEL",
    "LOG_DIR",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "ANOMALY_THRESHOLD",
    "ADVICE_TOP_CATEGORIES",
    "MAX_UPLOAD_MB",
)


def _resolve_dotenv_path() -> str | None:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir:
        candidate = os.path.join(config_dir, ".env")
        if os.path.exists(candidate):
            return candidate
    return find_dotenv(usecwd=True) or None


def _resolve_config_path() -> str:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir:
        return os.path.join(config_dir, CONFIG_FILENAME)
    cwd = os.getcwd()
    candidate = os.path.join(cwd, "config", CONFIG_FILENAME)
    if os.path.exists(candidate):
        return candidate
    return os.path.join(cwd, CONFIG_FILENAME)


def _strip_inline_comment(raw_value: str) -> str:
    quote: str | None = None
    for index, char in enumerate(raw_value):
        if char in {'"', "'"}:
            if quote is None:
                quote = char
            elif quote == char:
                quote = None
            continue
        if char == "#" and quote is None:
            return raw_value[:index].rstrip()
    return raw_value


def _unquote_value(raw_value: str) -> str:
    if len(raw_value) >= 2 and raw_value[0] == raw_value[-1] and raw_value[0] in {'"', "'"}:
        return raw_value[1:-1]
    return raw_value


def read_config_file(path: str | None) -> dict[str, str]:
    """Read flat ``KEY: value`` lines; nested YAML is not supported."""
    if not path or not os.path.exists(path):
        return {}

    values: dict[str, str] = {}
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            key = key.strip()
            value = _unquote_value(_strip_inline_comment(raw_value).strip())
            if key and value:
                values[key] = value
    return values


def load_environment() -> None:
    global _CONFIG_FILE_PATH
    global _CONFIG_FILE_VALUES

    dotenv_path = _resolve_dotenv_path()
    if dotenv_path:
        load_dotenv(dotenv_path=dotenv_path, override=False)

    _CONFIG_FILE_PATH = _resolve_config_path()
    _CONFIG_FILE_VALUES = read_config_file(_CONFIG_FILE_PATH)

    # Environment wins over the config file.
    for key in _CONFIG_KEYS:
        if key not in os.environ and key in _CONFIG_FILE_VALUES:
            os.environ[key] = _CONFIG_FILE_VALUES[key]


def get_env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("[ENV] Invalid %s='%s', using default %s.", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning(
            "[ENV] %s='%s' below minimum %s, using default %s.",
            name,
            raw,
            min_value,
            default,
        )
        return default
    return value


def get_env_float(name: str, default: float = 0.0, min_value: float | None = None) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("[ENV] Invalid %s='%s', using default %s.", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning(
            "[ENV] %s='%s' below minimum %s, using default %s.",
            name,
            raw,
            min_value,
            default,
        )
        return default
    return value


def get_anomaly_threshold() -> float:
    return get_env_float("ANOMALY_THRESHOLD", DEFAULT_ANOMALY_THRESHOLD, min_value=0.0)


def get_advice_top_categories() -> int:
    return get_env_int("ADVICE_TOP_CATEGORIES", DEFAULT_ADVICE_TOP_CATEGORIES, min_value=1)


def get_max_upload_bytes() -> int:
    return get_env_int("MAX_UPLOAD_MB", DEFAULT_MAX_UPLOAD_MB, min_value=1) * 1024 * 1024


def get_openai_model() -> str:
    return os.getenv("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL


_SENSITIVE_ENV_KEYS = ("KEY", "TOKEN", "SECRET", "PASSWORD", "AUTH")


def _mask_env_value(name: str, value: str) -> str:
    sanitized = value.replace("\r", "\\r").replace("\n", "\\n")
    sensitive = any(marker in name.upper() for marker in _SENSITIVE_ENV_KEYS)
    if not sensitive and not sanitized.startswith(("sk-", "Bearer ")):
        return sanitized
    if len(sanitized) <= 4:
        return "****"
    return f"{sanitized[:2]}...{sanitized[-2:]}"


def log_environment() -> None:
    logger.info("[ENV] Config file: %s", _CONFIG_FILE_PATH or "<none>")
    logger.info("[ENV] Configured environment (masked where needed):")
    for key in _CONFIG_KEYS:
        raw_value = os.getenv(key)
        value = "<unset>" if raw_value is None else _mask_env_value(key, raw_value)
        logger.info("[ENV] %s=%s", key, value)


load_environment()

# Statement progress ticks while the parser call is pending.
PROGRESS_TICK_SECONDS = 0.3
PROGRESS_CEILING = 90.0
