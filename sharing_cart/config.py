from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv


BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

load_dotenv(ENV_PATH)


@dataclass(frozen=True)
class Settings:
    wwwroot: str
    theme: str
    id_prefix: str
    storage_root: Path
    user_context_id: int
    lang_file: Path | None


def _get_env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _get_int(name: str, default: int) -> int:
    value = _get_env(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def load_settings() -> Settings:
    lang_file = _get_env("SHARING_CART_LANG_FILE")
    storage_root = _get_env("SHARING_CART_STORAGE_ROOT")
    return Settings(
        wwwroot=_get_env("SHARING_CART_WWWROOT", "http://localhost").rstrip("/"),
        theme=_get_env("SHARING_CART_THEME", "boost") or "boost",
        id_prefix=_get_env("SHARING_CART_ID_PREFIX", "block_sharing_cart") or "block_sharing_cart",
        storage_root=Path(storage_root) if storage_root else Path.home() / "sharing_cart",
        user_context_id=_get_int("SHARING_CART_USER_CONTEXT_ID", 1),
        lang_file=Path(lang_file) if lang_file else None,
    )
