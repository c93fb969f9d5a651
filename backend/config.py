import logging
import os
from pathlib import Path
from typing import List, Tuple

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_CANDIDATES = [
    PROJECT_ROOT / ".env",
    PROJECT_ROOT / "backend" / ".env",
]

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def load_project_env() -> List[str]:
    loaded: List[str] = []
    for env_path in ENV_CANDIDATES:
        if env_path.exists():
            load_dotenv(dotenv_path=env_path, override=False)
            loaded.append(str(env_path))
    return loaded


def supabase_settings() -> Tuple[str | None, str | None]:
    """Returns (url, service_role_key); either may be None when unset."""
    load_project_env()
    url = os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    return url, key


def supabase_configured() -> bool:
    url, key = supabase_settings()
    return bool(url and key)


def automation_credentials() -> Tuple[str, str] | None:
    load_project_env()
    email = os.getenv("SUPABASE_AUTOMATION_EMAIL")
    password = os.getenv("SUPABASE_AUTOMATION_PASSWORD")
    if email and password:
        return email, password
    return None


def configure_logging(level: str | None = None) -> None:
    load_project_env()
    resolved = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, resolved, logging.INFO), format=LOG_FORMAT)
