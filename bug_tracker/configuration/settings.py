import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# bug_tracker/configuration/settings.py -> ../../
PROJECT_ROOT = Path(__file__).parent.parent.parent

STORE_BACKENDS = ("json", "memory")


def _load_env() -> None:
    app_env = os.getenv("APP_ENV", "local")
    env_file = PROJECT_ROOT / f".env.{app_env}"
    load_dotenv(env_file)


@dataclass(frozen=True)
class Settings:
    app_env: str
    server_name: str
    data_file: str
    seed_yaml_path: str
    store_backend: str  # "json" | "memory"


def build_settings() -> Settings:
    _load_env()

    required_vars = ("SERVER_NAME",)
    missing = [k for k in required_vars if not os.getenv(k)]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    store_backend = os.getenv("STORE_BACKEND", "json").strip().lower()
    if store_backend not in STORE_BACKENDS:
        raise RuntimeError(f"STORE_BACKEND must be one of {STORE_BACKENDS}, got '{store_backend}'")

    return Settings(
        app_env=os.getenv("APP_ENV", "local"),
        server_name=os.environ["SERVER_NAME"],
        data_file=os.getenv("DATA_FILE", "bugs.json"),
        seed_yaml_path=os.getenv("SEED_YAML_PATH", str(PROJECT_ROOT / "config" / "seed_data.yaml")),
        store_backend=store_backend,
    )
