from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import sys

from bizledger.domain.errors import ValidationError


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    db_path: Path
    logs_dir: Path
    backups_dir: Path


@dataclass(frozen=True)
class Settings:
    currency_symbol: str = "৳"
    notification_ttl: float = 3.0
    low_stock_threshold: int = 5
    company_name: str = "BizLedger"


def _windows_appdata() -> Path:
    return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))


def _mac_app_support() -> Path:
    return Path.home() / "Library" / "Application Support"


def get_app_paths(app_name: str = "BizLedger") -> AppPaths:
    if sys.platform.startswith("win"):
        base = _windows_appdata() / app_name
    elif sys.platform == "darwin":
        base = _mac_app_support() / app_name
    else:
        base = Path.home() / f".{app_name.lower()}"

    logs = base / "logs"
    backups = base / "backups"
    db = base / "ledger.db"

    base.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)
    backups.mkdir(parents=True, exist_ok=True)

    return AppPaths(base_dir=base, db_path=db, logs_dir=logs, backups_dir=backups)


def _env_number(name: str, default, cast):
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError as e:
        raise ValidationError(f"{name} must be a number. Received: {raw}") from e
    if value < 0:
        raise ValidationError(f"{name} must be >= 0. Received: {raw}")
    return value


def load_settings() -> Settings:
    defaults = Settings()
    return Settings(
        currency_symbol=os.environ.get("BIZLEDGER_CURRENCY_SYMBOL", "").strip() or defaults.currency_symbol,
        notification_ttl=_env_number("BIZLEDGER_NOTIFICATION_TTL", defaults.notification_ttl, float),
        low_stock_threshold=_env_number("BIZLEDGER_LOW_STOCK_THRESHOLD", defaults.low_stock_threshold, int),
        company_name=os.environ.get("BIZLEDGER_COMPANY_NAME", "").strip() or defaults.company_name,
    )
