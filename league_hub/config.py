from dataclasses import dataclass
from typing import Any, Mapping, Optional

from league_hub.errors import ConfigError

DEFAULT_APP_ID = "default-app-id"


@dataclass(frozen=True)
class FirebaseSettings:
    api_key: str
    project_id: str
    auth_domain: Optional[str] = None


@dataclass(frozen=True)
class DashboardConfig:
    """
    Startup configuration handed to the composition root.

    Built from the ``[league_hub]`` table of Streamlit secrets. Without a
    ``firebase`` sub-table the dashboard runs in local mode against an
    in-memory store.
    """
    app_id: str = DEFAULT_APP_ID
    firebase: Optional[FirebaseSettings] = None
    initial_auth_token: Optional[str] = None
    log_file: str = "league_hub.log"
    log_level: str = "INFO"

    @property
    def local_mode(self) -> bool:
        return self.firebase is None

    @property
    def data_root(self) -> str:
        """Path prefix all league collections live under"""
        return f"artifacts/{self.app_id}/public/data"

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "DashboardConfig":
        """Parse a secrets-style mapping, validating the Firebase section"""
        raw = dict(raw or {})

        firebase = None
        firebase_raw = raw.get('firebase')
        if firebase_raw:
            firebase_raw = dict(firebase_raw)
            missing = [key for key in ('api_key', 'project_id') if not firebase_raw.get(key)]
            if missing:
                raise ConfigError(f"firebase settings missing: {', '.join(missing)}")
            firebase = FirebaseSettings(
                api_key=str(firebase_raw['api_key']),
                project_id=str(firebase_raw['project_id']),
                auth_domain=firebase_raw.get('auth_domain')
            )

        app_id = raw.get('app_id') or DEFAULT_APP_ID
        if '/' in str(app_id):
            raise ConfigError(f"app_id may not contain '/': {app_id!r}")

        log_level = str(raw.get('log_level', 'INFO')).upper()
        if log_level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ConfigError(f"Unknown log level: {log_level}")

        return cls(
            app_id=str(app_id),
            firebase=firebase,
            initial_auth_token=raw.get('initial_auth_token') or None,
            log_file=str(raw.get('log_file', 'league_hub.log')),
            log_level=log_level
        )
