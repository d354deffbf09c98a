"""Party Hub Server Configuration."""

import secrets
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    env: str = "prod"  # 'dev' allows the session cookie over plain HTTP
    base_url: str = "http://localhost:8080"
    log_level: str = "INFO"

    # Paths
    data_dir: Path = Path(".")
    db_path: Path = Path("party.db")
    web_dir: Path = Path(__file__).parent / "web"

    # Session cookie (JWT)
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    session_days: int = 90  # 3 months
    cookie_name: str = "auth_token"

    # Email
    mail_sendtype: Optional[str] = None  # 'client' | 'direct'
    smtp_server: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from: Optional[str] = None
    smtp_timeout: int = 30

    # Web push
    vapid_private_key_path: Path = Path("private_vapid_key.pem")
    vapid_public_key_path: Path = Path("public_vapid_key.pem")
    vapid_subject: str = "mailto:admin@localhost"

    # Party updates
    changelog_max_length: int = 2000

    @property
    def is_dev(self) -> bool:
        return self.env == "dev"

    @property
    def smtp_client_configured(self) -> bool:
        """Relay sending needs a server and full credentials."""
        return all([self.smtp_server, self.smtp_username, self.smtp_password, self.smtp_from])

    @property
    def smtp_direct_configured(self) -> bool:
        return bool(self.smtp_from)

    @property
    def mail_method(self) -> Optional[str]:
        """Resolve which email transport to use, or None when email is disabled."""
        if self.mail_sendtype == "client":
            return "client" if self.smtp_client_configured else None
        if self.mail_sendtype == "direct":
            return "direct" if self.smtp_direct_configured else None
        if self.smtp_client_configured:
            return "client"
        if self.smtp_direct_configured:
            return "direct"
        return None

    def ensure_dirs(self) -> None:
        """Create all required directories."""
        for d in [self.data_dir, self.db_path.parent]:
            d.mkdir(parents=True, exist_ok=True)

    def ensure_secrets(self) -> None:
        """Generate the session secret if not set, persist it so sessions survive restarts."""
        secrets_file = self.data_dir / ".secrets"
        saved = {}
        if secrets_file.exists():
            for line in secrets_file.read_text().strip().splitlines():
                if "=" in line:
                    k, v = line.split("=", 1)
                    saved[k.strip()] = v.strip()

        if not self.jwt_secret:
            self.jwt_secret = saved.get("jwt_secret", "") or secrets.token_urlsafe(32)

        secrets_file.write_text(f"jwt_secret={self.jwt_secret}\n")


settings = Settings()
settings.ensure_dirs()
settings.ensure_secrets()
