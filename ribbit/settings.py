from __future__ import annotations
from dataclasses import dataclass

# ====== App identity ======
APP_NAME: str = "Ribbit"
APP_VERSION: str = "0.4.0"


@dataclass
class Settings:
    # Remote authorization service (role assignment + phrase-keyed profiles)
    authz_url: str = ""  # empty = $RIBBIT_AUTHZ_URL, else http://127.0.0.1:4943
    # 0 = no timeout; a hung linkage call simply stays pending
    authz_timeout_seconds: float = 0.0
    # Trigger the linkage coordinator once the app has started
    link_on_startup: bool = True
    log_level: str = "INFO"

    @property
    def authz_timeout(self) -> float | None:
        return self.authz_timeout_seconds if self.authz_timeout_seconds > 0 else None
