"""Persistence of the device token obtained through activation."""

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class TokenStore:
    """Plain-text token file, one token per device."""

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[str]:
        """Saved token, or None when missing, empty or unreadable."""
        if not self.exists():
            return None

        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except OSError as e:
            logger.error(f"Error reading token file {self.path}: {e}")
            return None

        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")
        logger.info(f"Token saved to {self.path}")

    def clear(self) -> bool:
        """Remove the token file. Returns True if a token was removed."""
        if not self.exists():
            return False
        self.path.unlink()
        logger.info(f"Token removed from {self.path}")
        return True
