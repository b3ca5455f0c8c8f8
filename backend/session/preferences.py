"""Provider preference persisted as a small JSON file (survives restarts)."""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from models.enums import ProviderKind

logger = logging.getLogger(__name__)


class PreferenceStore:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Optional[ProviderKind]:
        """
        Stored provider, or None if nothing usable is stored.

        An unreadable or unknown value is logged and treated as absent.
        """
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return ProviderKind.from_string(data["provider"])
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring provider preference in {self.path}: {e}")
            return None

    def save(self, provider: ProviderKind) -> None:
        """Write the preference atomically (temp file + rename)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "provider": provider.value,
            "updatedAt": datetime.now(timezone.utc).isoformat(),
        }
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.info(f"Saved provider preference: {provider.value}")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
