# apps/core/ports/profiles.py
from abc import ABC, abstractmethod
from typing import Any, Optional


class IProfileDirectory(ABC):
    @abstractmethod
    def get_display_name(self, user_id: Any) -> Optional[str]:
        """Nazwa do wyświetlenia w powiadomieniach (imię, nick albo login)."""
        pass
