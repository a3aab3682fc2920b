# apps/core/adapters/profile_directory.py
from typing import Any, Optional

from django.contrib.auth.models import User

from apps.core.ports.profiles import IProfileDirectory


class DjangoProfileDirectory(IProfileDirectory):
    def get_display_name(self, user_id: Any) -> Optional[str]:
        try:
            user = User.objects.select_related('profile').get(pk=user_id)
        except User.DoesNotExist:
            return None

        profile = getattr(user, 'profile', None)
        if profile is None:
            return user.get_username()
        return profile.display_name
