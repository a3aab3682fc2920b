# apps/notifications/domain/entities.py
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID


class NotificationType(str, Enum):
    FRIEND_REQUEST = 'friend_request'
    GOAL_UPDATE = 'goal_update'
    FRIEND_REQUEST_ACCEPTED = 'friend_request_accepted'


@dataclass
class NotificationEntity:
    id: Optional[UUID]  # None przed zapisem
    user_id: Any  # adresat - zawsze dokładnie jeden
    type: NotificationType
    title: str
    message: str
    related_user_id: Optional[Any] = None
    related_goal_id: Optional[UUID] = None
    is_read: bool = False
    created_at: Optional[datetime] = None
