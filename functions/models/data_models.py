from dataclasses import asdict, dataclass, field
from typing import Dict, Optional

from firebase_admin import messaging


@dataclass
class ChatMessage:
    chatroom_id: str
    message_id: str
    sender_id: Optional[str]
    text: Optional[str]
    sender_name: Optional[str] = None


@dataclass
class User:
    user_id: str
    first_name: Optional[str] = None
    fcm_token: Optional[str] = None


@dataclass
class Recipient:
    token: str
    user_name: Optional[str] = None


@dataclass
class NotificationPayload:
    token: str
    title: str
    body: str
    data: Dict[str, str] = field(default_factory=dict)

    def to_message(self) -> messaging.Message:
        return messaging.Message(
            token=self.token,
            notification=messaging.Notification(title=self.title, body=self.body),
            data=self.data,
        )


@dataclass
class FanOutResult:
    """Outcome of one notification fan-out."""

    attempted: int = 0
    sent: int = 0
    failed: int = 0

    def to_json(self):
        return asdict(self)


@dataclass
class MuxUploadResponse:
    message: str
    muxURL: str

    def to_json(self):
        return asdict(self)
