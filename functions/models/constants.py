from enum import StrEnum

# Notification body is cut down to this many characters (ellipsis included)
MAX_NOTIFICATION_TEXT_LENGTH = 60
ELLIPSIS = "…"

DEFAULT_SENDER_NAME = "Someone"
DEFAULT_MESSAGE_TEXT = "You have a new message"
DEFAULT_ROOM_TITLE = "a chatroom"

MUX_ASSETS_URL = "https://api.mux.com/video/v1/assets"
MUX_STREAM_URL_TEMPLATE = "https://stream.mux.com/{playback_id}.m3u8"


# Collection names
class Collections(StrEnum):
    USERS = "users"
    CHATROOMS = "chatrooms"
    MESSAGES = "messages"
    CHATROOM_PREFERENCES = "chatroomPreferences"


# Path parameters of the chat message trigger
class PathParams(StrEnum):
    CHATROOM_ID = "chatroomId"
    MESSAGE_ID = "messageId"


# Field names for User documents
class UserFields(StrEnum):
    FIRST_NAME = "firstName"
    FCM_TOKEN = "fcmToken"


# Field names for chat message documents
class MessageFields(StrEnum):
    SENDER_ID = "senderId"
    SENDER_NAME = "senderName"
    TEXT = "text"


# Field names for chatroom preference documents
class PreferenceFields(StrEnum):
    NOTIFICATION_LEVEL = "notificationLevel"


class NotificationLevel(StrEnum):
    ALL = "all"
    MENTIONS = "mentions"
    NONE = "none"


# Keys of the FCM data payload
class NotificationDataFields(StrEnum):
    CHATROOM_ID = "chatroomId"
    TYPE = "type"


class NotificationTypes(StrEnum):
    CHAT_MESSAGE = "chat_message"


# Display titles of the fixed chatrooms, keyed by chatroom document id
CHATROOMS = {
    "0": "Newborn Night Shift",
    "1": "Questions & Answers",
    "2": "No Judgment Zone",
    "3": "Milestones",
}


class MuxMessages(StrEnum):
    METHOD_NOT_ALLOWED = "Only POST method is allowed."
    MISSING_VIDEO_URL = "Missing `videoURL` in request body."
    MISSING_CREDENTIALS = "Missing Mux credentials."
    MISSING_PLAYBACK_ID = "Mux did not return a playback ID."
    UPLOAD_FAILED = "Mux upload failed"
    UPLOAD_SUCCESSFUL = "✅ Mux upload successful"
