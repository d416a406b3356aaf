import asyncio
from typing import Callable, List, Optional

from firebase_admin import firestore, messaging
from models.constants import (
    CHATROOMS,
    DEFAULT_MESSAGE_TEXT,
    DEFAULT_ROOM_TITLE,
    DEFAULT_SENDER_NAME,
    ELLIPSIS,
    MAX_NOTIFICATION_TEXT_LENGTH,
    Collections,
    MessageFields,
    NotificationDataFields,
    NotificationLevel,
    NotificationTypes,
    PathParams,
    PreferenceFields,
    UserFields,
)
from models.data_models import (
    ChatMessage,
    FanOutResult,
    NotificationPayload,
    Recipient,
    User,
)
from utils.logging_utils import get_logger

SendFn = Callable[[messaging.Message], str]


def resolve_room_title(chatroom_id: str) -> str:
    return CHATROOMS.get(str(chatroom_id), DEFAULT_ROOM_TITLE)


def truncate(text: str, max_length: int) -> str:
    """
    Cut text down to max_length characters, the last one being an ellipsis.
    """
    if len(text) > max_length:
        return text[: max_length - 1] + ELLIPSIS
    return text


def is_mentioned(text: Optional[str], first_name) -> bool:
    """
    Check whether the text mentions a user as @firstName, ignoring case.

    This is a plain substring match: "@Annabelle" also mentions "Anna".

    Args:
        text: The message text
        first_name: The user's first name as stored on the user document

    Returns:
        True if the user is mentioned
    """
    if not text or not isinstance(first_name, str):
        return False
    return f"@{first_name.lower()}" in text.lower()


def should_notify(level: str, text: Optional[str], first_name) -> bool:
    if level == NotificationLevel.NONE:
        return False
    if level == NotificationLevel.ALL:
        return True
    return level == NotificationLevel.MENTIONS and is_mentioned(text, first_name)


def get_notification_level(db: firestore.Client, user_id: str, chatroom_id: str):
    """
    Read a user's notification level for one chatroom.

    Args:
        db: Firestore client
        user_id: The user whose preference is read
        chatroom_id: The chatroom the preference applies to

    Returns:
        The stored notification level, or "all" when none is stored
    """
    preference_doc = (
        db.collection(Collections.USERS)
        .document(user_id)
        .collection(Collections.CHATROOM_PREFERENCES)
        .document(chatroom_id)
        .get()
    )

    if preference_doc.exists:
        preference_data = preference_doc.to_dict() or {}
        level = preference_data.get(PreferenceFields.NOTIFICATION_LEVEL)
        if level:
            return level

    return NotificationLevel.ALL


def load_users(db: firestore.Client) -> List[User]:
    users = []
    for user_doc in db.collection(Collections.USERS).stream():
        user_data = user_doc.to_dict() or {}
        users.append(
            User(
                user_id=user_doc.id,
                first_name=user_data.get(UserFields.FIRST_NAME),
                fcm_token=user_data.get(UserFields.FCM_TOKEN),
            )
        )
    return users


async def _recipient_for_user(
    db: firestore.Client,
    message: ChatMessage,
    user: User,
    semaphore: asyncio.Semaphore,
) -> Optional[Recipient]:
    logger = get_logger(__name__)

    async with semaphore:
        level = await asyncio.to_thread(
            get_notification_level, db, user.user_id, message.chatroom_id
        )

    if not should_notify(level, message.text, user.first_name):
        return None

    if not user.fcm_token:
        logger.info(f"User {user.user_id} has no FCM token, skipping")
        return None

    return Recipient(token=user.fcm_token, user_name=user.first_name)


async def collect_recipients(
    db: firestore.Client,
    message: ChatMessage,
    semaphore: asyncio.Semaphore,
) -> List[Recipient]:
    """
    Work out who gets a push notification for a message.

    Every user except the sender is checked against their preference for the
    message's chatroom. Users without an FCM token are dropped. Read errors
    propagate.

    Args:
        db: Firestore client
        message: The newly created chat message
        semaphore: Caps the number of concurrent preference reads

    Returns:
        The recipients, one per qualifying user
    """
    users = [
        user
        for user in await asyncio.to_thread(load_users, db)
        if user.user_id != message.sender_id
    ]

    results = await asyncio.gather(
        *(_recipient_for_user(db, message, user, semaphore) for user in users)
    )
    return [recipient for recipient in results if recipient is not None]


def build_payload(
    message: ChatMessage, recipient: Recipient, room_title: str
) -> NotificationPayload:
    text = message.text or DEFAULT_MESSAGE_TEXT
    sender_name = message.sender_name or DEFAULT_SENDER_NAME

    return NotificationPayload(
        token=recipient.token,
        title=f"New message in {room_title}",
        body=f"{sender_name}: {truncate(text, MAX_NOTIFICATION_TEXT_LENGTH)}",
        data={
            NotificationDataFields.CHATROOM_ID: message.chatroom_id,
            NotificationDataFields.TYPE: NotificationTypes.CHAT_MESSAGE,
        },
    )


async def _send_one(
    payload: NotificationPayload, send: SendFn, semaphore: asyncio.Semaphore
) -> bool:
    logger = get_logger(__name__)

    async with semaphore:
        try:
            await asyncio.to_thread(send, payload.to_message())
            return True
        except Exception as e:
            logger.error(f"Failed to send FCM to: {payload.token}: {str(e)}")
            return False


async def send_notifications(
    payloads: List[NotificationPayload],
    send: SendFn,
    semaphore: asyncio.Semaphore,
) -> FanOutResult:
    """
    Send every payload, each on its own.

    A failed send is logged and counted but never stops the other sends.

    Args:
        payloads: The notifications to deliver
        send: Callable delivering one FCM message
        semaphore: Caps the number of sends in flight

    Returns:
        Counts of attempted, sent and failed deliveries
    """
    outcomes = await asyncio.gather(
        *(_send_one(payload, send, semaphore) for payload in payloads)
    )
    sent = sum(1 for outcome in outcomes if outcome)
    return FanOutResult(attempted=len(outcomes), sent=sent, failed=len(outcomes) - sent)


async def process_chat_message(
    db: firestore.Client,
    message: ChatMessage,
    send: SendFn,
    concurrency: int,
) -> FanOutResult:
    logger = get_logger(__name__)

    room_title = resolve_room_title(message.chatroom_id)
    semaphore = asyncio.Semaphore(concurrency)

    recipients = await collect_recipients(db, message, semaphore)
    logger.info(
        f"Message {message.message_id} in chatroom {message.chatroom_id} "
        f"has {len(recipients)} recipients"
    )

    payloads = [build_payload(message, recipient, room_title) for recipient in recipients]
    return await send_notifications(payloads, send, semaphore)


def parse_chat_message(event) -> Optional[ChatMessage]:
    """
    Build a ChatMessage from a Firestore trigger event.

    Args:
        event: The Firestore event for the created message document

    Returns:
        The message, or None when the event carries no document data
    """
    if event.data is None:
        return None

    message_data = event.data.to_dict() or {}
    params = event.params or {}

    return ChatMessage(
        chatroom_id=params.get(PathParams.CHATROOM_ID, ""),
        message_id=params.get(PathParams.MESSAGE_ID, getattr(event.data, "id", "")),
        sender_id=message_data.get(MessageFields.SENDER_ID),
        sender_name=message_data.get(MessageFields.SENDER_NAME),
        text=message_data.get(MessageFields.TEXT),
    )


def on_chat_message_created(
    event,
    db: firestore.Client,
    send: Optional[SendFn] = None,
    concurrency: int = 10,
) -> Optional[FanOutResult]:
    """
    Firestore trigger body that runs when a chat message is created.

    Notifies every user of the chatroom according to their notification
    level. Duplicate trigger deliveries send duplicate notifications.

    Args:
        event: The Firestore event containing the message document
        db: Firestore client
        send: Callable delivering one FCM message, messaging.send by default
        concurrency: Maximum number of reads or sends in flight

    Returns:
        The fan-out counts, or None if the event had no document data
    """
    logger = get_logger(__name__)

    message = parse_chat_message(event)
    if message is None:
        logger.warning("Chat message trigger fired without document data")
        return None

    logger.info(
        f"Processing new message {message.message_id} in chatroom {message.chatroom_id}"
    )

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        result = loop.run_until_complete(
            process_chat_message(db, message, send or messaging.send, concurrency)
        )
    except Exception as e:
        logger.error(f"Error processing message {message.message_id}: {str(e)}")
        raise
    finally:
        loop.close()

    logger.info(
        f"Notifications for message {message.message_id}: "
        f"{result.sent} sent, {result.failed} failed"
    )
    return result
