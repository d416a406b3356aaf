from chatrooms.on_message_created import on_chat_message_created
from config import get_settings
from firebase_admin import firestore
from firebase_functions import firestore_fn
from models.constants import Collections, PathParams


# Firestore trigger for new chat messages
@firestore_fn.on_document_created(
    document=f"{Collections.CHATROOMS}/{{{PathParams.CHATROOM_ID}}}/"
    f"{Collections.MESSAGES}/{{{PathParams.MESSAGE_ID}}}"
)
def on_new_chat_message(
    event: firestore_fn.Event[firestore_fn.DocumentSnapshot | None],
) -> None:
    """
    Firestore trigger function that runs when a message is created in a chatroom.

    Args:
        event: The Firestore event containing the document data

    Returns:
        None
    """
    settings = get_settings()
    on_chat_message_created(
        event,
        firestore.client(),
        concurrency=settings.notification_concurrency,
    )
