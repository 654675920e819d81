from arcanaflow.db.database import get_session, init_db
from arcanaflow.db.operations import (
    get_messages_for_reading,
    get_or_create_session,
    get_reading,
    get_readings_for_session,
    save_message,
    save_reading,
    serialize_cards,
)

__all__ = [
    "get_messages_for_reading",
    "get_or_create_session",
    "get_reading",
    "get_readings_for_session",
    "get_session",
    "init_db",
    "save_message",
    "save_reading",
    "serialize_cards",
]
