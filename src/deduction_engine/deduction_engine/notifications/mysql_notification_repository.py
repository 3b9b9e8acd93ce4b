from __future__ import annotations

import json

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, notification: Notification) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, title, body, type, is_read, data)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    notification.user_id,
                    notification.title,
                    notification.body,
                    notification.type.value,
                    int(notification.is_read),
                    json.dumps(notification.data, ensure_ascii=False, default=str),
                ),
            )
            return int(cur.lastrowid)
