"""Service layer for the writing-assistant chat."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any

from dayshare.core.constants import (
    AI_CHATS_COLLECTION,
    AI_HISTORY_WINDOW,
    PERSONAL_CHAT_KEY,
)
from dayshare.errors import AIServiceError
from dayshare.utils import utcnow

from .prompts import FALLBACK_RESPONSES, build_system_prompt

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from .client import CompletionClient

logger = logging.getLogger(__name__)


def chat_session_id(user_id: str, group_id: str | None = None) -> str:
    """Return the document ID of a user's chat for a group, or their personal chat."""
    return f"{user_id}_{group_id or PERSONAL_CHAT_KEY}"


class AIService:
    """Relays chat turns to the completion service and keeps the transcript."""

    @staticmethod
    def get_chat_history(
        db: Client, user_id: str, group_id: str | None = None
    ) -> dict[str, Any] | None:
        """Return the stored chat session, or None if there is none yet."""
        doc = db.collection(AI_CHATS_COLLECTION).document(
            chat_session_id(user_id, group_id)
        ).get()
        if not doc.exists:
            return None
        return {**(doc.to_dict() or {}), "id": doc.id}

    @staticmethod
    def clear_chat_history(db: Client, user_id: str, group_id: str | None = None) -> None:
        """Delete the stored chat session."""
        db.collection(AI_CHATS_COLLECTION).document(
            chat_session_id(user_id, group_id)
        ).delete()

    @staticmethod
    def chat(
        db: Client,
        user_id: str,
        message: str,
        client: CompletionClient,
        group_id: str | None = None,
        context: str | None = None,
    ) -> dict[str, Any]:
        """Answer a chat message, falling back to a canned reply on any failure.

        Loading and saving the transcript are best-effort: a failed load starts
        an empty history, and a failed save is logged while the reply is still
        returned.
        """
        try:
            session = AIService.get_chat_history(db, user_id, group_id) or {}
        except Exception as e:
            logger.warning(f"Could not load AI chat for {user_id}, starting fresh: {e}")
            session = {}
        messages = list(session.get("messages") or [])
        messages.append({"role": "user", "content": message, "timestamp": utcnow()})

        prompt = [{"role": "system", "content": build_system_prompt(context)}]
        prompt += [
            {"role": m["role"], "content": m["content"]}
            for m in messages[-AI_HISTORY_WINDOW:]
        ]
        try:
            reply = client.complete(prompt)
        except AIServiceError as e:
            logger.warning(f"AI chat fell back to a canned reply for {user_id}: {e}")
            reply = random.choice(FALLBACK_RESPONSES)

        timestamp = utcnow()
        messages.append({"role": "assistant", "content": reply, "timestamp": timestamp})

        session_data = {
            "userId": user_id,
            "groupId": group_id,
            "messages": messages,
            "context": context,
            "updatedAt": timestamp,
        }
        try:
            db.collection(AI_CHATS_COLLECTION).document(
                chat_session_id(user_id, group_id)
            ).set(session_data)
        except Exception as e:
            logger.error(f"Could not save AI chat for {user_id}: {e}")

        return {"message": reply, "timestamp": timestamp}
