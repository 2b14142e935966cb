from __future__ import annotations

from app import db
from app.buisness.procurement import inputs
from app.buisness.procurement.capabilities import Capability, CapabilityCheck
from app.buisness.procurement.errors import InsufficientRole, NotFound
from app.buisness.procurement.request_lifecycle import RequestLifecycle
from app.buisness.procurement.transaction import atomic
from app.data.core.user_info.user import Role
from app.data.procurement import Discussion
from app.utils.logger import get_logger

logger = get_logger("procurement.buisness.discussion_thread")


class DiscussionThread:
    """
    Messages exchanged on a need expression between its creator and the
    people deciding on it.
    """

    @staticmethod
    def post(expression_id: int, actor_id: int, message: str) -> Discussion:
        with atomic("post discussion"):
            expression = RequestLifecycle.get(expression_id)
            actor = CapabilityCheck.actor(actor_id)
            if actor.id != expression.created_by_id and actor.role not in Capability.DECIDE_EXPRESSION:
                raise InsufficientRole(
                    "post on this need expression",
                    actor.id,
                    actor.role,
                    ("creator",) + Capability.DECIDE_EXPRESSION,
                )

            discussion = Discussion(
                expression_id=expression.id,
                message=inputs.text(message, "message", required=True),
                created_by_id=actor.id,
                updated_by_id=actor.id,
            )
            db.session.add(discussion)
            db.session.flush()
            logger.info(f"Discussion {discussion.id} posted on expression {expression.number} by user {actor.id}")
        return discussion

    @staticmethod
    def list(expression_id: int) -> list[Discussion]:
        """Oldest first"""
        expression = RequestLifecycle.get(expression_id)
        return expression.discussions.order_by(None).order_by(Discussion.created_at, Discussion.id).all()

    @staticmethod
    def delete(discussion_id: int, actor_id: int) -> None:
        with atomic("delete discussion"):
            discussion = db.session.get(Discussion, discussion_id)
            if discussion is None:
                raise NotFound("discussion", discussion_id)
            actor = CapabilityCheck.actor(actor_id)
            if actor.id != discussion.author_id and actor.role != Role.ADMINISTRATOR:
                raise InsufficientRole(
                    "delete this discussion",
                    actor.id,
                    actor.role,
                    ("author",) + Capability.MODERATE_DISCUSSIONS,
                )
            db.session.delete(discussion)
            logger.info(f"Discussion {discussion_id} deleted by user {actor.id}")
