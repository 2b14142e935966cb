from __future__ import annotations

from app import db
from app.buisness.procurement.errors import InsufficientRole, NotFound, NotOwner
from app.data.core.user_info.user import Role, User


class Capability:
    """Roles allowed to perform each action"""
    CREATE_EXPRESSION = (Role.REQUESTER, Role.APPROVER, Role.ADMINISTRATOR)
    DECIDE_EXPRESSION = (Role.APPROVER, Role.ADMINISTRATOR)
    MANAGE_ORDERS = (Role.ADMINISTRATOR,)
    RECORD_RECEPTIONS = (Role.ADMINISTRATOR,)
    MODERATE_DISCUSSIONS = (Role.ADMINISTRATOR,)


class CapabilityCheck:
    """
    The single place where actor identity is resolved and authorized.

    Each lifecycle/ledger operation calls exactly one of ``require_role`` or
    ``require_owner`` before touching state.
    """

    @staticmethod
    def actor(actor_id: int) -> User:
        user = db.session.get(User, actor_id) if actor_id is not None else None
        if user is None or not user.is_active:
            raise NotFound("user", actor_id)
        return user

    @classmethod
    def require_role(cls, actor_id: int, action: str, allowed: tuple[str, ...]) -> User:
        user = cls.actor(actor_id)
        if user.role not in allowed:
            raise InsufficientRole(action, actor_id, user.role, allowed)
        return user

    @classmethod
    def require_owner(cls, actor_id: int, entity: str, record) -> User:
        user = cls.actor(actor_id)
        if record.created_by_id != user.id:
            raise NotOwner(entity, record.id, actor_id, record.created_by_id)
        return user
