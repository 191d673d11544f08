"""
RoleService: Resolves the commercial role (b2c / b2b) of a user.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction

from orbis.conf import get_orbis_setting
from orbis.models import Profile


logger = logging.getLogger(__name__)


class RoleService:
    """
    Read-only role lookup.

    Fails toward the less privileged tier: anonymous users, missing profiles,
    empty roles and lookup errors all resolve to the default role ("b2c").
    Stored values are returned unvalidated.
    """

    @staticmethod
    def resolve_role(user: Any | None) -> str:
        default_role = get_orbis_setting("DEFAULT_ROLE")

        if user is None or not getattr(user, "is_authenticated", False):
            return default_role

        try:
            # Savepoint: a failed read must not break an enclosing checkout transaction.
            with transaction.atomic():
                role = (
                    Profile.objects.filter(user_id=user.pk)
                    .values_list("role", flat=True)
                    .first()
                )
        except Exception:
            logger.exception("RoleService.resolve_role failed for user=%s, using %s", user.pk, default_role)
            return default_role

        return role or default_role
