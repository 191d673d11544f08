"""
DealerService: b2b (dealer) applications and role promotion.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from django.utils import timezone

from orbis.exceptions import DealerError
from orbis.models import DealerApplication, Profile


logger = logging.getLogger(__name__)


class DealerService:
    """
    Dealer approval workflow, the only writer of Profile.role.

    apply -> pending -> approve (role becomes "b2b") | reject
    """

    @staticmethod
    def apply(user: Any, **fields) -> DealerApplication:
        """
        Submit a dealer application.

        Raises:
            DealerError: the user already has a pending application
        """
        if DealerApplication.objects.filter(user=user, status=DealerApplication.Status.PENDING).exists():
            raise DealerError(
                code="already_pending",
                message="Değerlendirme bekleyen bir başvurunuz zaten var.",
                context={"user_id": user.pk},
            )
        application = DealerApplication.objects.create(user=user, **fields)
        logger.info("Dealer application %s submitted by user=%s", application.pk, user.pk)
        return application

    @staticmethod
    @transaction.atomic
    def approve(application_id: Any, actor: str = "system") -> DealerApplication:
        """Approve and promote the applicant to b2b in one transaction."""
        application = DealerService._lock_pending(application_id)

        profile, _ = Profile.objects.select_for_update().get_or_create(user_id=application.user_id)
        profile.role = Profile.Role.B2B
        profile.save(update_fields=["role", "updated_at"])

        application.status = DealerApplication.Status.APPROVED
        application.processed_by = actor
        application.processed_at = timezone.now()
        application.save(update_fields=["status", "processed_by", "processed_at"])

        logger.info("Dealer application %s approved by %s; user=%s is now b2b", application.pk, actor, application.user_id)
        return application

    @staticmethod
    @transaction.atomic
    def reject(application_id: Any, actor: str = "system") -> DealerApplication:
        application = DealerService._lock_pending(application_id)
        application.status = DealerApplication.Status.REJECTED
        application.processed_by = actor
        application.processed_at = timezone.now()
        application.save(update_fields=["status", "processed_by", "processed_at"])

        logger.info("Dealer application %s rejected by %s", application.pk, actor)
        return application

    @staticmethod
    def _lock_pending(application_id: Any) -> DealerApplication:
        application = DealerApplication.objects.select_for_update().get(pk=application_id)
        if application.status != DealerApplication.Status.PENDING:
            raise DealerError(
                code="already_processed",
                message="Bu başvuru zaten sonuçlandırılmış.",
                context={"application_id": application.pk, "status": application.status},
            )
        return application
