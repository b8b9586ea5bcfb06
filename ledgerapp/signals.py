# ledgerapp/signals.py
import logging

from django.conf import settings
from django.contrib.auth.signals import user_logged_in
from django.db.models.signals import post_save
from django.dispatch import receiver
from kombu.exceptions import OperationalError

from .conf import ledger_setting
from .models import InvestorProfile
from .tasks import sync_user_income_task

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_investor_profile(sender, instance, created, **kwargs):
    if not created:
        return
    InvestorProfile.objects.get_or_create(user=instance)


@receiver(user_logged_in)
def sync_income_on_login(sender, request, user, **kwargs):
    if not ledger_setting("SYNC_ON_LOGIN"):
        return
    try:
        sync_user_income_task.delay(user.pk)
    except OperationalError:
        # broker down: the nightly batch or the next page load catches up
        logger.exception("Could not queue income sync for user %s", user.pk)
