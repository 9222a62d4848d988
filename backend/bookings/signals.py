from django.db import transaction
from django.db.models.signals import pre_delete
from django.dispatch import receiver
from .models import Booking
from .utils import release_booking


@receiver(pre_delete, sender=Booking)
def free_nights_on_booking_delete(sender, instance, **kwargs):
    with transaction.atomic():
        release_booking(instance)
