from datetime import timedelta

import pytest
from django.contrib.auth.models import User
from django.utils import timezone
from rest_framework.test import APIClient

from availability.models import PropertyAvailability
from properties.models import Property


@pytest.fixture
def host(db):
    return User.objects.create_user(username="host", email="host@example.com", password="pass12345")


@pytest.fixture
def guest(db):
    return User.objects.create_user(username="guest", email="guest@example.com", password="pass12345")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def host_client(host):
    client = APIClient()
    client.force_authenticate(user=host)
    return client


@pytest.fixture
def guest_client(guest):
    client = APIClient()
    client.force_authenticate(user=guest)
    return client


@pytest.fixture
def listing(host):
    return Property.objects.create(
        host=host,
        title="Bondi beach studio",
        city="Sydney",
        property_type=Property.PropertyType.STUDIO,
        max_guests=2,
        base_nightly_rate=10000,
        cleaning_fee=2000,
        service_fee=500,
        status=Property.Status.APPROVED,
    )


@pytest.fixture
def day():
    """Day N from tomorrow, so calendar rows are never in the past."""
    start = timezone.localdate() + timedelta(days=1)

    def _day(offset):
        return start + timedelta(days=offset)

    return _day


@pytest.fixture
def make_night(listing):
    def _make_night(date, rate=10000, discount=0, gap=None, available=True, property_obj=None):
        return PropertyAvailability.objects.create(
            property=property_obj or listing,
            date=date,
            nightly_rate=rate,
            is_gap_night=bool(discount) if gap is None else gap,
            gap_night_discount=discount,
            is_available=available,
        )

    return _make_night
