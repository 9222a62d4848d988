import pytest
from django.urls import reverse

from availability.models import BlockedPeriod
from properties.models import Property

pytestmark = pytest.mark.django_db


def test_bookable_queryset(listing, host):
    Property.objects.create(host=host, title="Pending", city="Perth", base_nightly_rate=9000)
    Property.objects.create(
        host=host, title="Paused", city="Perth", base_nightly_rate=9000,
        status=Property.Status.APPROVED, is_active=False,
    )

    assert list(Property.objects.bookable()) == [listing]


class TestHostProperties:
    def test_create_starts_pending(self, host, host_client):
        response = host_client.post(
            reverse("property-list-create"),
            {"title": "Cabin", "city": "Byron Bay", "base_nightly_rate": 22000, "status": "approved"},
            format="json",
        )

        assert response.status_code == 201
        created = Property.objects.get(pk=response.data["id"])
        assert created.host == host
        assert created.status == Property.Status.PENDING

    def test_max_nights_below_min(self, host_client):
        response = host_client.post(
            reverse("property-list-create"),
            {"title": "Cabin", "city": "Byron Bay", "base_nightly_rate": 22000, "min_nights": 3, "max_nights": 2},
            format="json",
        )
        assert response.status_code == 400
        assert "max_nights" in response.data

    def test_only_own_properties(self, listing, host_client, guest_client):
        assert len(host_client.get(reverse("property-list-create")).data) == 1
        assert guest_client.get(reverse("property-list-create")).data == []
        assert guest_client.get(reverse("property-detail", kwargs={"pk": listing.pk})).status_code == 404


class TestPublicStays:
    def test_listing_includes_gap_nights(self, api_client, listing, make_night, day):
        make_night(day(0), rate=10000, discount=40)
        make_night(day(1), rate=10000, discount=20)
        make_night(day(2), rate=10000)

        response = api_client.get(reverse("stay-list"))

        assert response.status_code == 200
        [card] = response.data
        assert [gn["discounted_rate"] for gn in card["gap_nights"]] == [6000, 8000]
        assert card["gap_night_summary"]["count"] == 2
        assert card["gap_night_summary"]["max_consecutive"] == 2
        assert card["gap_night_summary"]["label"] == "2 gap nights · up to 2 consecutive"
        # 50 + min(40 * 0.8, 25) + 2 * 0.5
        assert card["deal_score"] == 76

    def test_listing_skips_blocked_gap_nights(self, api_client, host, listing, make_night, day):
        make_night(day(0), discount=40)
        make_night(day(1), discount=20)
        BlockedPeriod.objects.create(property=listing, start_date=day(0), end_date=day(1), created_by=host)

        [card] = api_client.get(reverse("stay-list")).data

        assert [gn["date"] for gn in card["gap_nights"]] == [day(1).isoformat()]
        assert card["gap_night_summary"]["max_discount"] == 20

    def test_hides_unapproved(self, api_client, listing, host):
        Property.objects.create(host=host, title="Pending", city="Perth", base_nightly_rate=9000)

        response = api_client.get(reverse("stay-list"))

        assert [p["id"] for p in response.data] == [listing.id]

    def test_filters(self, api_client, listing):
        assert len(api_client.get(reverse("stay-list"), {"city": "syd"}).data) == 1
        assert api_client.get(reverse("stay-list"), {"city": "Melbourne"}).data == []
        assert api_client.get(reverse("stay-list"), {"guests": 4}).data == []

    def test_detail(self, api_client, listing):
        response = api_client.get(reverse("stay-detail", kwargs={"pk": listing.pk}))

        assert response.status_code == 200
        assert response.data["gap_night_summary"]["label"] == "Available"
        assert response.data["deal_score"] == 50
