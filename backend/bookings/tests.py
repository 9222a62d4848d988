import pytest
from django.urls import reverse

from availability.models import PropertyAvailability, BlockedPeriod
from bookings.models import Booking
from rewards.models import UserRewards, RewardsTransaction

pytestmark = pytest.mark.django_db


@pytest.fixture
def two_nights(make_night, day):
    return [make_night(day(0), rate=10000, discount=25), make_night(day(1), rate=10000)]


def booking_payload(listing, check_in, check_out, **extra):
    return {
        "property": listing.id,
        "check_in_date": check_in.isoformat(),
        "check_out_date": check_out.isoformat(),
        "guests": 2,
        "guest_first_name": "Sam",
        "guest_last_name": "Lee",
        "guest_email": "sam@example.com",
        **extra,
    }


def request_booking(client, listing, check_in, check_out, **extra):
    return client.post(
        reverse("booking-list"), booking_payload(listing, check_in, check_out, **extra), format="json"
    )


class TestBookingModel:
    @pytest.mark.parametrize("booking_status,holding", [
        (Booking.Status.PENDING_APPROVAL, True),
        (Booking.Status.CONFIRMED, True),
        (Booking.Status.DECLINED, False),
        (Booking.Status.CANCELLED, False),
    ])
    def test_is_holding(self, listing, guest, day, booking_status, holding):
        booking = Booking.objects.create(
            property=listing, host=listing.host, user=guest,
            check_in_date=day(0), check_out_date=day(3), status=booking_status,
            guest_first_name="Sam", guest_last_name="Lee", guest_email="sam@example.com",
        )

        assert booking.nights == 3
        assert booking.is_holding() is holding
        assert Booking.objects.active().filter(pk=booking.pk).exists() is holding


class TestCreateBooking:
    def test_prices_from_calendar(self, guest_client, listing, two_nights, day):
        response = request_booking(guest_client, listing, day(0), day(2), total_price=1)

        assert response.status_code == 201
        booking = Booking.objects.get()
        assert booking.total_price == 20380
        assert booking.nights == 2
        assert booking.is_gap_night is True
        assert booking.discount_percent == 13
        assert booking.status == Booking.Status.PENDING_APPROVAL
        assert booking.host == listing.host
        assert response.data["pricing"]["grand_total"] == 20380
        assert response.data["booking"]["total_price"] == 20380

    def test_marks_nights_unavailable(self, guest_client, listing, two_nights, day):
        request_booking(guest_client, listing, day(0), day(2))

        assert not PropertyAvailability.objects.filter(property=listing, is_available=True).exists()

    def test_same_nights_cannot_be_booked_twice(self, guest_client, host_client, listing, two_nights, day):
        assert request_booking(guest_client, listing, day(0), day(2)).status_code == 201

        response = request_booking(host_client, listing, day(1), day(2))

        assert response.status_code == 400
        assert response.data["success"] is False
        assert Booking.objects.count() == 1

    def test_missing_calendar_row(self, guest_client, listing, make_night, day):
        make_night(day(0))

        response = request_booking(guest_client, listing, day(0), day(2))

        assert response.status_code == 404
        assert not Booking.objects.exists()
        assert PropertyAvailability.objects.get(date=day(0)).is_available

    def test_uses_and_debits_credit(self, guest, guest_client, listing, two_nights, day):
        UserRewards.objects.create(user=guest, credit_balance=5000)

        response = request_booking(guest_client, listing, day(0), day(2), apply_credit=True)

        assert response.status_code == 201
        assert response.data["booking"]["credit_applied"] == 5000
        assert response.data["booking"]["total_price"] == 15293
        assert UserRewards.objects.get(user=guest).credit_balance == 0
        assert RewardsTransaction.objects.filter(type=RewardsTransaction.Type.CREDIT_USED).count() == 1

    def test_credit_untouched_unless_requested(self, guest, guest_client, listing, two_nights, day):
        UserRewards.objects.create(user=guest, credit_balance=5000)

        request_booking(guest_client, listing, day(0), day(2))

        assert UserRewards.objects.get(user=guest).credit_balance == 5000

    def test_too_many_guests(self, guest_client, listing, two_nights, day):
        response = request_booking(guest_client, listing, day(0), day(2), guests=5)
        assert response.status_code == 400
        assert "guests" in response.data

    def test_min_nights(self, guest_client, listing, two_nights, day):
        listing.min_nights = 3
        listing.save()

        assert request_booking(guest_client, listing, day(0), day(2)).status_code == 400

    def test_checkout_before_checkin(self, guest_client, listing, two_nights, day):
        assert request_booking(guest_client, listing, day(1), day(0)).status_code == 400

    def test_blocked_dates(self, guest_client, host, listing, two_nights, day):
        BlockedPeriod.objects.create(property=listing, start_date=day(1), end_date=day(3), created_by=host)

        assert request_booking(guest_client, listing, day(0), day(2)).status_code == 400

    def test_host_cannot_reopen_booked_night(self, guest_client, host_client, listing, two_nights, day):
        assert request_booking(guest_client, listing, day(0), day(2)).status_code == 201

        reopen = host_client.post(
            reverse("property-availability", kwargs={"property_id": listing.id}),
            {"dates": [{"date": day(0).isoformat(), "is_available": True}]},
            format="json",
        )
        assert reopen.status_code == 400

        second = request_booking(host_client, listing, day(0), day(1))
        assert second.status_code == 400
        assert Booking.objects.active().count() == 1

    def test_requires_login(self, api_client, listing, two_nights, day):
        assert request_booking(api_client, listing, day(0), day(2)).status_code == 401


class TestBookingLifecycle:
    @pytest.fixture
    def booking(self, guest, guest_client, listing, two_nights, day):
        UserRewards.objects.create(user=guest, credit_balance=5000)
        request_booking(guest_client, listing, day(0), day(2), apply_credit=True)
        return Booking.objects.get()

    def action_url(self, booking, name):
        return reverse(f"booking-{name}", kwargs={"pk": booking.pk})

    def test_cancel_frees_nights_and_refunds(self, guest, guest_client, booking, listing):
        response = guest_client.post(self.action_url(booking, "cancel"))

        assert response.status_code == 200
        assert response.data["status"] == Booking.Status.CANCELLED
        assert PropertyAvailability.objects.filter(property=listing, is_available=True).count() == 2
        assert UserRewards.objects.get(user=guest).credit_balance == 5000

    def test_cancel_twice(self, guest_client, booking):
        guest_client.post(self.action_url(booking, "cancel"))
        response = guest_client.post(self.action_url(booking, "cancel"))

        assert response.status_code == 400

    def test_host_declines(self, host_client, booking, listing):
        response = host_client.post(self.action_url(booking, "decline"))

        assert response.status_code == 200
        assert PropertyAvailability.objects.filter(property=listing, is_available=True).count() == 2

    def test_guest_cannot_approve(self, guest_client, booking):
        assert guest_client.post(self.action_url(booking, "approve")).status_code == 403

    def test_approve_awards_points(self, guest, host_client, booking):
        response = host_client.post(self.action_url(booking, "approve"))

        assert response.status_code == 200
        rewards = UserRewards.objects.get(user=guest)
        # 15293 cents -> 152 whole dollars
        assert rewards.total_points_earned == 152
        assert rewards.current_points == 152
        assert rewards.tier == UserRewards.Tier.SILVER
        # Confirmed nights stay held
        assert not PropertyAvailability.objects.filter(is_available=True).exists()

    def test_delete_releases_nights(self, guest, guest_client, booking, listing):
        response = guest_client.delete(reverse("booking-detail", kwargs={"pk": booking.pk}))

        assert response.status_code == 204
        assert not Booking.objects.exists()
        assert PropertyAvailability.objects.filter(property=listing, is_available=True).count() == 2
        assert UserRewards.objects.get(user=guest).credit_balance == 5000

    def test_deleting_cancelled_booking_does_not_refund_twice(self, guest, guest_client, booking):
        guest_client.post(self.action_url(booking, "cancel"))
        guest_client.delete(reverse("booking-detail", kwargs={"pk": booking.pk}))

        assert UserRewards.objects.get(user=guest).credit_balance == 5000

    def test_list_scoped_to_participants(self, guest_client, host_client, booking, listing):
        from django.contrib.auth.models import User
        from rest_framework.test import APIClient

        stranger = APIClient()
        stranger.force_authenticate(user=User.objects.create_user(username="stranger", password="pass12345"))

        assert len(guest_client.get(reverse("booking-list")).data) == 1
        assert len(host_client.get(reverse("booking-list")).data) == 1
        assert stranger.get(reverse("booking-list")).data == []

    def test_lookup_by_uid(self, api_client, booking):
        response = api_client.get(reverse("booking-get-by-uid", kwargs={"uid": str(booking.uid)}))

        assert response.status_code == 200
        assert response.data["id"] == booking.id
