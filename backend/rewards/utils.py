import logging

from .models import UserRewards, RewardsTransaction

logger = logging.getLogger(__name__)

# Points earning rates
POINTS_PER_DOLLAR = 1
# 100 points = $1 credit
POINTS_TO_CREDIT_RATIO = 100

# Tier thresholds based on total points earned
TIER_THRESHOLDS = [
    (UserRewards.Tier.PLATINUM, 1000),
    (UserRewards.Tier.GOLD, 500),
    (UserRewards.Tier.SILVER, 100),
    (UserRewards.Tier.BRONZE, 0),
]
TIER_ORDER = [tier for tier, _ in reversed(TIER_THRESHOLDS)]


def calculate_tier(total_points_earned):
    for tier, threshold in TIER_THRESHOLDS:
        if total_points_earned >= threshold:
            return tier
    return UserRewards.Tier.BRONZE


def get_next_tier_info(current_tier, total_points_earned):
    """Return (next_tier, points_needed); Platinum has nowhere left to go."""
    index = TIER_ORDER.index(current_tier)
    if index == len(TIER_ORDER) - 1:
        return UserRewards.Tier.PLATINUM, 0

    next_tier = TIER_ORDER[index + 1]
    threshold = dict(TIER_THRESHOLDS)[next_tier]
    return next_tier, max(threshold - total_points_earned, 0)


def get_rewards(user, lock=False):
    qs = UserRewards.objects
    if lock:
        qs = qs.select_for_update()
    rewards, _ = qs.get_or_create(user=user)
    return rewards


def get_credit_balance(user):
    if not user or not user.is_authenticated:
        return 0
    rewards = UserRewards.objects.filter(user=user).first()
    return rewards.credit_balance if rewards else 0


def debit_credit(user, amount, booking=None):
    """Spend account credit on a booking. Caller holds the transaction."""
    if amount <= 0:
        return 0
    rewards = get_rewards(user, lock=True)
    if amount > rewards.credit_balance:
        raise ValueError(
            f"Insufficient credit: {rewards.credit_balance} available, {amount} requested"
        )
    rewards.credit_balance -= amount
    rewards.save(update_fields=["credit_balance", "updated_at"])
    RewardsTransaction.objects.create(
        user=user,
        booking=booking,
        type=RewardsTransaction.Type.CREDIT_USED,
        credit=-amount,
        description="Credit applied to booking",
    )
    return amount


def refund_credit(user, amount, booking=None):
    if amount <= 0:
        return 0
    rewards = get_rewards(user, lock=True)
    rewards.credit_balance += amount
    rewards.save(update_fields=["credit_balance", "updated_at"])
    RewardsTransaction.objects.create(
        user=user,
        booking=booking,
        type=RewardsTransaction.Type.CREDIT_REFUNDED,
        credit=amount,
        description="Credit refunded from cancelled booking",
    )
    logger.info(f"Refunded {amount}c credit to user {user.id}")
    return amount


def award_booking_points(booking):
    """Award 1 point per whole dollar of the booking total."""
    points = (booking.total_price // 100) * POINTS_PER_DOLLAR
    if points <= 0:
        return 0

    rewards = get_rewards(booking.user, lock=True)
    rewards.total_points_earned += points
    rewards.current_points += points
    rewards.tier = calculate_tier(rewards.total_points_earned)
    rewards.save()

    RewardsTransaction.objects.create(
        user=booking.user,
        booking=booking,
        type=RewardsTransaction.Type.EARNED,
        points=points,
        description=f"Stay at {booking.property.title}",
    )
    logger.info(f"Awarded {points} points to user {booking.user_id} for booking {booking.id}")
    return points


def redeem_points(user, points):
    """Convert points to credit in whole POINTS_TO_CREDIT_RATIO blocks."""
    if points <= 0 or points % POINTS_TO_CREDIT_RATIO:
        raise ValueError(f"Points must be a positive multiple of {POINTS_TO_CREDIT_RATIO}")

    rewards = get_rewards(user, lock=True)
    if points > rewards.current_points:
        raise ValueError(f"Insufficient points: {rewards.current_points} available")

    # 100 points = 100 cents
    credit = points // POINTS_TO_CREDIT_RATIO * 100
    rewards.current_points -= points
    rewards.credit_balance += credit
    rewards.save()

    RewardsTransaction.objects.create(
        user=user,
        type=RewardsTransaction.Type.REDEEMED,
        points=-points,
        credit=credit,
        description=f"Redeemed {points} points",
    )
    return rewards
