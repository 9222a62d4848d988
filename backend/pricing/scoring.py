from .windows import round_half_up


def calculate_deal_score(property_obj, gap_nights, average_rating=0):
    """
    Listing deal score (0-99): deeper discounts and more gap nights rank
    higher, with small bonuses for rating, instant book and self check-in.
    """
    score = 50
    max_discount = max((gn.gap_night_discount or 0 for gn in gap_nights), default=0)
    score += min(max_discount * 0.8, 25)
    score += min(len(gap_nights) * 0.5, 8)

    if average_rating >= 4.5:
        score += 7
    elif average_rating >= 4.0:
        score += 4
    elif average_rating >= 3.5:
        score += 2

    if property_obj.instant_book:
        score += 3
    if property_obj.self_check_in:
        score += 2

    return min(round_half_up(score), 99)
