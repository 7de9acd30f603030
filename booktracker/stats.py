"""Summary statistics over the catalog and the user's overlay."""
from decimal import Decimal, ROUND_HALF_UP

from booktracker.catalog import Catalog
from booktracker.models import Overlay, Stats


def average_rating(values) -> float:
    """
    Float mean of ``values`` to one decimal, 0.0 when empty.

    Rounds the exact binary value of the float half-up, so 4.25 gives 4.3
    but 1.45 (stored as 1.4499...) gives 1.4.
    """
    values = list(values)
    if not values:
        return 0.0
    mean = Decimal(sum(values) / len(values))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def compute_stats(catalog: Catalog, overlay: Overlay) -> Stats:
    """
    Total books, books read and the average personal rating.

    Overlay entries for ids missing from the catalog (left over from an
    older catalog) are ignored.
    """
    read = sum(1 for book_id in overlay.read_ids if book_id in catalog)
    ratings = [r for book_id, r in overlay.ratings.items() if book_id in catalog]
    return Stats(
        total=len(catalog),
        read=read,
        avg_user_rating=average_rating(ratings),
    )
