"""Per-ticket surcharge, optionally limited to the cash-on-delivery method.

Callers must clear the cart's fee lines before calling
:func:`apply_ticket_surcharge`; the host's ``CartService.calculate_totals``
does so, which keeps recalculation of an unchanged cart idempotent.
"""

import logging

from django_conference_checkout.checkout.services.options import Options
from django_conference_checkout.checkout.services.tickets import ticket_count
from django_conference_checkout.settings import get_config

logger = logging.getLogger(__name__)


def surcharge_applies(options: Options, payment_method: str) -> bool:
    """Return whether the surcharge is due for the chosen *payment_method*."""
    if not options.fee_enabled:
        return False
    return not options.fee_only_cod or payment_method == get_config().cod_payment_method


def apply_ticket_surcharge(cart: object, options: Options) -> int:
    """Add one surcharge line per ticket to *cart* when it applies.

    Args:
        cart: The cart being totalled; must provide ``payment_method`` and
            ``add_fee``.
        options: Resolved checkout options.

    Returns:
        The number of fee lines added.
    """
    if not surcharge_applies(options, getattr(cart, "payment_method", "") or ""):
        return 0
    if options.fee_amount <= 0:
        return 0

    count = ticket_count(cart)
    for _ in range(count):
        cart.add_fee(
            options.fee_title,
            options.fee_amount,
            taxable=options.fee_taxable,
            tax_class=options.fee_tax_class,
        )
    if count:
        logger.info("Applied %s surcharge of %s to %d ticket(s)", options.fee_title, options.fee_amount, count)
    return count
