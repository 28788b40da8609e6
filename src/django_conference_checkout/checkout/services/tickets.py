"""Expansion of cart lines into per-attendee ticket blocks.

Every unit of every cart line becomes one :class:`TicketBlock`. The field
builder, the validator and the order meta writer all call
:func:`list_ticket_blocks` on the same cart, so the expansion must be a pure
function of the cart contents: same lines, same order, same keys.

The cart is duck-typed: ``cart.line_items()`` yields lines exposing ``key``,
``quantity`` and ``product``; a product exposes ``get_name()`` and
``get_sku()``, or is ``None`` when it has been deleted.
"""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

ITEM_KEY_LENGTH = 12
FALLBACK_PRODUCT_NAME = "Product"

_UNSAFE_KEY_RE = re.compile(r"[^a-z0-9_]")


@dataclass(frozen=True, slots=True)
class TicketBlock:
    """One attendee registration unit derived from one unit of cart quantity."""

    key: str
    label: str


def sanitize_key(value: str) -> str:
    """Lowercase *value* and drop every character outside ``[a-z0-9_]``."""
    return _UNSAFE_KEY_RE.sub("", value.lower())


def ticket_block_key(item_key: str, unit: int) -> str:
    """Return the field prefix for unit *unit* of the cart line *item_key*.

    Only the first 12 characters of the line key are used.
    """
    return sanitize_key(f"t_{item_key[:ITEM_KEY_LENGTH]}_{unit}")


def ticket_block_label(number: int, name: str, sku: str, unit: int, quantity: int) -> str:
    """Format the human readable heading of a ticket block.

    Example: ``"Ticket 2 — Early Bird [EB-24] (2 of 3)"``.
    """
    sku_text = f" [{sku}]" if sku else ""
    return f"Ticket {number} — {name}{sku_text} ({unit} of {quantity})"


def list_ticket_blocks(cart: object | None) -> list[TicketBlock]:
    """Expand the cart into one ticket block per unit of quantity.

    Lines are visited in cart order and units within a line in ascending
    order. The ticket number in each label counts across all lines. Lines with
    a quantity below one are skipped.

    Args:
        cart: The current cart, or ``None`` outside a checkout context.

    Returns:
        The ordered ticket blocks; empty when there is no cart.
    """
    blocks: list[TicketBlock] = []
    if cart is None:
        return blocks

    ticket_number = 0
    for item in cart.line_items():
        quantity = int(item.quantity or 0)
        if quantity < 1:
            continue

        product = item.product
        name = product.get_name() if product is not None else FALLBACK_PRODUCT_NAME
        sku = product.get_sku() if product is not None else ""

        for unit in range(1, quantity + 1):
            ticket_number += 1
            blocks.append(
                TicketBlock(
                    key=ticket_block_key(str(item.key), unit),
                    label=ticket_block_label(ticket_number, name, sku, unit, quantity),
                )
            )

    logger.debug("Expanded cart into %d ticket block(s)", len(blocks))
    return blocks


def ticket_count(cart: object | None) -> int:
    """Return the number of tickets (attendees) in the cart."""
    return len(list_ticket_blocks(cart))
