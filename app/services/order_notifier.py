"""Relay submitted orders to the restaurant's messaging channel."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime

import requests

from app.core.exceptions import UpstreamServiceException
from app.services.cart import Cart, CartLineItem

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 10


def _format_line(index: int, line: CartLineItem) -> str:
    options = line.options
    parts = [
        f"\n{index}. *{line.menu_item_name}*",
        f"   • Quantity: {line.quantity}",
        f"   • Unit price: ${line.unit_price:.2f}",
        f"   • Subtotal: ${line.total_price:.2f}",
    ]
    if options.size:
        parts.append(f"   • Size: {options.size}")
    if options.milk:
        parts.append(f"   • Milk: {options.milk}")
    if options.sweetener:
        parts.append(f"   • Sweetener: {options.sweetener}")
    if options.flavor:
        parts.append(f"   • Flavor: {options.flavor}")
    if options.extras:
        parts.append(f"   • Extras: {', '.join(options.extras)}")
    for modifier in options.modifiers:
        parts.append(f"   • {modifier.group_name}: {', '.join(modifier.option_labels)}")
    return "\n".join(parts)


def format_order_message(
    restaurant_name: str,
    table_number: str,
    cart: Cart,
    currency: str,
    submitted_at: datetime,
) -> str:
    """Markdown order summary for the kitchen chat."""
    currency = currency.upper()
    lines = [
        f"🍽️ *NEW ORDER - {restaurant_name}*\n",
        f"📅 *Date:* {submitted_at.strftime('%Y-%m-%d %H:%M')}\n",
        f"🪑 *TABLE:* #{table_number}",
        f"📦 *Total items:* {cart.total_items}",
        f"💰 *Total:* ${cart.total_price:.2f} {currency}\n",
        "📋 *ORDER DETAILS:*",
        "═" * 30,
    ]
    for index, line in enumerate(cart.items, start=1):
        lines.append(_format_line(index, line))
        if index < len(cart.items):
            lines.append("-" * 20)
    lines.append("\n" + "═" * 30)
    lines.append(f"💳 *FINAL TOTAL: ${cart.total_price:.2f} {currency}*\n")
    lines.append("*Please confirm receipt of the order* ✅")
    return "\n".join(lines)


class OrderNotifier(ABC):
    """Delivers a formatted order message"""

    @abstractmethod
    def send(self, message: str) -> None:
        raise NotImplementedError


class TelegramOrderNotifier(OrderNotifier):
    """
    OrderNotifier posting to a Telegram chat through the Bot API.

    Raises UpstreamServiceException when the bot is not configured, the
    request fails, or Telegram answers with ok=false.
    """

    def __init__(self, bot_token: str, chat_id: str, api_url: str = "https://api.telegram.org"):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.api_url = api_url.rstrip("/")

    def send(self, message: str) -> None:
        if not (self.bot_token and self.chat_id):
            logger.error("Telegram relay is not configured")
            raise UpstreamServiceException("Order relay is not configured")

        try:
            response = requests.post(
                f"{self.api_url}/bot{self.bot_token}/sendMessage",
                json={"chat_id": self.chat_id, "text": message, "parse_mode": "Markdown"},
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            logger.error("Telegram request failed: %s", e, exc_info=True)
            raise UpstreamServiceException("Could not send the order. Please try again")

        if response.status_code != 200:
            logger.error("Telegram API error %s: %s", response.status_code, response.text)
            raise UpstreamServiceException("Could not send the order. Please try again")

        result = response.json()
        if not result.get("ok"):
            logger.error("Telegram API rejected message: %s", result.get("description"))
            raise UpstreamServiceException("Could not send the order. Please try again")
