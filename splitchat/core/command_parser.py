"""
Turns a raw chat message into a structured command.

    @split Dinner ₹120 @alice @bob       -> split
    @addexpense Coffee ₹25 category:Food -> expense
    @addexpense Cab 300 --split @bob   -> expense, also split in a group
    @predict                             -> predict
    @summary                             -> summary

Anything else is `unknown`. `parse` never raises.
"""
import logging
import re
from decimal import Decimal
from typing import List

from splitchat.schemas.command import ParsedCommand

logger = logging.getLogger(__name__)

CURRENCY_SYMBOLS = "$₹£€¥"

# NOTE: scans the whole message, so a digit earlier in the text (inside a
# mention or the description, e.g. "Room 2 rent") is taken as the amount.
# Kept as-is until it is decided whether only the token after the
# description should count.
AMOUNT_RE = re.compile(
    rf"(?:[{re.escape(CURRENCY_SYMBOLS)}]\s*)?(\d+(?:\.\d{{1,2}})?)(?:\s*[{re.escape(CURRENCY_SYMBOLS)}])?"
)
MENTION_RE = re.compile(r"@(\w+)")
PERCENT_RE = re.compile(r"(\d+(?:\.\d+)?)%")
CATEGORY_RE = re.compile(r"(?:category|cat):(\S+)", re.IGNORECASE)
HASHTAG_RE = re.compile(r"#(\w+)")
SPLIT_FLAG_RE = re.compile(r"(?:^|\s)(?:--split|-s)(?=\s|$)")

DEFAULT_DESCRIPTION = "Expense"
DEFAULT_CATEGORY = "Other"

# Split bills only take one of these; unknown hashtags fall back to Other
SPLIT_CATEGORIES = ("Food", "Transport", "Entertainment", "Shopping", "Bills", "Health", "Other")


def _unknown() -> ParsedCommand:
    return ParsedCommand(type="unknown", data={})


def _description(message: str) -> str:
    parts = message.split()
    return parts[1] if len(parts) > 1 else DEFAULT_DESCRIPTION


def extract_amount(message: str) -> Decimal:
    match = AMOUNT_RE.search(message)
    return Decimal(match.group(1)) if match else Decimal("0")


def extract_mentions(message: str) -> List[str]:
    return [m for m in MENTION_RE.findall(message) if m.lower() != "split"]


def extract_hashtag(message: str) -> str | None:
    match = HASHTAG_RE.search(message)
    return match.group(1) if match else None


def split_category(tag: str) -> str:
    for category in SPLIT_CATEGORIES:
        if category.lower() == tag.lower():
            return category
    return DEFAULT_CATEGORY


def extract_percentages(message: str) -> List[Decimal]:
    return [Decimal(p) for p in PERCENT_RE.findall(message)]


def parse(message: str) -> ParsedCommand:
    text = (message or "").strip()
    prefix = text.lower()

    if prefix.startswith("@split"):
        return parse_split(text)
    if prefix.startswith("@addexpense"):
        return parse_expense(text)
    if prefix.startswith("@predict"):
        return ParsedCommand(type="predict", data={})
    if prefix.startswith("@summary"):
        return ParsedCommand(type="summary", data={})

    return _unknown()


def parse_split(message: str) -> ParsedCommand:
    description = _description(message)
    amount = extract_amount(message)

    if not description.strip() or amount <= 0:
        logger.debug("Split command rejected: description=%r amount=%s", description, amount)
        return _unknown()

    participants = extract_mentions(message)
    percentages = extract_percentages(message)
    split_type = "percentage" if len(percentages) == len(participants) + 1 else "equal"

    data = {
        "description": description,
        "amount": amount,
        "participants": participants,
        "splitType": split_type,
    }

    tag = extract_hashtag(message)
    if tag:
        data["category"] = split_category(tag)

    return ParsedCommand(type="split", data=data)


def parse_expense(message: str) -> ParsedCommand:
    description = _description(message)
    amount = extract_amount(message)

    if not description.strip() or amount <= 0:
        logger.debug("Expense command rejected: description=%r amount=%s", description, amount)
        return _unknown()

    # category:/cat: wins over a #hashtag
    category_match = CATEGORY_RE.search(message)
    if category_match:
        category = category_match.group(1)
    else:
        category = extract_hashtag(message) or DEFAULT_CATEGORY

    data = {
        "description": description,
        "amount": amount,
        "category": category,
    }

    if SPLIT_FLAG_RE.search(message):
        data["split"] = True
        data["participants"] = [m for m in extract_mentions(message) if m.lower() != "addexpense"]

    return ParsedCommand(type="expense", data=data)
