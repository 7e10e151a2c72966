"""Global enums — LedgerEntryType must match the ledger_entries CHECK constraint exactly."""

from enum import Enum


class LedgerEntryType(str, Enum):
    PURCHASE = "PURCHASE"
    TOP_UP = "TOP_UP"
    # Not written by the purchase path; reserved so refunds never rely on sign inference
    REFUND = "REFUND"


class PurchaseErrorKind(str, Enum):
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    ALREADY_OWNED = "ALREADY_OWNED"
    BASE_GAME_REQUIRED = "BASE_GAME_REQUIRED"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    TRANSACTION_FAILED = "TRANSACTION_FAILED"
