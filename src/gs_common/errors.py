"""Unified error codes and custom exceptions.

Error code ranges:
  2xxx: Wallet/Account
  3xxx: Catalog
  4xxx: Purchase
  9xxx: System

Purchase errors also carry a PurchaseErrorKind so callers can branch on the
failure without parsing codes or messages.
"""

from src.gs_common.enums import PurchaseErrorKind


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class PurchaseError(AppError):
    """Base for the five outcomes a purchase attempt can fail with."""

    kind: PurchaseErrorKind


# --- 2xxx: Wallet/Account ---

class InsufficientFundsError(PurchaseError):
    kind = PurchaseErrorKind.INSUFFICIENT_FUNDS

    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(
            2001,
            f"Insufficient funds: required {required} cents, available {available} cents",
            422,
        )


class AccountNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"Account not found for user {user_id}", 404)


# --- 3xxx: Catalog ---

class GameNotFoundError(PurchaseError):
    kind = PurchaseErrorKind.GAME_NOT_FOUND

    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(3001, f"Game not found: {game_id}", 404)


# --- 4xxx: Purchase ---

class AlreadyOwnedError(PurchaseError):
    kind = PurchaseErrorKind.ALREADY_OWNED

    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(4001, f"Game already owned: {game_id}", 409)


class BaseGameRequiredError(PurchaseError):
    kind = PurchaseErrorKind.BASE_GAME_REQUIRED

    def __init__(self, game_id: str, base_game_id: str | None) -> None:
        self.game_id = game_id
        self.base_game_id = base_game_id
        super().__init__(
            4002,
            f"DLC {game_id} requires base game {base_game_id or '<unknown>'}",
            422,
        )


class TransactionFailedError(PurchaseError):
    """Storage failure inside the unit of work. Nothing was committed; safe to retry."""

    kind = PurchaseErrorKind.TRANSACTION_FAILED

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(
            4003,
            f"Purchase transaction failed: {type(cause).__name__}",
            503,
        )
        self.__cause__ = cause


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
