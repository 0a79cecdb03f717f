"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Account / ledger
  3xxx: Draw
  4xxx: Ticket / bet
  5xxx: Bet limits
  9xxx: System
"""


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


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired token", 401)


# --- 2xxx: Account ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} centavos, available {available} centavos",
            422,
        )


class AccountNotFoundError(AppError):
    def __init__(self, user_id: int) -> None:
        super().__init__(2002, f"Balance account not found for user {user_id}", 404)


# --- 3xxx: Draw ---

class DrawNotFoundError(AppError):
    def __init__(self, draw_id: int) -> None:
        super().__init__(3001, f"Draw not found: {draw_id}", 404)


class DrawNotOpenError(AppError):
    def __init__(self, draw_id: int) -> None:
        super().__init__(3002, f"Draw is not open for betting: {draw_id}", 422)


class CutoffPassedError(AppError):
    def __init__(self, draw_id: int) -> None:
        super().__init__(3003, f"Betting cutoff time has passed for draw {draw_id}", 422)


class DrawAlreadySettledError(AppError):
    def __init__(self, draw_id: int) -> None:
        super().__init__(3004, f"Draw already settled: {draw_id}", 409)


class InvalidWinningNumberError(AppError):
    def __init__(self, number: str) -> None:
        super().__init__(3005, f"Winning number must be exactly 3 digits, got {number!r}", 400)


class DrawNotSettledError(AppError):
    def __init__(self, draw_id: int) -> None:
        super().__init__(3006, f"Draw has no official result yet: {draw_id}", 422)


# --- 4xxx: Ticket ---

class InvalidBetError(AppError):
    def __init__(self, index: int, reason: str) -> None:
        super().__init__(4001, f"Bet {index + 1}: {reason}", 400)


class EmptyBetsError(AppError):
    def __init__(self) -> None:
        super().__init__(4002, "Bets list is required and must not be empty", 400)


class TooManyBetsError(AppError):
    def __init__(self, maximum: int) -> None:
        super().__init__(4003, f"A ticket holds at most {maximum} bets", 400)


class DuplicateBetError(AppError):
    def __init__(self, combination: str, bet_type: str) -> None:
        super().__init__(
            4004,
            f"Duplicate bet: {combination} ({bet_type}) already placed for this draw",
            409,
        )


class TicketNotFoundError(AppError):
    def __init__(self, ticket_id: str) -> None:
        super().__init__(4005, f"Ticket not found: {ticket_id}", 404)


class TicketNotRefundableError(AppError):
    def __init__(self, ticket_id: str, status: str) -> None:
        super().__init__(4006, f"Ticket {ticket_id} in status {status} cannot be refunded", 422)


class RefundWindowClosedError(AppError):
    def __init__(self, ticket_id: str, draw_id: int) -> None:
        super().__init__(
            4008, f"Ticket {ticket_id} cannot be refunded: draw {draw_id} has passed cutoff", 422
        )


class InvalidCombinationError(AppError):
    def __init__(self, reason: str) -> None:
        super().__init__(4007, reason, 400)


# --- 5xxx: Bet limits ---

class LimitExceededError(AppError):
    def __init__(self, combination: str, bet_type: str, remaining: int) -> None:
        super().__init__(
            5001,
            f"Bet limit exceeded for {combination} ({bet_type}): "
            f"{remaining} centavos remaining",
            422,
        )


class BetLimitNotConfiguredError(AppError):
    def __init__(self, bet_type: str) -> None:
        super().__init__(5002, f"Bet limit not configured for {bet_type}", 404)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class TransientConflictError(AppError):
    def __init__(self) -> None:
        super().__init__(9003, "Store is busy, please retry the purchase", 503)
