"""Typed purchase rejections.

The coordinator returns one of these instead of raising, so callers can
branch on the variant. The HTTP layer converts them with to_app_error().
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from src.lt_common import errors


class PurchaseError(ABC):
    @abstractmethod
    def to_app_error(self) -> errors.AppError: ...


@dataclass(frozen=True)
class InvalidBet(PurchaseError):
    index: int
    reason: str

    def to_app_error(self) -> errors.AppError:
        return errors.InvalidBetError(self.index, self.reason)


@dataclass(frozen=True)
class EmptyBets(PurchaseError):
    def to_app_error(self) -> errors.AppError:
        return errors.EmptyBetsError()


@dataclass(frozen=True)
class TooManyBets(PurchaseError):
    maximum: int

    def to_app_error(self) -> errors.AppError:
        return errors.TooManyBetsError(self.maximum)


@dataclass(frozen=True)
class DrawNotFound(PurchaseError):
    draw_id: int

    def to_app_error(self) -> errors.AppError:
        return errors.DrawNotFoundError(self.draw_id)


@dataclass(frozen=True)
class DrawNotOpen(PurchaseError):
    draw_id: int

    def to_app_error(self) -> errors.AppError:
        return errors.DrawNotOpenError(self.draw_id)


@dataclass(frozen=True)
class CutoffPassed(PurchaseError):
    draw_id: int

    def to_app_error(self) -> errors.AppError:
        return errors.CutoffPassedError(self.draw_id)


@dataclass(frozen=True)
class DuplicateBet(PurchaseError):
    combination: str
    bet_type: str

    def to_app_error(self) -> errors.AppError:
        return errors.DuplicateBetError(self.combination, self.bet_type)


@dataclass(frozen=True)
class AccountNotFound(PurchaseError):
    user_id: int

    def to_app_error(self) -> errors.AppError:
        return errors.AccountNotFoundError(self.user_id)


@dataclass(frozen=True)
class InsufficientFunds(PurchaseError):
    required: int
    available: int

    def to_app_error(self) -> errors.AppError:
        return errors.InsufficientBalanceError(self.required, self.available)


@dataclass(frozen=True)
class LimitExceeded(PurchaseError):
    combination: str
    bet_type: str
    remaining: int

    def to_app_error(self) -> errors.AppError:
        return errors.LimitExceededError(self.combination, self.bet_type, self.remaining)
