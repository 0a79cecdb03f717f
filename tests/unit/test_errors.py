"""Tests for lt_common.errors and lt_common.response."""

import pytest

from src.lt_common.errors import (
    AppError,
    CutoffPassedError,
    DuplicateBetError,
    InsufficientBalanceError,
    InvalidBetError,
    InvalidWinningNumberError,
    LimitExceededError,
    TicketNotRefundableError,
    TransientConflictError,
)
from src.lt_common.response import ApiResponse, error_response, success_response
from src.lt_ticket.domain.errors import LimitExceeded, PurchaseError


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1001, message="test"), Exception)


class TestSpecificErrors:
    def test_insufficient_balance(self) -> None:
        err = InsufficientBalanceError(required=6500, available=3000)
        assert err.code == 2001
        assert err.http_status == 422
        assert "6500" in err.message
        assert "3000" in err.message

    def test_invalid_bet_is_one_based(self) -> None:
        err = InvalidBetError(0, "bad digits")
        assert err.code == 4001
        assert err.http_status == 400
        assert err.message == "Bet 1: bad digits"

    def test_duplicate_bet_is_conflict(self) -> None:
        err = DuplicateBetError("123", "standard")
        assert err.http_status == 409
        assert "123" in err.message

    def test_limit_exceeded_reports_remaining(self) -> None:
        err = LimitExceededError("123", "standard", 50_000)
        assert err.code == 5001
        assert "50000 centavos remaining" in err.message

    def test_winning_number_shown_verbatim(self) -> None:
        assert "'12'" in InvalidWinningNumberError("12").message

    def test_not_refundable_names_status(self) -> None:
        assert "won" in TicketNotRefundableError("T1", "won").message

    def test_transient_conflict_is_retryable_status(self) -> None:
        err = TransientConflictError()
        assert err.code == 9003
        assert err.http_status == 503

    @pytest.mark.parametrize(
        "err, low, high",
        [
            (InsufficientBalanceError(1, 0), 2000, 2999),
            (CutoffPassedError(1), 3000, 3999),
            (DuplicateBetError("1", "standard"), 4000, 4999),
            (LimitExceededError("1", "standard", 0), 5000, 5999),
        ],
    )
    def test_code_ranges(self, err, low, high) -> None:
        assert low <= err.code <= high


class TestApiResponse:
    def test_success_response(self) -> None:
        resp = success_response({"ticket_id": "T1"}, request_id="req_abc")
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"ticket_id": "T1"}
        assert resp.request_id == "req_abc"

    def test_error_response(self) -> None:
        resp = error_response(4004, "Duplicate bet")
        assert resp.code == 4004
        assert resp.data is None
        assert resp.request_id.startswith("req_")

    def test_timestamp_is_set(self) -> None:
        assert ApiResponse().timestamp


class TestPurchaseErrorBase:
    def test_base_cannot_be_instantiated(self) -> None:
        with pytest.raises(TypeError):
            PurchaseError()

    def test_variant_maps_to_app_error(self) -> None:
        err = LimitExceeded("123", "standard", 500).to_app_error()
        assert isinstance(err, LimitExceededError)
