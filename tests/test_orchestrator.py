"""Integration tests for the payment orchestrator."""

import httpx
import pytest

from app.engine.errors import (
    ConfigError,
    GatewayUnreachable,
    MerchantValidationFailed,
    OrderCreationFailed,
    PaymentCreationFailed,
    UnparseableResponse,
    ValidationError,
)
from app.models.requests import AppPaymentRequest, CardPaymentRequest, MerchantValidationRequest

ORDER = {"id": "order_abc", "entity": "order", "amount": 1000, "currency": "INR", "status": "created"}
AUTH_HTML = '<html><head><meta http-equiv="refresh" content="0;url="https://api.x/payments/pay_2/authenticate"></head></html>'


@pytest.fixture
def card_request(card_body):
    return CardPaymentRequest.model_validate(card_body)


class TestCardPayment:
    @pytest.mark.asyncio
    async def test_synchronous_capture(self, orchestrator, fake_gateway, card_request):
        fake_gateway.queue_json("/orders", ORDER)
        fake_gateway.queue_json("/payments/create/json", {"razorpay_payment_id": "pay_1", "status": "captured"})

        result = await orchestrator.process_card_payment(card_request)

        assert result["status"] == "captured"
        assert result["razorpay_payment_id"] == "pay_1"
        assert result["order"]["id"] == "order_abc"

    @pytest.mark.asyncio
    async def test_html_step_up_redirect(self, orchestrator, fake_gateway, card_request):
        fake_gateway.queue_json("/orders", ORDER)
        fake_gateway.queue_html("/payments/create/json", AUTH_HTML)

        result = await orchestrator.process_card_payment(card_request)

        assert result == {
            "id": "pay_2",
            "status": "authorized",
            "order_id": "order_abc",
            "authentication": {"authentication_url": "https://api.x/payments/pay_2/authenticate"},
            "requires_3ds": True,
        }

    @pytest.mark.asyncio
    async def test_json_step_up_redirect_with_error_status(self, orchestrator, fake_gateway, card_request):
        fake_gateway.queue_json("/orders", ORDER)
        fake_gateway.queue_json(
            "/payments/create/json",
            {"razorpay_payment_id": "pay_3", "next": [{"action": "redirect", "url": "https://x/y"}]},
            status_code=400,
        )

        result = await orchestrator.process_card_payment(card_request)

        assert result["id"] == "pay_3"
        assert result["authentication"]["authentication_url"] == "https://x/y"
        assert result["requires_3ds"] is True

    @pytest.mark.asyncio
    async def test_payment_carries_order_and_four_digit_year(self, orchestrator, fake_gateway, card_request):
        fake_gateway.queue_json("/orders", ORDER)
        fake_gateway.queue_json("/payments/create/json", {"status": "captured"})

        await orchestrator.process_card_payment(card_request)

        order_sent = fake_gateway.sent("/orders")[0]
        assert order_sent["amount"] == 1000
        assert order_sent["currency"] == "INR"
        assert order_sent["payment_capture"] == 1
        assert order_sent["receipt"].startswith("s2s_")
        assert order_sent["notes"] == {"integration": "s2s_card"}

        payment_sent = fake_gateway.sent("/payments/create/json")[0]
        assert payment_sent["order_id"] == "order_abc"
        assert payment_sent["amount"] == order_sent["amount"]
        assert payment_sent["currency"] == order_sent["currency"]
        assert payment_sent["card"]["expiry_year"] == "2027"
        for absent in ("authentication", "browser", "device_fingerprint", "ip", "referer", "user_agent"):
            assert absent not in payment_sent

    @pytest.mark.asyncio
    async def test_optional_metadata_forwarded_when_supplied(self, orchestrator, fake_gateway, card_body):
        card_body.update({
            "authentication": {"authentication_channel": "browser"},
            "browser": {"java_enabled": False, "screen_width": 1920},
            "device_fingerprint": {"shield_session_id": "sh_1"},
            "ip": "203.0.113.7",
            "user_agent": "Mozilla/5.0",
        })
        fake_gateway.queue_json("/orders", ORDER)
        fake_gateway.queue_json("/payments/create/json", {"status": "captured"})

        await orchestrator.process_card_payment(CardPaymentRequest.model_validate(card_body))

        payment_sent = fake_gateway.sent("/payments/create/json")[0]
        assert payment_sent["authentication"] == {"authentication_channel": "browser"}
        assert payment_sent["browser"]["screen_width"] == 1920
        assert payment_sent["device_fingerprint"] == {"shield_session_id": "sh_1"}
        assert payment_sent["ip"] == "203.0.113.7"
        assert payment_sent["user_agent"] == "Mozilla/5.0"
        assert "referer" not in payment_sent

    @pytest.mark.asyncio
    async def test_missing_card_makes_no_gateway_call(self, orchestrator, fake_gateway, card_body):
        del card_body["card"]
        with pytest.raises(ValidationError) as exc_info:
            await orchestrator.process_card_payment(CardPaymentRequest.model_validate(card_body))

        assert "card" in exc_info.value.message
        assert fake_gateway.requests == []

    @pytest.mark.asyncio
    async def test_unconfigured_region_makes_no_gateway_call(self, orchestrator, fake_gateway, card_body):
        card_body["country"] = "FR"
        with pytest.raises(ConfigError):
            await orchestrator.process_card_payment(CardPaymentRequest.model_validate(card_body))
        assert fake_gateway.requests == []

    @pytest.mark.asyncio
    async def test_order_failure_aborts_before_payment(self, orchestrator, fake_gateway, card_request):
        error = {"error": {"code": "BAD_REQUEST_ERROR", "description": "Authentication failed"}}
        fake_gateway.queue_json("/orders", error, status_code=401)

        with pytest.raises(OrderCreationFailed) as exc_info:
            await orchestrator.process_card_payment(card_request)

        assert exc_info.value.status_code == 401
        assert exc_info.value.to_body() == error
        assert fake_gateway.sent("/payments/create/json") == []

    @pytest.mark.asyncio
    async def test_order_without_id_aborts(self, orchestrator, fake_gateway, card_request):
        fake_gateway.queue_json("/orders", {"entity": "order"})

        with pytest.raises(OrderCreationFailed) as exc_info:
            await orchestrator.process_card_payment(card_request)

        assert exc_info.value.status_code == 502
        assert fake_gateway.sent("/payments/create/json") == []

    @pytest.mark.asyncio
    async def test_payment_rejection_passed_through(self, orchestrator, fake_gateway, card_request):
        error = {"error": {"code": "BAD_REQUEST_ERROR", "description": "Your payment has been declined"}}
        fake_gateway.queue_json("/orders", ORDER)
        fake_gateway.queue_json("/payments/create/json", error, status_code=400)

        with pytest.raises(PaymentCreationFailed) as exc_info:
            await orchestrator.process_card_payment(card_request)

        assert exc_info.value.status_code == 400
        assert exc_info.value.to_body() == error

    @pytest.mark.asyncio
    async def test_unparseable_payment_response(self, orchestrator, fake_gateway, card_request):
        fake_gateway.queue_json("/orders", ORDER)
        fake_gateway.queue_html("/payments/create/json", "<html>" + "z" * 1000 + "</html>", status_code=502)

        with pytest.raises(UnparseableResponse) as exc_info:
            await orchestrator.process_card_payment(card_request)

        error = exc_info.value
        assert error.status_code == 500
        assert error.gateway_status == 502
        assert len(error.details) <= 500
        assert "authentication URL" in error.message

    @pytest.mark.asyncio
    async def test_gateway_unreachable(self, orchestrator, fake_gateway, card_request):
        fake_gateway.queue("/orders", httpx.ConnectTimeout("timed out"))
        with pytest.raises(GatewayUnreachable):
            await orchestrator.process_card_payment(card_request)


class TestAppPayment:
    @pytest.mark.asyncio
    async def test_hosted_page_redirect(self, orchestrator, fake_gateway):
        fake_gateway.queue_json("/orders", {**ORDER, "currency": "MYR"})
        fake_gateway.queue_json(
            "/payments/create/json",
            {"razorpay_payment_id": "pay_ap1", "next": [{"action": "redirect", "url": "https://api.x/applepay"}]},
        )

        result = await orchestrator.process_app_payment(
            AppPaymentRequest.model_validate({"amount": 1000, "currency": "MYR", "region": "MY"})
        )

        assert result == {
            "id": "pay_ap1",
            "status": "created",
            "order_id": "order_abc",
            "apple_pay_url": "https://api.x/applepay",
            "requires_apple_pay": True,
            "message": "Redirect user to apple_pay_url to complete payment",
        }

    @pytest.mark.asyncio
    async def test_placeholders_only_when_absent(self, orchestrator, fake_gateway):
        fake_gateway.queue_json("/orders", ORDER)
        fake_gateway.queue_json("/payments/create/json", {"status": "captured"})

        await orchestrator.process_app_payment(
            AppPaymentRequest.model_validate({"amount": 1000, "currency": "MYR", "region": "MY"})
        )

        sent = fake_gateway.sent("/payments/create/json")[0]
        assert sent["method"] == "card"
        assert sent["app"] == {"name": "apple_pay"}
        assert sent["contact"] == "+60123456789"
        assert sent["email"] == "applepay@example.com"
        assert "card" not in sent
        assert fake_gateway.sent("/orders")[0]["notes"] == {"integration": "s2s_applepay"}

    @pytest.mark.asyncio
    async def test_caller_values_never_overwritten(self, orchestrator, fake_gateway):
        fake_gateway.queue_json("/orders", ORDER)
        fake_gateway.queue_json("/payments/create/json", {"status": "captured"})

        await orchestrator.process_app_payment(AppPaymentRequest.model_validate({
            "amount": 1000, "currency": "MYR", "region": "MY", "contact": "", "email": "me@example.com",
        }))

        sent = fake_gateway.sent("/payments/create/json")[0]
        assert sent["contact"] == ""
        assert sent["email"] == "me@example.com"

    @pytest.mark.asyncio
    async def test_completed_merges_order(self, orchestrator, fake_gateway):
        fake_gateway.queue_json("/orders", ORDER)
        fake_gateway.queue_json("/payments/create/json", {"razorpay_payment_id": "pay_ap2", "status": "authorized"})

        result = await orchestrator.process_app_payment(
            AppPaymentRequest.model_validate({"amount": 1000, "currency": "MYR", "region": "MY"})
        )

        assert result["status"] == "authorized"
        assert result["order"] == ORDER

    @pytest.mark.asyncio
    async def test_unparseable_names_apple_pay(self, orchestrator, fake_gateway):
        fake_gateway.queue_json("/orders", ORDER)
        fake_gateway.queue_html("/payments/create/json", "<html>no redirect</html>")

        with pytest.raises(UnparseableResponse) as exc_info:
            await orchestrator.process_app_payment(
                AppPaymentRequest.model_validate({"amount": 1000, "currency": "MYR", "region": "MY"})
            )
        assert "Apple Pay URL" in exc_info.value.message


class TestMerchantValidation:
    BODY = {
        "validationURL": "https://apple-pay-gateway.apple.com/paymentservices/startSession",
        "domain": "shop.example.com",
        "displayName": "Example Shop",
        "amount": 1000,
        "currency": "MYR",
    }

    @pytest.mark.asyncio
    async def test_session_passed_through(self, orchestrator, fake_gateway):
        session = {"merchantSessionIdentifier": "SSH1", "signature": "abc", "epochTimestamp": 1}
        fake_gateway.queue_json("/payments/create/ajax", {"data": {"session_data": session}})

        result = await orchestrator.validate_merchant_session(
            MerchantValidationRequest.model_validate(self.BODY), default_region="MY",
        )

        assert result == session
        sent = fake_gateway.sent("/payments/create/ajax")[0]
        assert sent["merchant_validation_url"] == self.BODY["validationURL"]
        assert sent["initiative_context_url"] == "shop.example.com"
        assert sent["app"] == {"name": "apple_pay"}
        assert fake_gateway.sent("/orders") == []

    @pytest.mark.asyncio
    async def test_missing_session(self, orchestrator, fake_gateway):
        fake_gateway.queue_json("/payments/create/ajax", {"data": {}})
        with pytest.raises(MerchantValidationFailed) as exc_info:
            await orchestrator.validate_merchant_session(
                MerchantValidationRequest.model_validate(self.BODY), default_region="MY",
            )
        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.code == "VALIDATION_FAILED"

    @pytest.mark.asyncio
    async def test_gateway_rejection(self, orchestrator, fake_gateway):
        fake_gateway.queue_json(
            "/payments/create/ajax",
            {"error": {"code": "BAD_REQUEST_ERROR", "description": "Domain not registered"}},
            status_code=400,
        )
        with pytest.raises(MerchantValidationFailed) as exc_info:
            await orchestrator.validate_merchant_session(
                MerchantValidationRequest.model_validate(self.BODY), default_region="MY",
            )
        assert exc_info.value.message == "Domain not registered"

    @pytest.mark.asyncio
    async def test_missing_fields(self, orchestrator, fake_gateway):
        with pytest.raises(ValidationError) as exc_info:
            await orchestrator.validate_merchant_session(
                MerchantValidationRequest.model_validate({"amount": 1000}), default_region="MY",
            )
        assert "validationURL" in exc_info.value.message
        assert fake_gateway.requests == []
