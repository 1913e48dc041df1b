"""Unit tests for the supplier RFQ notification email."""

from unittest.mock import AsyncMock, patch

import pytest

from app.services.email.rfq_notification import (
    build_html,
    build_subject,
    build_text,
    send_rfq_notification,
)

from tests.helpers.mock_factories import make_mock_rfq

DASHBOARD = "http://localhost:3000/dashboard/rfqs"


class TestBuildBodies:
    def test_subject(self):
        rfq = make_mock_rfq(company="Acme Foods")
        assert build_subject("Vitamin C", rfq) == "New RFQ for Vitamin C from Acme Foods"

    def test_text_includes_details_and_optional_rows(self):
        rfq = make_mock_rfq(phone="+31 20 555 0100", quantity=None)
        text = build_text("Vitamin C", rfq, DASHBOARD)

        assert "Company: Buyer Co" in text
        assert "Phone: +31 20 555 0100" in text
        assert "Quantity" not in text
        assert rfq.message in text
        assert DASHBOARD in text

    def test_html_escapes_buyer_input(self):
        rfq = make_mock_rfq(company="<script>alert(1)</script>", message="a & b\nnext")
        html = build_html("Vitamin C", rfq, DASHBOARD)

        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "a &amp; b<br>next" in html


class TestSendRfqNotification:
    @pytest.mark.asyncio
    async def test_sends_with_buyer_reply_to(self, mock_external_services):
        rfq = make_mock_rfq(email="buyer@example.com")

        sent = await send_rfq_notification("owner@supplier.com", "Vitamin C", rfq)

        assert sent is True
        send = mock_external_services["postmark"].send
        send.assert_awaited_once()
        kwargs = send.call_args.kwargs
        assert kwargs["to"] == "owner@supplier.com"
        assert kwargs["reply_to"] == "buyer@example.com"
        assert kwargs["tag"] == "rfq-notification"

    @pytest.mark.asyncio
    async def test_skips_without_recipient(self, mock_external_services):
        sent = await send_rfq_notification(None, "Vitamin C", make_mock_rfq())

        assert sent is False
        mock_external_services["postmark"].send.assert_not_awaited()


class TestPostmarkService:
    @pytest.mark.asyncio
    async def test_disabled_without_api_key(self):
        from app.services.email.postmark import PostmarkService

        with patch("app.services.email.postmark.settings") as mock_settings:
            mock_settings.postmark_enabled = False
            sent = await PostmarkService().send("a@b.com", "s", "<p>h</p>", "t")
        assert sent is False

    @pytest.mark.asyncio
    async def test_http_error_returns_false(self):
        import httpx

        from app.services.email.postmark import PostmarkService

        with (
            patch("app.services.email.postmark.settings") as mock_settings,
            patch("app.services.email.postmark.httpx.AsyncClient") as mock_client_cls,
        ):
            mock_settings.postmark_enabled = True
            mock_settings.postmark_api_key = "key"
            mock_settings.postmark_from_email = "hello@pitchivo.com"
            client = AsyncMock()
            client.post = AsyncMock(side_effect=httpx.ConnectError("boom"))
            mock_client_cls.return_value.__aenter__.return_value = client

            sent = await PostmarkService().send("a@b.com", "s", "<p>h</p>", "t")
        assert sent is False

    def test_payload_includes_reply_to_and_tag(self):
        from app.services.email.postmark import PostmarkService

        payload = PostmarkService()._build_payload(
            "a@b.com", "s", "<p>h</p>", "t", reply_to="buyer@example.com", tag="rfq"
        )
        assert payload["ReplyTo"] == "buyer@example.com"
        assert payload["Tag"] == "rfq"
        assert payload["MessageStream"] == "outbound"
