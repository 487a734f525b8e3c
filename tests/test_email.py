import httpx

from storefront.core.email import EmailService, order_confirmation_html, quote_request_html

ORDER = {
    "order_number": "UL-2025-000001",
    "customer_name": "Ana <script>",
    "customer_email": "ana@example.com",
    "status": "pending",
    "subtotal": "300.00",
    "shipping": "50.00",
    "tax": "24.00",
    "total": "374.00",
    "shipping_address": {"street": "Av. Reforma 1", "city": "CDMX", "state": "CDMX", "zip_code": "06000"},
    "items": [{
        "product_name": "Camisa Industrial",
        "sku": "PRD-1",
        "size": "M",
        "color": "Azul",
        "quantity": 2,
        "unit_price": "150.00",
        "total_price": "300.00",
    }],
    "created_at": "2025-01-01T10:00:00",
}

QUOTE = {
    "quote_number": "COT-2025-000001",
    "customer_name": "Ana",
    "customer_email": "ana@example.com",
    "urgency": "urgent",
    "total": "300.00",
    "items": ORDER["items"],
    "valid_until": "2025-02-01T10:00:00",
}


def _unconfigured() -> EmailService:
    service = EmailService()
    service.resend_api_key = None
    service.user = None
    service.password = None
    return service


def test_order_template_escapes_values():
    html = order_confirmation_html(ORDER)
    assert "UL-2025-000001" in html
    assert "Camisa Industrial" in html
    assert "374.00" in html
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_quote_template_lists_items():
    html = quote_request_html(QUOTE)
    assert "COT-2025-000001" in html
    assert "Camisa Industrial" in html


def test_send_skipped_when_unconfigured():
    service = _unconfigured()
    assert service.provider is None
    assert service.send_order_confirmation(ORDER) is False


def test_send_without_recipient_is_skipped():
    service = _unconfigured()
    service.resend_api_key = "re_test"
    assert service.send_email(None, "Asunto", "<p>hola</p>") is False


def test_resend_failure_returns_false(monkeypatch):
    service = _unconfigured()
    service.resend_api_key = "re_test"

    def fail(*args, **kwargs):
        raise httpx.ConnectError("sin red")

    monkeypatch.setattr(httpx, "post", fail)
    assert service.send_order_confirmation(ORDER) is False


def test_resend_payload(monkeypatch):
    service = _unconfigured()
    service.resend_api_key = "re_test"
    sent = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        sent.update(url=url, json=json, headers=headers)
        return httpx.Response(200, json={"id": "email_1"}, request=httpx.Request("POST", url))

    monkeypatch.setattr(httpx, "post", fake_post)
    assert service.send_quote_confirmation(QUOTE) is True
    assert sent["json"]["to"] == ["ana@example.com"]
    assert "COT-2025-000001" in sent["json"]["subject"]
    assert sent["headers"]["Authorization"] == "Bearer re_test"
