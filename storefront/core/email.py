"""
TREE Uniformes - Email Service
Correos transaccionales de pedidos y cotizaciones
"""
import smtplib
import ssl
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from html import escape
from typing import Optional
import logging

import httpx

from .config import settings

logger = logging.getLogger(__name__)

STORE_NAME = "TREE Uniformes & Kodiak Industrial"


def _e(value) -> str:
    return escape(str(value)) if value not in (None, "") else ""


def _money(value) -> str:
    return f"{settings.CURRENCY_SYMBOL}{value or '0.00'}"


BASE_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background: #1F4287; color: white; padding: 20px; text-align: center; }
    .header h1 { margin: 0; font-size: 24px; }
    .content { background: #f9f9f9; padding: 20px; }
    .order-info { background: white; padding: 15px; margin: 20px 0; border-radius: 5px; }
    .order-info h2 { color: #1F4287; margin-top: 0; }
    .items-table { width: 100%; border-collapse: collapse; margin: 20px 0; }
    .items-table th { background: #1F4287; color: white; padding: 10px; text-align: left; }
    .items-table td { padding: 10px; border-bottom: 1px solid #ddd; }
    .total-row { font-weight: bold; font-size: 18px; }
    .admin-banner { background: #fef3c7; border: 1px solid #f59e0b; padding: 15px; border-radius: 8px; margin-bottom: 20px; }
    .footer { text-align: center; padding: 20px; color: #666; font-size: 12px; }
"""


def _items_rows(items: list) -> str:
    rows = []
    for item in items:
        sku = f"<br><small>SKU: {_e(item.get('sku'))}</small>" if item.get("sku") else ""
        rows.append(f"""
            <tr>
              <td><strong>{_e(item.get('product_name'))}</strong>{sku}</td>
              <td>{_e(item.get('size'))}</td>
              <td>{_e(item.get('color'))}</td>
              <td>{_e(item.get('quantity'))}</td>
              <td>{_money(item.get('total_price'))}</td>
            </tr>""")
    return "".join(rows)


def _address_html(address: Optional[dict]) -> str:
    if not address:
        return "<p>Sin direccion de envio</p>"
    return f"""
        <p>
          {_e(address.get('street'))}<br>
          {_e(address.get('city'))}, {_e(address.get('state'))} {_e(address.get('zip_code') or address.get('zipCode'))}<br>
          {_e(address.get('country') or 'México')}
        </p>"""


def order_confirmation_html(order: dict, admin_banner: str = "") -> str:
    """HTML del pedido (cliente y admin comparten la plantilla)"""
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <style>{BASE_STYLE}</style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>¡Pedido Confirmado!</h1>
      <p>{STORE_NAME}</p>
    </div>
    <div class="content">
      {admin_banner}
      <p>Hola <strong>{_e(order.get('customer_name'))}</strong>,</p>
      <p>Gracias por tu pedido. Hemos recibido tu orden y la estamos procesando.</p>

      <div class="order-info">
        <h2>Detalles del Pedido</h2>
        <p><strong>Número de Pedido:</strong> {_e(order.get('order_number'))}</p>
        <p><strong>Fecha:</strong> {_e((order.get('created_at') or '')[:10])}</p>
        <p><strong>Método de Pago:</strong> {_e(order.get('payment_method') or 'Por definir')}</p>
      </div>

      <div class="order-info">
        <h2>Productos</h2>
        <table class="items-table">
          <thead>
            <tr><th>Producto</th><th>Talla</th><th>Color</th><th>Cantidad</th><th>Importe</th></tr>
          </thead>
          <tbody>
            {_items_rows(order.get('items') or [])}
            <tr>
              <td colspan="4" style="text-align: right;"><strong>Subtotal:</strong></td>
              <td>{_money(order.get('subtotal'))}</td>
            </tr>
            <tr>
              <td colspan="4" style="text-align: right;"><strong>Envío:</strong></td>
              <td>{_money(order.get('shipping'))}</td>
            </tr>
            <tr>
              <td colspan="4" style="text-align: right;"><strong>IVA:</strong></td>
              <td>{_money(order.get('tax'))}</td>
            </tr>
            <tr class="total-row">
              <td colspan="4" style="text-align: right;">Total:</td>
              <td>{_money(order.get('total'))}</td>
            </tr>
          </tbody>
        </table>
      </div>

      <div class="order-info">
        <h2>Dirección de Envío</h2>
        {_address_html(order.get('shipping_address'))}
      </div>
    </div>
    <div class="footer">
      <p>{STORE_NAME}</p>
      <p><a href="{settings.APP_URL}">{settings.APP_URL}</a></p>
    </div>
  </div>
</body>
</html>
"""


def quote_request_html(quote: dict, admin_banner: str = "") -> str:
    company = (
        f"<p><strong>Empresa:</strong> {_e(quote.get('customer_company'))}</p>"
        if quote.get("customer_company") else ""
    )
    notes = (
        f"""<div class="order-info"><h2>Notas</h2><p>{_e(quote.get('notes'))}</p></div>"""
        if quote.get("notes") else ""
    )
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <style>{BASE_STYLE}</style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>Solicitud de Presupuesto</h1>
      <p>{STORE_NAME}</p>
    </div>
    <div class="content">
      {admin_banner}
      <p>Hola <strong>{_e(quote.get('customer_name'))}</strong>,</p>
      <p>Recibimos tu solicitud de presupuesto. Un asesor se pondrá en contacto contigo.</p>

      <div class="order-info">
        <h2>Detalles</h2>
        <p><strong>Número de Presupuesto:</strong> {_e(quote.get('quote_number'))}</p>
        {company}
        <p><strong>Fecha:</strong> {_e((quote.get('created_at') or '')[:10])}</p>
        <p><strong>Válido hasta:</strong> {_e((quote.get('valid_until') or 'No definido')[:10])}</p>
      </div>

      <div class="order-info">
        <h2>Productos</h2>
        <table class="items-table">
          <thead>
            <tr><th>Producto</th><th>Talla</th><th>Color</th><th>Cantidad</th><th>Importe</th></tr>
          </thead>
          <tbody>
            {_items_rows(quote.get('items') or [])}
            <tr class="total-row">
              <td colspan="4" style="text-align: right;">Total estimado:</td>
              <td>{_money(quote.get('total'))}</td>
            </tr>
          </tbody>
        </table>
      </div>
      {notes}
    </div>
    <div class="footer">
      <p>Este presupuesto es una estimación y no constituye un pedido.</p>
      <p>{STORE_NAME}</p>
    </div>
  </div>
</body>
</html>
"""


def _admin_banner(title: str, doc: dict) -> str:
    return f"""<div class="admin-banner">
        <strong>{_e(title)}</strong><br>
        Cliente: {_e(doc.get('customer_name'))} &lt;{_e(doc.get('customer_email'))}&gt;
      </div>"""


class EmailService:
    """Envio de correos via Resend (HTTP) o SMTP"""

    def __init__(self):
        self.resend_api_key = settings.RESEND_API_KEY
        self.resend_api_url = settings.RESEND_API_URL
        self.timeout = settings.EMAIL_TIMEOUT_SECONDS
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.user = settings.SMTP_USER
        self.password = settings.SMTP_PASSWORD
        self.use_tls = settings.SMTP_TLS
        self.use_ssl = settings.SMTP_SSL
        self.from_email = settings.EMAIL_FROM
        self.from_name = settings.EMAIL_FROM_NAME
        self.admin_email = settings.ADMIN_NOTIFICATION_EMAIL

    @property
    def provider(self) -> Optional[str]:
        if self.resend_api_key:
            return "resend"
        if self.user and self.password:
            return "smtp"
        return None

    def is_configured(self) -> bool:
        """Verifica si hay algun proveedor de correo configurado"""
        return self.provider is not None

    def _send_resend(self, to_email: str, subject: str, html_content: str, text_content: Optional[str]):
        payload = {
            "from": f"{self.from_name} <{self.from_email}>",
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }
        if text_content:
            payload["text"] = text_content

        response = httpx.post(
            self.resend_api_url,
            json=payload,
            headers={"Authorization": f"Bearer {self.resend_api_key}"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def _send_smtp(self, to_email: str, subject: str, html_content: str, text_content: Optional[str]):
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = f"{self.from_name} <{self.from_email}>"
        message["To"] = to_email

        if text_content:
            message.attach(MIMEText(text_content, "plain", "utf-8"))
        message.attach(MIMEText(html_content, "html", "utf-8"))

        if self.use_ssl:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=self.timeout) as server:
                server.login(self.user, self.password)
                server.sendmail(self.from_email, to_email, message.as_string())
        else:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                server.login(self.user, self.password)
                server.sendmail(self.from_email, to_email, message.as_string())

    def send_email(
        self,
        to_email: Optional[str],
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> bool:
        """
        Envia un correo

        Returns:
            True si se envio, False en cualquier otro caso (nunca lanza)
        """
        if not to_email:
            logger.warning(f"Correo sin destinatario, se omite: {subject}")
            return False

        provider = self.provider
        if provider is None:
            logger.warning("Email service not configured. Skipping email send.")
            return False

        try:
            if provider == "resend":
                result = self._send_resend(to_email, subject, html_content, text_content)
                logger.info(f"Email sent to {to_email} via Resend: {result}")
            else:
                self._send_smtp(to_email, subject, html_content, text_content)
                logger.info(f"Email sent to {to_email} via SMTP")
            return True
        except (httpx.HTTPError, smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {str(e)}")
            return False

    # Pedidos

    def send_order_confirmation(self, order: dict) -> bool:
        """Confirmacion de pedido al cliente"""
        subject = f"Confirmación de Pedido {order.get('order_number')} - TREE Uniformes"
        text = (
            f"Gracias por tu pedido {order.get('order_number')}.\n"
            f"Total: {_money(order.get('total'))}\n"
        )
        return self.send_email(order.get("customer_email"), subject, order_confirmation_html(order), text)

    def send_order_notification_to_admin(self, order: dict) -> bool:
        """Aviso de pedido nuevo al administrador"""
        subject = f"Nuevo Pedido {order.get('order_number')} - TREE Uniformes"
        html_content = order_confirmation_html(order, _admin_banner("Nuevo pedido recibido", order))
        return self.send_email(self.admin_email, subject, html_content)

    def notify_order_created(self, order: dict):
        """Ambos correos del pedido; se ejecuta como background task"""
        self.send_order_confirmation(order)
        self.send_order_notification_to_admin(order)

    # Cotizaciones

    def send_quote_confirmation(self, quote: dict) -> bool:
        """Confirmacion de solicitud de presupuesto al cliente"""
        subject = f"Solicitud de Presupuesto {quote.get('quote_number')} - TREE Uniformes"
        text = (
            f"Recibimos tu solicitud {quote.get('quote_number')}.\n"
            f"Total estimado: {_money(quote.get('total'))}\n"
        )
        return self.send_email(quote.get("customer_email"), subject, quote_request_html(quote), text)

    def send_quote_notification_to_admin(self, quote: dict) -> bool:
        """Aviso de solicitud de presupuesto al administrador"""
        subject = f"Nueva Solicitud de Presupuesto {quote.get('quote_number')} - TREE Uniformes"
        html_content = quote_request_html(quote, _admin_banner("Nueva solicitud de presupuesto", quote))
        return self.send_email(self.admin_email, subject, html_content)

    def notify_quote_created(self, quote: dict):
        self.send_quote_confirmation(quote)
        self.send_quote_notification_to_admin(quote)


# Instancia global del servicio de correo
email_service = EmailService()
