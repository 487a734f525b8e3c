# [ Imports ]
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas
from reportlab.lib.colors import HexColor
from reportlab.platypus import Paragraph
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.enums import TA_LEFT
from datetime import datetime
from io import BytesIO
from typing import Optional
from xml.sax.saxutils import escape
import logging

from storefront.core.config import settings

logger = logging.getLogger(__name__)


# ==========================================
# CONFIGURACION DE DISENO
# ==========================================
class DocumentDesign:
    PRIMARY = '#1F4287'      # Azul TREE (banda del encabezado)
    ACCENT = '#F28C28'       # Naranja Kodiak (lineas)
    DARK = '#343a40'
    LIGHT = '#ffffff'
    GRAY = '#6c757d'
    ROW_ALT = '#F3F5F9'

    FONT_BOLD = "Helvetica-Bold"
    FONT_REGULAR = "Helvetica"
    FONT_ITALIC = "Helvetica-Oblique"

    MARGIN_LEFT = 2.0*cm
    MARGIN_RIGHT = 2.0*cm
    MARGIN_TOP = 1.5*cm
    MARGIN_BOTTOM = 2.0*cm

    HEADER_HEIGHT = 2.6*cm
    ROW_HEIGHT = 0.75*cm

    SPACE_L = 1.0*cm
    SPACE_M = 0.6*cm
    SPACE_S = 0.35*cm


# Columnas de la tabla de partidas: (titulo, ancho, alineacion)
ITEM_COLUMNS = [
    ("Producto", 6.4*cm, "left"),
    ("Talla", 1.8*cm, "left"),
    ("Color", 2.6*cm, "left"),
    ("Cant.", 1.4*cm, "right"),
    ("P. Unit.", 2.2*cm, "right"),
    ("Importe", 2.6*cm, "right"),
]


def money(value) -> str:
    if value in (None, ""):
        value = "0"
    return f"{settings.CURRENCY_SYMBOL}{float(value):,.2f}"


def _fmt_date(value: Optional[str]) -> str:
    if not value:
        return "-"
    try:
        return datetime.fromisoformat(value).strftime("%d/%m/%Y")
    except ValueError:
        return value


# ==========================================
# FUNCIONES DE DIBUJO
# ==========================================

def draw_header(c, title: str, number: str, y_position):
    """Banda de color con la marca y el folio del documento"""
    width = A4[0]
    band_y = y_position - DocumentDesign.HEADER_HEIGHT

    c.setFillColor(HexColor(DocumentDesign.PRIMARY))
    c.rect(0, band_y, width, DocumentDesign.HEADER_HEIGHT + DocumentDesign.MARGIN_TOP, stroke=0, fill=1)

    c.setFillColor(HexColor(DocumentDesign.LIGHT))
    c.setFont(DocumentDesign.FONT_BOLD, 18)
    c.drawString(DocumentDesign.MARGIN_LEFT, band_y + 1.4*cm, "TREE Uniformes")
    c.setFont(DocumentDesign.FONT_REGULAR, 10)
    c.drawString(DocumentDesign.MARGIN_LEFT, band_y + 0.8*cm, "& Kodiak Industrial")

    c.setFont(DocumentDesign.FONT_BOLD, 16)
    c.drawRightString(width - DocumentDesign.MARGIN_RIGHT, band_y + 1.4*cm, title)
    c.setFont(DocumentDesign.FONT_REGULAR, 11)
    c.drawRightString(width - DocumentDesign.MARGIN_RIGHT, band_y + 0.8*cm, number)

    c.setStrokeColor(HexColor(DocumentDesign.ACCENT))
    c.setLineWidth(3)
    c.line(0, band_y, width, band_y)

    return band_y - DocumentDesign.SPACE_L


def draw_info_block(c, rows, y_position):
    """Pares etiqueta / valor del cliente y del documento"""
    c.setFillColor(HexColor(DocumentDesign.DARK))
    for label, value in rows:
        c.setFont(DocumentDesign.FONT_BOLD, 10)
        c.drawString(DocumentDesign.MARGIN_LEFT, y_position, f"{label}:")
        c.setFont(DocumentDesign.FONT_REGULAR, 10)
        c.drawString(DocumentDesign.MARGIN_LEFT + 4.0*cm, y_position, str(value or "-"))
        y_position -= DocumentDesign.SPACE_M
    return y_position - DocumentDesign.SPACE_S


def draw_table_header(c, y_position):
    width = A4[0] - DocumentDesign.MARGIN_LEFT - DocumentDesign.MARGIN_RIGHT
    c.setFillColor(HexColor(DocumentDesign.PRIMARY))
    c.rect(DocumentDesign.MARGIN_LEFT, y_position - 0.2*cm, width, DocumentDesign.ROW_HEIGHT, stroke=0, fill=1)

    c.setFillColor(HexColor(DocumentDesign.LIGHT))
    c.setFont(DocumentDesign.FONT_BOLD, 9)
    _draw_cells(c, [col[0] for col in ITEM_COLUMNS], y_position)
    return y_position - DocumentDesign.ROW_HEIGHT


def _draw_cells(c, values, y_position):
    x = DocumentDesign.MARGIN_LEFT + 0.2*cm
    for value, (_, col_width, align) in zip(values, ITEM_COLUMNS):
        text = str(value)
        max_width = col_width - 0.3*cm
        while c.stringWidth(text, c._fontname, c._fontsize) > max_width and len(text) > 3:
            text = text[:-4] + "..."
        if align == "right":
            c.drawRightString(x + col_width - 0.4*cm, y_position, text)
        else:
            c.drawString(x, y_position, text)
        x += col_width


def draw_items(c, items, y_position, page_header):
    """Tabla de partidas; abre pagina nueva cuando no cabe la siguiente fila"""
    y_position = draw_table_header(c, y_position)

    for index, item in enumerate(items):
        if y_position < DocumentDesign.MARGIN_BOTTOM + 4.0*cm:
            draw_page_number(c)
            c.showPage()
            y_position = page_header(c)
            y_position = draw_table_header(c, y_position)

        if index % 2:
            width = A4[0] - DocumentDesign.MARGIN_LEFT - DocumentDesign.MARGIN_RIGHT
            c.setFillColor(HexColor(DocumentDesign.ROW_ALT))
            c.rect(DocumentDesign.MARGIN_LEFT, y_position - 0.2*cm, width, DocumentDesign.ROW_HEIGHT, stroke=0, fill=1)

        c.setFillColor(HexColor(DocumentDesign.DARK))
        c.setFont(DocumentDesign.FONT_REGULAR, 9)
        _draw_cells(c, [
            item.get("product_name") or "-",
            item.get("size") or "-",
            item.get("color") or "-",
            item.get("quantity", 0),
            money(item.get("unit_price")),
            money(item.get("total_price")),
        ], y_position)
        y_position -= DocumentDesign.ROW_HEIGHT

    return y_position - DocumentDesign.SPACE_S


def draw_totals(c, rows, y_position):
    """Subtotal, envio, IVA y total alineados a la derecha"""
    right = A4[0] - DocumentDesign.MARGIN_RIGHT
    c.setStrokeColor(HexColor(DocumentDesign.ACCENT))
    c.setLineWidth(1)
    c.line(right - 7.0*cm, y_position + 0.3*cm, right, y_position + 0.3*cm)

    for index, (label, value) in enumerate(rows):
        last = index == len(rows) - 1
        font = DocumentDesign.FONT_BOLD if last else DocumentDesign.FONT_REGULAR
        c.setFont(font, 12 if last else 10)
        c.setFillColor(HexColor(DocumentDesign.PRIMARY if last else DocumentDesign.DARK))
        c.drawRightString(right - 3.2*cm, y_position, label)
        c.drawRightString(right, y_position, money(value))
        y_position -= DocumentDesign.SPACE_M
    return y_position - DocumentDesign.SPACE_S


def draw_notes(c, notes: Optional[str], y_position):
    if not notes:
        return y_position

    styles = getSampleStyleSheet()
    style = styles['Normal']
    style.alignment = TA_LEFT
    style.fontName = DocumentDesign.FONT_ITALIC
    style.fontSize = 9
    style.leading = 11
    style.textColor = HexColor(DocumentDesign.GRAY)

    width = A4[0] - DocumentDesign.MARGIN_LEFT - DocumentDesign.MARGIN_RIGHT
    p = Paragraph(f"Notas: {escape(notes)}", style)
    w, h = p.wrap(width, 10*cm)
    p.drawOn(c, DocumentDesign.MARGIN_LEFT, y_position - h)
    return y_position - h - DocumentDesign.SPACE_M


def draw_page_number(c):
    c.setFont(DocumentDesign.FONT_REGULAR, 8)
    c.setFillColor(HexColor(DocumentDesign.GRAY))
    c.drawCentredString(A4[0] / 2, DocumentDesign.MARGIN_BOTTOM / 2, f"Pagina {c.getPageNumber()}")


def draw_footer_text(c, text: str):
    c.setFont(DocumentDesign.FONT_ITALIC, 8)
    c.setFillColor(HexColor(DocumentDesign.GRAY))
    c.drawCentredString(A4[0] / 2, DocumentDesign.MARGIN_BOTTOM / 2 + 0.5*cm, text)


# ==========================================
# GENERADORES
# ==========================================

def _render(title: str, number: str, info_rows, items, total_rows, notes, footer_text) -> bytes:
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"{title} {number}")

    def page_header(canvas_):
        return draw_header(canvas_, title, number, A4[1])

    try:
        y_pos = page_header(c)
        y_pos = draw_info_block(c, info_rows, y_pos)
        y_pos = draw_items(c, items, y_pos, page_header)
        y_pos = draw_totals(c, total_rows, y_pos)
        draw_notes(c, notes, y_pos)
        draw_footer_text(c, footer_text)
        draw_page_number(c)

        c.showPage()
        c.save()
        return buffer.getvalue()
    finally:
        buffer.close()


async def generate_order_pdf(order: dict) -> bytes:
    """PDF del pedido a partir de Order.to_dict()"""
    address = order.get("shipping_address") or {}
    address_text = ", ".join(
        str(address[k]) for k in ("street", "city", "state", "zip_code") if address.get(k)
    )

    pdf_bytes = _render(
        title="PEDIDO",
        number=order.get("order_number", ""),
        info_rows=[
            ("Cliente", order.get("customer_name")),
            ("Email", order.get("customer_email")),
            ("Telefono", order.get("customer_phone")),
            ("Direccion", address_text),
            ("Fecha", _fmt_date(order.get("created_at"))),
            ("Status", order.get("status_label") or order.get("status")),
        ],
        items=order.get("items", []),
        total_rows=[
            ("Subtotal", order.get("subtotal")),
            ("Envio", order.get("shipping")),
            ("IVA", order.get("tax")),
            ("Total", order.get("total")),
        ],
        notes=order.get("notes"),
        footer_text="Gracias por su compra.",
    )
    logger.info(f"PDF de pedido {order.get('order_number')} generado ({len(pdf_bytes)} bytes)")
    return pdf_bytes


async def generate_quote_pdf(quote: dict) -> bytes:
    """PDF de la cotizacion a partir de Quote.to_dict()"""
    pdf_bytes = _render(
        title="COTIZACION",
        number=quote.get("quote_number", ""),
        info_rows=[
            ("Cliente", quote.get("customer_name")),
            ("Empresa", quote.get("customer_company")),
            ("Email", quote.get("customer_email")),
            ("Fecha", _fmt_date(quote.get("created_at"))),
            ("Vigencia", _fmt_date(quote.get("valid_until"))),
            ("Status", quote.get("status_label") or quote.get("status")),
        ],
        items=quote.get("items", []),
        total_rows=[
            ("Subtotal", quote.get("subtotal")),
            ("IVA", quote.get("tax")),
            ("Total", quote.get("total")),
        ],
        notes=quote.get("notes"),
        footer_text="Precios sujetos a cambio sin previo aviso despues de la fecha de vigencia.",
    )
    logger.info(f"PDF de cotizacion {quote.get('quote_number')} generado ({len(pdf_bytes)} bytes)")
    return pdf_bytes
