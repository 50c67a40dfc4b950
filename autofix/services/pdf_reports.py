"""
PDF Report Service

Printable documents built with fpdf2:
- Management report (financial summary, stock summary, low-stock list)
- Budget quote for the customer

Both return the PDF as bytes; the caller decides whether to stream or save it.
Text uses the core Helvetica font, so dynamic values are reduced to Latin-1.
"""

import base64
import binascii
import logging
from io import BytesIO
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from fpdf import FPDF

from autofix.models.enums import LineItemType
from autofix.models.schemas import Budget, CompanySettings, ReportSummary
from autofix.services.theme import parse_hex_color

logger = logging.getLogger(__name__)

MARGIN = 14
CONTENT_WIDTH = 182  # A4 width minus margins
LOGO_BOX = 30

HEAD_BLUE = (59, 130, 246)
HEAD_RED = (220, 38, 38)
FOOT_GRAY = (240, 240, 240)
STRIPE_GRAY = (245, 245, 245)

FALLBACK_COMPANY_NAME = "AutoFix CRM"
FOOTER_TEXT = "Documento gerado eletronicamente por AutoFix CRM"


# ============== Formatting ==============

def format_brl(value: float) -> str:
    """pt-BR currency: R$ 1.234,56"""
    formatted = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {formatted}"


def format_date_br(value: Optional[datetime]) -> str:
    return value.strftime("%d/%m/%Y") if value else "-"


def latin1(text) -> str:
    """Replace characters the core PDF fonts cannot encode"""
    return str(text if text is not None else "").encode("latin-1", "replace").decode("latin-1")


def management_report_filename(generated_at: datetime) -> str:
    return f"Relatorio_AutoFix_{generated_at.strftime('%d-%m-%Y')}.pdf"


def budget_filename(budget: Budget) -> str:
    return f"Orcamento_{budget.id}.pdf"


def decode_logo(logo_url: Optional[str]) -> Optional[BytesIO]:
    """
    Decode a base64 data URL (or bare base64) into an image stream

    Raises:
        ValueError if the payload is not valid base64
    """
    if not logo_url:
        return None
    _, sep, encoded = logo_url.partition(",")
    if not sep:
        encoded = logo_url
    try:
        return BytesIO(base64.b64decode(encoded, validate=True))
    except binascii.Error as e:
        raise ValueError(f"Invalid logo data: {e}")


def header_fill_color(settings: CompanySettings) -> Tuple[int, int, int]:
    """Table header color: the company's primary color when set"""
    if settings.primary_color:
        try:
            return parse_hex_color(settings.primary_color)
        except ValueError:
            logger.warning(f"[Reports] Ignoring invalid primary color {settings.primary_color!r}")
    return HEAD_BLUE


# ============== Document ==============

class ShopPDF(FPDF):
    """A4 portrait document with the shop's header and table helpers"""

    def __init__(self):
        super().__init__(orientation="P", unit="mm", format="A4")
        self.set_margins(MARGIN, MARGIN, MARGIN)
        self.set_auto_page_break(auto=True, margin=20)
        self.add_page()

    def fit(self, text: str, width: float) -> str:
        """Truncate text with '...' so it fits a cell"""
        text = latin1(text)
        limit = width - 2
        if self.get_string_width(text) <= limit:
            return text
        while text and self.get_string_width(text + "...") > limit:
            text = text[:-1]
        return text + "..."

    def company_header(self, settings: CompanySettings, include_email: bool = False) -> None:
        """Logo (when set), company name and contact lines"""
        top = self.get_y()
        text_x = MARGIN

        logo = None
        try:
            logo = decode_logo(settings.logo_url)
            if logo is not None:
                self.image(logo, x=MARGIN, y=top, w=LOGO_BOX, h=LOGO_BOX, keep_aspect_ratio=True)
                text_x = MARGIN + LOGO_BOX + 6
        except (ValueError, OSError) as e:
            logger.warning(f"[Reports] Could not add logo: {e}")
            logo = None

        self.set_xy(text_x, top + 2)
        self.set_font("Helvetica", "B", 16)
        self.set_text_color(40)
        self.cell(0, 8, latin1(settings.name or FALLBACK_COMPANY_NAME), new_x="LMARGIN", new_y="NEXT")

        self.set_font("Helvetica", "", 9)
        self.set_text_color(80)
        lines = []
        if settings.address:
            lines.append(settings.address)
        if settings.phone:
            lines.append(f"Tel: {settings.phone}")
        if include_email and settings.email:
            lines.append(f"Email: {settings.email}")
        for line in lines:
            self.set_x(text_x)
            self.multi_cell(100, 4, latin1(line), new_x="LMARGIN", new_y="NEXT")

        bottom = top + LOGO_BOX + 4 if logo is not None else self.get_y()
        self.set_y(max(self.get_y(), bottom) + 4)
        self.set_text_color(0)

    def section_title(self, text: str) -> None:
        self.set_font("Helvetica", "B", 14)
        self.set_text_color(0)
        self.cell(0, 8, latin1(text), new_x="LMARGIN", new_y="NEXT")
        self.ln(1)

    def table(
        self,
        headers: Sequence[str],
        widths: Sequence[float],
        rows: List[Sequence[str]],
        head_fill: Tuple[int, int, int] = HEAD_BLUE,
        aligns: Optional[Sequence[str]] = None,
        foot: Optional[Sequence[str]] = None,
        striped: bool = True
    ) -> None:
        """Header row, body rows (optionally striped), optional bold footer row"""
        aligns = aligns or ["L"] * len(headers)

        self.set_font("Helvetica", "B", 9)
        self.set_fill_color(*head_fill)
        self.set_text_color(255)
        for header, width, align in zip(headers, widths, aligns):
            self.cell(width, 7, latin1(header), border=0, align=align, fill=True)
        self.ln(7)

        self.set_font("Helvetica", "", 9)
        self.set_text_color(0)
        for index, row in enumerate(rows):
            fill = striped and index % 2 == 1
            if fill:
                self.set_fill_color(*STRIPE_GRAY)
            for value, width, align in zip(row, widths, aligns):
                self.cell(width, 6, self.fit(value, width), border="B" if not striped else 0,
                          align=align, fill=fill)
            self.ln(6)

        if foot:
            self.set_font("Helvetica", "B", 9)
            self.set_fill_color(*FOOT_GRAY)
            for value, width in zip(foot, widths):
                self.cell(width, 7, latin1(value), align="R", fill=True)
            self.ln(7)

        self.ln(8)


# ============== Management report ==============

def render_management_report(
    summary: ReportSummary,
    settings: CompanySettings,
    generated_at: Optional[datetime] = None
) -> bytes:
    """
    Management report PDF

    Args:
        summary: Aggregated report data (analytics.build_report_summary)
        settings: Company identity for the header
        generated_at: Timestamp printed on the report (defaults to now)

    Returns:
        PDF bytes
    """
    generated_at = generated_at or datetime.now()
    pdf = ShopPDF()
    pdf.company_header(settings)

    pdf.set_font("Helvetica", "B", 18)
    pdf.cell(0, 9, latin1("Relatório Gerencial"), new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 5, f"Gerado em: {format_date_br(generated_at)}", new_x="LMARGIN", new_y="NEXT")
    if summary.start or summary.end:
        period = latin1(f"Período: {format_date_br(summary.start)} a {format_date_br(summary.end)}")
        pdf.cell(0, 5, period, new_x="LMARGIN", new_y="NEXT")
    pdf.ln(6)

    head_fill = header_fill_color(settings)
    financial = summary.financial
    inventory = summary.inventory

    pdf.section_title("1. Resumo Financeiro")
    pdf.table(
        ["Indicador", "Valor"],
        [120, 62],
        [
            ["Receita Total (Aprovada/Realizada)", format_brl(financial.total_revenue)],
            ["Receita Pendente (Potencial)", format_brl(financial.potential_revenue)],
            ["Ticket Médio", format_brl(financial.average_ticket)],
            ["Taxa de Conversão", f"{financial.conversion_rate:.1f}%"],
        ],
        head_fill=head_fill,
        aligns=["L", "R"]
    )

    pdf.section_title("2. Resumo de Estoque")
    pdf.table(
        ["Indicador", "Valor"],
        [120, 62],
        [
            ["Total de Itens em Estoque", str(inventory.total_items)],
            ["Valor Total em Custo", format_brl(inventory.total_cost)],
            ["Valor Total em Venda (Potencial)", format_brl(inventory.total_sale_value)],
            ["Itens com Estoque Baixo", str(inventory.low_stock_count)],
        ],
        head_fill=head_fill,
        aligns=["L", "R"]
    )

    if inventory.low_stock_items:
        pdf.section_title("3. Itens com Estoque Baixo (Reposição Necessária)")
        pdf.table(
            ["Peça", "SKU", "Qtd Atual", "Custo Unit."],
            [80, 40, 27, 35],
            [
                [part.name, part.sku, str(part.stock), format_brl(part.cost)]
                for part in inventory.low_stock_items
            ],
            head_fill=HEAD_RED,
            aligns=["L", "L", "C", "R"],
            striped=False
        )

    logger.info(
        f"[Reports] Management report rendered "
        f"({summary.budget_count} budgets, {inventory.low_stock_count} low-stock parts)"
    )
    return bytes(pdf.output())


# ============== Budget quote ==============

def render_budget_pdf(budget: Budget, settings: CompanySettings) -> bytes:
    """
    Customer-facing quote PDF

    Returns:
        PDF bytes
    """
    pdf = ShopPDF()
    pdf.company_header(settings, include_email=True)

    pdf.set_font("Helvetica", "B", 18)
    pdf.cell(0, 9, latin1("ORÇAMENTO"), new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    pdf.set_text_color(80)
    pdf.cell(0, 5, latin1(f"Nº: #{budget.id.upper()}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, f"Data: {format_date_br(budget.date_created)}", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, latin1(f"Status: {budget.status.value}"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # Client box
    box_top = pdf.get_y()
    pdf.set_draw_color(200)
    pdf.set_fill_color(250, 250, 250)
    pdf.rect(MARGIN, box_top, CONTENT_WIDTH, 25, style="DF")
    pdf.set_text_color(0)
    pdf.set_xy(MARGIN + 4, box_top + 3)
    pdf.set_font("Helvetica", "B", 11)
    pdf.cell(0, 6, "Dados do Cliente", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    pdf.set_x(MARGIN + 4)
    pdf.cell(0, 6, latin1(f"Nome: {budget.client_name}"), new_x="LMARGIN", new_y="NEXT")
    pdf.set_x(MARGIN + 4)
    pdf.cell(0, 6, latin1(f"Veículo: {budget.vehicle_name}"), new_x="LMARGIN", new_y="NEXT")
    pdf.set_y(box_top + 30)

    widths = [20, 87, 15, 30, 30]
    pdf.table(
        ["Tipo", "Descrição", "Qtd", "Preço Unit.", "Total"],
        widths,
        [
            [
                LineItemType.to_label(item.type.value),
                item.name,
                f"{item.quantity:g}",
                format_brl(item.unit_price),
                format_brl(item.total),
            ]
            for item in budget.items
        ],
        head_fill=header_fill_color(settings),
        aligns=["L", "L", "C", "R", "R"],
        foot=["", "", "", "TOTAL", format_brl(budget.total_amount)]
    )

    if budget.notes:
        pdf.set_font("Helvetica", "B", 11)
        pdf.cell(0, 6, latin1("Observações"), new_x="LMARGIN", new_y="NEXT")
        pdf.set_font("Helvetica", "", 10)
        pdf.multi_cell(0, 5, latin1(budget.notes), new_x="LMARGIN", new_y="NEXT")
        pdf.ln(4)

    # Signature area
    if pdf.get_y() + 40 > pdf.h - 20:
        pdf.add_page()
    line_y = pdf.get_y() + 20
    pdf.set_draw_color(0)
    pdf.line(MARGIN, line_y, 90, line_y)
    pdf.line(110, line_y, 186, line_y)
    pdf.set_font("Helvetica", "", 8)
    pdf.set_xy(MARGIN, line_y + 2)
    pdf.cell(76, 5, "Assinatura do Cliente")
    pdf.set_xy(110, line_y + 2)
    responsible = (
        f"Assinatura: {settings.responsible_name}"
        if settings.responsible_name else latin1("Assinatura do Responsável")
    )
    pdf.cell(76, 5, latin1(responsible), new_x="LMARGIN", new_y="NEXT")

    # Footer sits inside the bottom margin
    pdf.set_auto_page_break(auto=False)
    pdf.set_y(-20)
    pdf.set_font("Helvetica", "", 8)
    pdf.set_text_color(150)
    pdf.cell(0, 5, FOOTER_TEXT, align="C")

    logger.info(f"[Reports] Budget PDF rendered for {budget.id} ({len(budget.items)} items)")
    return bytes(pdf.output())
