"""Savings summary PDF generation using ReportLab.

Generates a two-page PDF with the customer's inputs, the headline
metrics, the projection chart for the current view, and the full
25-year table of annual and cumulative costs.
"""

import tempfile
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    Image,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from solar_savings.models.parameters import ParameterSet, ProjectionResults
from solar_savings.models.projection import BATTERY_MONTHLY_FEE, PROJECTION_YEARS
from solar_savings.reports.charts import create_projection_chart
from solar_savings.utils.formatters import (
    format_breakeven,
    format_currency_exact,
    format_number,
    format_percent,
    format_rate,
)

HEADER_BLUE = colors.HexColor("#1565c0")


def _inputs_rows(params: ParameterSet) -> list:
    return [
        ["Annual Usage", f"{format_number(params.usage, 0)} kWh"],
        ["Utility Start Rate", format_rate(params.utility_rate)],
        ["Utility Escalation", format_percent(params.utility_esc)],
        ["PPA Start Rate", format_rate(params.ppa_rate)],
        ["PPA Escalator", format_percent(params.ppa_esc)],
        ["Battery", f"Yes (${BATTERY_MONTHLY_FEE}/mo)" if params.include_battery else "No"],
        ["NEM Credit", format_rate(params.net_metering_credit)],
        ["System Cost", format_currency_exact(params.system_cost)],
        ["Annual Maintenance", format_currency_exact(params.maintenance)],
        ["Federal Tax Credit (ITC)", format_percent(params.itc, 0)],
    ]


def generate_savings_summary(
    params: ParameterSet, results: ProjectionResults, output_path: str
) -> None:
    """Generate the savings summary PDF.

    Args:
        params: Inputs the projection was run with.
        results: Calculated projection.
        output_path: File path for the output PDF.
    """
    doc = SimpleDocTemplate(
        output_path,
        pagesize=letter,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
        leftMargin=0.75 * inch,
        rightMargin=0.75 * inch,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "CustomTitle", parent=styles["Title"], fontSize=18, spaceAfter=6
    )
    heading_style = ParagraphStyle(
        "CustomHeading", parent=styles["Heading2"], fontSize=14,
        spaceAfter=8, spaceBefore=12, textColor=HEADER_BLUE,
    )
    small_style = ParagraphStyle(
        "Small", parent=styles["Normal"], fontSize=8, textColor=colors.grey,
    )

    elements = []

    # --- PAGE 1: Inputs, metrics and chart ---
    elements.append(Paragraph("Solar Savings Comparison", title_style))
    elements.append(Paragraph(
        f"{PROJECTION_YEARS}-year projection: PPA vs Purchase vs Utility", styles["Heading3"]
    ))
    elements.append(Spacer(1, 12))

    info_table = Table(_inputs_rows(params), colWidths=[2.5 * inch, 4.5 * inch])
    info_table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("LINEBELOW", (0, -1), (-1, -1), 1, colors.grey),
    ]))
    elements.append(info_table)
    elements.append(Spacer(1, 16))

    elements.append(Paragraph("Key Figures", heading_style))
    metrics_data = [
        ["Metric", "Value"],
        [f"{PROJECTION_YEARS}-yr PPA Savings vs Utility",
         format_currency_exact(results.total_savings_ppa_vs_utility)],
        ["Net System Cost (after ITC)", format_currency_exact(results.discounted_system_cost)],
        ["Purchase Breakeven (Ops vs ITC-Adjusted Cost)", format_breakeven(results.breakeven_year)],
        ["CO2 Offset (kg) / Trees",
         f"{results.co2_saved_kg:,.0f} / {results.trees_equivalent:,.0f}"],
    ]
    metrics_table = Table(metrics_data, colWidths=[4 * inch, 3 * inch])
    metrics_table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BLUE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("ALIGN", (1, 1), (1, -1), "RIGHT"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f5f5f5")]),
    ]))
    elements.append(metrics_table)
    elements.append(Spacer(1, 12))

    with tempfile.TemporaryDirectory() as tmpdir:
        chart_path = str(Path(tmpdir) / "projection.png")
        create_projection_chart(results, params.view, chart_path)
        elements.append(Image(chart_path, width=6.5 * inch, height=3.6 * inch))

        # --- PAGE 2: Year-by-year table ---
        elements.append(PageBreak())
        elements.append(Paragraph("Year-by-Year Projection", heading_style))

        table_data = [["Year", "Utility", "PPA", "Purchase",
                       "Cum. Utility", "Cum. PPA", "Cum. Purchase"]]
        for r in results.rows:
            table_data.append([
                str(r.year),
                format_currency_exact(r.util_annual),
                format_currency_exact(r.ppa_annual),
                format_currency_exact(r.purchase_annual),
                format_currency_exact(r.cum_util),
                format_currency_exact(r.cum_ppa),
                format_currency_exact(r.cum_purchase),
            ])
        projection_table = Table(table_data, repeatRows=1)
        projection_table.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#e0e0e0")),
            ("FONTSIZE", (0, 0), (-1, -1), 8),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
        ]))
        elements.append(projection_table)
        elements.append(Spacer(1, 12))

        elements.append(Paragraph(
            "<i>Utility and PPA prices escalate annually from year 2. Purchase costs are "
            "maintenance plus battery fee less the NEM credit, none of which escalate. "
            "CO2 offset assumes 0.7 kg per kWh; one tree sequesters 21.77 kg per year.</i>",
            small_style,
        ))

        # Build PDF (must happen while tmpdir exists for chart images)
        doc.build(elements)
