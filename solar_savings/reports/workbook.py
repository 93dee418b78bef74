"""Excel export of a savings projection.

Creates an .xlsx workbook with:
- Inputs: the parameter set
- Projection: 25 rows of annual and cumulative costs per path
- Summary: headline metrics and a line chart of the cumulative costs
"""

from pathlib import Path

import xlsxwriter

from solar_savings.models.parameters import ParameterSet, ProjectionResults

PROJECTION_HEADERS = [
    "Year", "Utility", "PPA", "Purchase",
    "Cum. Utility", "Cum. PPA", "Cum. Purchase",
]


def export_projection_workbook(
    params: ParameterSet, results: ProjectionResults, output_path: str
) -> str:
    """Write the projection workbook.

    Args:
        params: Inputs the projection was run with.
        results: Calculated projection.
        output_path: Target path; the suffix is forced to .xlsx.

    Returns:
        The path actually written.
    """
    if not output_path.endswith(".xlsx"):
        output_path = str(Path(output_path).with_suffix(".xlsx"))

    workbook = xlsxwriter.Workbook(output_path)
    fmt = _create_formats(workbook)

    ws_inputs = workbook.add_worksheet("Inputs")
    ws_proj = workbook.add_worksheet("Projection")
    ws_summary = workbook.add_worksheet("Summary")

    _create_inputs_sheet(ws_inputs, fmt, params)
    _create_projection_sheet(ws_proj, fmt, results)
    _create_summary_sheet(workbook, ws_summary, fmt, results)

    workbook.close()
    return output_path


def _create_formats(wb) -> dict:
    f = {}
    blue = "#1565C0"
    lblue = "#E3F2FD"

    f["title"] = wb.add_format({"bold": True, "font_size": 16, "font_color": blue})
    f["header"] = wb.add_format({"bold": True, "font_color": "white", "bg_color": blue,
                                 "align": "center", "border": 1, "valign": "vcenter"})
    f["label"] = wb.add_format({"bold": True, "border": 1})
    f["currency"] = wb.add_format({"num_format": "$#,##0", "border": 1})
    f["rate"] = wb.add_format({"num_format": "$0.000", "border": 1})
    f["percent"] = wb.add_format({"num_format": "0.00%", "border": 1})
    f["number"] = wb.add_format({"num_format": "#,##0", "border": 1})
    f["center"] = wb.add_format({"align": "center", "border": 1})
    f["result"] = wb.add_format({"bold": True, "bg_color": lblue, "border": 2,
                                 "num_format": "$#,##0", "align": "center"})
    f["result_num"] = wb.add_format({"bold": True, "bg_color": lblue, "border": 2,
                                     "num_format": "#,##0", "align": "center"})
    return f


def _create_inputs_sheet(ws, f, params: ParameterSet) -> None:
    ws.set_column("A:A", 28)
    ws.set_column("B:B", 16)
    ws.write(0, 0, "Solar Savings Inputs", f["title"])

    rows = [
        ("Annual Usage (kWh)", params.usage, f["number"]),
        ("Utility Start ($/kWh)", params.utility_rate, f["rate"]),
        ("Utility Escalation", params.utility_esc, f["percent"]),
        ("PPA Start ($/kWh)", params.ppa_rate, f["rate"]),
        ("PPA Escalator", params.ppa_esc, f["percent"]),
        ("Include Battery", "Yes" if params.include_battery else "No", f["center"]),
        ("NEM Credit ($/kWh)", params.net_metering_credit, f["rate"]),
        ("System Cost", params.system_cost, f["currency"]),
        ("Annual Maintenance", params.maintenance, f["currency"]),
        ("ITC", params.itc, f["percent"]),
        ("View", params.view, f["center"]),
    ]
    for i, (label, value, cell_format) in enumerate(rows, start=2):
        ws.write(i, 0, label, f["label"])
        ws.write(i, 1, value, cell_format)


def _create_projection_sheet(ws, f, results: ProjectionResults) -> None:
    ws.set_column("A:A", 6)
    ws.set_column("B:G", 14)
    for c, hdr in enumerate(PROJECTION_HEADERS):
        ws.write(0, c, hdr, f["header"])

    for i, r in enumerate(results.rows, start=1):
        ws.write(i, 0, r.year, f["center"])
        values = [r.util_annual, r.ppa_annual, r.purchase_annual,
                  r.cum_util, r.cum_ppa, r.cum_purchase]
        for c, value in enumerate(values, start=1):
            ws.write_number(i, c, value, f["currency"])
    ws.freeze_panes(1, 1)


def _create_summary_sheet(wb, ws, f, results: ProjectionResults) -> None:
    ws.set_column("A:A", 40)
    ws.set_column("B:B", 18)
    ws.write(0, 0, "Projection Summary", f["title"])

    ws.write(2, 0, "25-yr PPA Savings vs Utility", f["label"])
    ws.write_number(2, 1, results.total_savings_ppa_vs_utility, f["result"])
    ws.write(3, 0, "Net System Cost (after ITC)", f["label"])
    ws.write_number(3, 1, results.discounted_system_cost, f["result"])
    ws.write(4, 0, "Purchase Breakeven Year", f["label"])
    if results.breakeven_year is None:
        ws.write(4, 1, "None", f["center"])
    else:
        ws.write_number(4, 1, results.breakeven_year, f["result_num"])
    ws.write(5, 0, "CO2 Offset (kg)", f["label"])
    ws.write_number(5, 1, results.co2_saved_kg, f["result_num"])
    ws.write(6, 0, "Trees Equivalent", f["label"])
    ws.write_number(6, 1, results.trees_equivalent, f["result_num"])

    n = len(results.rows)
    chart = wb.add_chart({"type": "line"})
    for col, name in ((4, "Utility"), (5, "PPA"), (6, "Purchase")):
        chart.add_series({
            "name": name,
            "categories": ["Projection", 1, 0, n, 0],
            "values": ["Projection", 1, col, n, col],
        })
    chart.set_title({"name": "Cumulative Cost by Path"})
    chart.set_x_axis({"name": "Year"})
    chart.set_y_axis({"name": "Dollars", "num_format": "$#,##0"})
    ws.insert_chart("D2", chart)
