import io
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from nutrilog.domain.NutritionStatistics import NutritionStatistics

DAY_LABELS = ["Day 1", "Day 2", "Day 3", "Day 4", "Day 5", "Day 6", "Day 7"]

HEADER_STYLE = [
    ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#4CAF50")),
    ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
    ("ALIGN", (0,0), (-1,-1), "CENTER"),
    ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
    ("BOTTOMPADDING", (0,0), (-1,0), 8),
    ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
]


def _bullets(title, lines, styles):
    elements = [Paragraph(title, styles["Heading2"])]
    for line in lines:
        elements.append(Paragraph(f"• {line}", styles["BodyText"]))
    return elements


def generate_pdf_for_statistics(stats: NutritionStatistics, period: str = "week") -> bytes:
    """Render the statistics as a one-document PDF: headline numbers, weekly trend, insights, recommendations."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        rightMargin=30, leftMargin=30, topMargin=30, bottomMargin=30
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(f"Nutrition Report - {period.capitalize()}", styles["Title"]),
        Paragraph(f"Nutrition score: {stats.nutrition_score}/100", styles["Heading2"]),
        Spacer(1, 12),
    ]

    summary = [
        ["Metric", "Value"],
        ["Calories / day", f"{stats.average_calories_daily} kcal"],
        ["Calorie goal achieved", f"{stats.calorie_goal_achievement_percent}%"],
        ["Protein / day", f"{stats.average_protein_daily} g"],
        ["Carbs / day", f"{stats.average_carbs_daily} g"],
        ["Fats / day", f"{stats.average_fats_daily} g"],
        ["Fiber / day", f"{stats.average_fiber_daily} g"],
        ["Processed food", f"{stats.processed_food_percentage}%"],
        ["Eating window", f"{stats.average_eating_hours.start} - {stats.average_eating_hours.end}"],
        ["Fasting", f"{stats.intermittent_fasting_hours} h"],
        ["Missed meals", str(stats.missed_meals_alert)],
    ]
    table = Table(summary, repeatRows=1)
    table.setStyle(TableStyle(HEADER_STYLE))
    elements += [table, Spacer(1, 16)]

    trends = stats.weekly_trends
    trend_rows = [["", *DAY_LABELS]]
    for label, values in (("Calories", trends.calories), ("Protein", trends.protein),
                          ("Carbs", trends.carbs), ("Fats", trends.fats)):
        trend_rows.append([label, *[str(v) for v in values]])
    trend_table = Table(trend_rows, repeatRows=1)
    trend_table.setStyle(TableStyle(HEADER_STYLE))
    elements += [Paragraph("Weekly trend", styles["Heading2"]), trend_table, Spacer(1, 16)]

    elements += _bullets("Insights", stats.insights, styles)
    elements += _bullets("Recommendations", stats.recommendations, styles)
    if stats.allergen_alerts:
        elements += _bullets("Allergen alerts", stats.allergen_alerts, styles)

    doc.build(elements)
    return buf.getvalue()
