# utils/pdf_export.py

import io
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from utils.formatting import (
    format_datetime,
    macro_label,
    meal_calories,
    meal_type_label,
    plan_total_calories,
)

TABLE_STYLE = TableStyle([
    ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#e8f5e9')),
    ('GRID', (0, 0), (-1, -1), 0.25, colors.grey),
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('VALIGN', (0, 0), (-1, -1), 'TOP'),
])


def _text(value):
    return escape(str(value if value is not None else ''))


def _build(story, title):
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title=title)
    doc.build(story)
    return buffer.getvalue()


def build_plan_pdf(plan_details):
    styles = getSampleStyleSheet()
    story = [
        Paragraph(f"<b>Plano para {_text(plan_details.get('patientName'))}</b>", styles['Title']),
        Paragraph(f"Gerado em: {_text(format_datetime(plan_details.get('generatedAt')))}", styles['Normal']),
        Paragraph(
            f"Máx. {_text(plan_details.get('maxCalories'))} kcal • "
            f"{_text(meal_type_label(plan_details.get('mealType')))} • "
            f"Foco: {_text(macro_label(plan_details.get('macroPriority')))}",
            styles['Normal'],
        ),
        Paragraph(f"Total do plano: {_text(plan_total_calories(plan_details))} kcal", styles['Normal']),
        Spacer(1, 0.2 * inch),
    ]

    for meal in plan_details.get('meals') or []:
        story.append(Paragraph(
            f"{_text(meal_type_label(meal.get('type')))} ({_text(meal_calories(meal))} kcal)",
            styles['Heading2'],
        ))
        rows = [['Alimento', 'Quantidade', 'kcal']]
        for food in meal.get('foods') or []:
            rows.append([
                Paragraph(_text(food.get('name')), styles['Normal']),
                _text(food.get('quantity')),
                _text(food.get('calories')),
            ])
        table = Table(rows, hAlign='LEFT', colWidths=[3.5 * inch, 1.5 * inch, 0.8 * inch])
        table.setStyle(TABLE_STYLE)
        story.append(table)
        story.append(Spacer(1, 0.15 * inch))

    foods = plan_details.get('foods') or []
    if foods:
        story.append(Paragraph('Alimentos utilizados', styles['Heading2']))
        story.append(Paragraph(_text(', '.join(str(food) for food in foods)), styles['Normal']))

    observations = plan_details.get('observations')
    if observations:
        story.append(Paragraph('Observações', styles['Heading2']))
        story.append(Paragraph(_text(observations), styles['Normal']))

    return _build(story, f"Plano - {plan_details.get('patientName', '')}")


def build_shopping_list_pdf(shopping_list):
    styles = getSampleStyleSheet()
    list_details = shopping_list.get('list_details') or {}
    story = [
        Paragraph('<b>Lista de Compras</b>', styles['Title']),
        Paragraph(
            f"Objetivo: {_text(shopping_list.get('objective'))} • "
            f"Período: {_text(shopping_list.get('time_period'))} • "
            f"Pessoas: {len(shopping_list.get('people') or [])}",
            styles['Normal'],
        ),
        Spacer(1, 0.2 * inch),
    ]

    for category in list_details.get('lista_de_compras') or []:
        story.append(Paragraph(_text(category.get('categoria')), styles['Heading2']))
        rows = [['Item', 'Quantidade']]
        for item in category.get('itens') or []:
            rows.append([
                Paragraph(_text(item.get('item')), styles['Normal']),
                _text(item.get('quantidade')),
            ])
        table = Table(rows, hAlign='LEFT', colWidths=[3.8 * inch, 2 * inch])
        table.setStyle(TABLE_STYLE)
        story.append(table)

    if list_details.get('observacoes'):
        story.append(Spacer(1, 0.2 * inch))
        story.append(Paragraph('Observações da IA', styles['Heading2']))
        story.append(Paragraph(_text(list_details['observacoes']), styles['Normal']))

    return _build(story, 'Lista de Compras')
