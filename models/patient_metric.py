# models/patient_metric.py

import math
from datetime import datetime, timezone

NUMERIC_FIELDS = {
    'weight': 'Peso',
    'height': 'Altura',
    'body_fat_percentage': 'Gordura corporal',
}


def parse_optional_float(value):
    """Return None for blank input, a float otherwise (comma decimals accepted)"""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        value = str(value).strip()
        if not value:
            return None
        number = float(value.replace(',', '.'))
    if not math.isfinite(number):
        raise ValueError(f'not a finite number: {value!r}')
    return number


class PatientMetric:
    """Dated body measurement for a patient"""

    @staticmethod
    def create_metric(data, patient_id, user_id):
        metric = {
            'patient_id': patient_id,
            'user_id': user_id,
            'metric_date': data.get('metric_date') or datetime.now(timezone.utc),
            'notes': (data.get('notes') or '').strip(),
        }
        for field in NUMERIC_FIELDS:
            metric[field] = parse_optional_float(data.get(field))
        return metric

    @staticmethod
    def validate(data):
        errors = []
        values = {}
        for field, label in NUMERIC_FIELDS.items():
            try:
                values[field] = parse_optional_float(data.get(field))
            except ValueError:
                errors.append(f'{label} deve ser um número.')
                continue
            if values[field] is not None and values[field] <= 0:
                errors.append(f'{label} deve ser maior que zero.')

        if not errors and all(value is None for value in values.values()):
            errors.append('Informe ao menos peso, altura ou gordura corporal.')
        return errors

    @staticmethod
    def latest(metrics):
        return metrics[-1] if metrics else None
