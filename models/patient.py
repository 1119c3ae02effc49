# models/patient.py

from datetime import datetime, timezone

PATIENT_STATUSES = ('active', 'inactive')


class Patient:
    """Patient record followed by a nutritionist"""

    @staticmethod
    def create_patient(data, user_id):
        """Create a new patient document from form or JSON data"""
        return {
            'user_id': user_id,
            'created_at': datetime.now(timezone.utc),
            'name': (data.get('name') or '').strip(),
            'email': (data.get('email') or '').strip() or None,
            'phone': (data.get('phone') or '').strip() or None,
            'status': data.get('status') if data.get('status') in PATIENT_STATUSES else 'active',
        }

    @staticmethod
    def validate(data):
        errors = []
        if not (data.get('name') or '').strip():
            errors.append('Nome do paciente é obrigatório.')
        email = (data.get('email') or '').strip()
        if email and '@' not in email:
            errors.append('Informe um e-mail válido para o paciente.')
        return errors

    @staticmethod
    def toggled_status(patient):
        return 'inactive' if patient.get('status', 'active') == 'active' else 'active'
