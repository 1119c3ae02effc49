# models/user.py

from datetime import datetime, timezone

from werkzeug.security import check_password_hash, generate_password_hash

MIN_PASSWORD_LENGTH = 6


def normalize_email(value):
    if not value:
        return ''
    return value.strip().lower()


class User:
    """Account that owns patients, plans and shopping lists"""

    @staticmethod
    def create_user(email, password):
        return {
            'email': normalize_email(email),
            'password_hash': User.hash_password(password),
            'created_at': datetime.now(timezone.utc),
        }

    @staticmethod
    def hash_password(password):
        return generate_password_hash(password)

    @staticmethod
    def validate(email, password):
        errors = []
        email = normalize_email(email)
        if not email:
            errors.append('O e-mail é obrigatório.')
        elif '@' not in email:
            errors.append('Informe um e-mail válido.')
        errors.extend(User.validate_password(password))
        return errors

    @staticmethod
    def validate_password(password):
        if len(password or '') < MIN_PASSWORD_LENGTH:
            return [f'A senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres.']
        return []

    @staticmethod
    def check_password(user, password):
        if not user or not user.get('password_hash'):
            return False
        return check_password_hash(user['password_hash'], password or '')
