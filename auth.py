# auth.py

import logging
from functools import wraps

from bson import ObjectId
from flask import (
    Blueprint,
    current_app,
    flash,
    g,
    jsonify,
    redirect,
    render_template,
    request,
    session,
    url_for,
)
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from extensions import mongo
from models.user import User, normalize_email

logger = logging.getLogger(__name__)

bp = Blueprint('auth', __name__, url_prefix='/auth')

RESET_SALT = 'password-reset'


def _serializer():
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=RESET_SALT)


def _password_fingerprint(user):
    return (user.get('password_hash') or '')[-12:]


def generate_reset_token(user):
    return _serializer().dumps([user['email'], _password_fingerprint(user)])


def verify_reset_token(token):
    """Return the user a valid token was issued for, or None when expired, tampered or already used"""
    try:
        email, fingerprint = _serializer().loads(token, max_age=current_app.config['PASSWORD_RESET_MAX_AGE'])
    except SignatureExpired:
        logger.info("Expired password reset token")
        return None
    except (BadSignature, TypeError, ValueError):
        logger.warning("Invalid password reset token")
        return None

    user = mongo.db.users.find_one({'email': email})
    # A changed password hash means the token was already used
    if user is None or _password_fingerprint(user) != fingerprint:
        logger.info("Stale password reset token for %s", email)
        return None
    return user


@bp.before_app_request
def load_logged_in_user():
    g.user = None
    user_id = session.get('user_id')
    if user_id and ObjectId.is_valid(user_id):
        g.user = mongo.db.users.find_one({'_id': ObjectId(user_id)})


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if g.user is None:
            if request.blueprint == 'api':
                return jsonify({'error': 'Authentication required'}), 401
            flash('Faça login para continuar.', 'error')
            return redirect(url_for('auth.login', next=request.path))
        return view(*args, **kwargs)

    return wrapped


# ✅ Login
@bp.route('/login', methods=['GET', 'POST'])
def login():
    if g.user is not None:
        return redirect(url_for('main.index'))

    if request.method == 'POST':
        email = normalize_email(request.form.get('email'))
        password = request.form.get('password') or ''
        next_url = request.form.get('next') or request.args.get('next')

        user = mongo.db.users.find_one({'email': email}) if email else None
        if not User.check_password(user, password):
            flash('E-mail ou senha inválidos.', 'error')
            return render_template('auth/login.html', email=email, next=next_url), 401

        session.clear()
        session['user_id'] = str(user['_id'])
        session.permanent = True
        logger.info("User %s logged in", user['_id'])
        flash('Login bem-sucedido!', 'success')

        if next_url and next_url.startswith('/') and not next_url.startswith('//'):
            return redirect(next_url)
        return redirect(url_for('main.index'))

    return render_template('auth/login.html', next=request.args.get('next'))


# ✅ Signup
@bp.route('/signup', methods=['GET', 'POST'])
def signup():
    if request.method == 'POST':
        email = normalize_email(request.form.get('email'))
        password = request.form.get('password') or ''

        errors = User.validate(email, password)
        if not errors and mongo.db.users.find_one({'email': email}):
            errors.append('Já existe uma conta com este e-mail.')
        if errors:
            for error in errors:
                flash(error, 'error')
            return render_template('auth/signup.html', email=email), 400

        result = mongo.db.users.insert_one(User.create_user(email, password))
        logger.info("Created user %s", result.inserted_id)
        flash('Cadastro realizado! Faça login para continuar.', 'success')
        return redirect(url_for('auth.login'))

    return render_template('auth/signup.html')


@bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    flash('Você saiu da sua conta.', 'info')
    return redirect(url_for('auth.login'))


# ✅ Password recovery
@bp.route('/forgot-password', methods=['GET', 'POST'])
def forgot_password():
    if request.method == 'POST':
        email = normalize_email(request.form.get('email'))
        if not email:
            flash('O e-mail é obrigatório.', 'error')
            return render_template('auth/forgot_password.html'), 400

        user = mongo.db.users.find_one({'email': email})
        if user:
            token = generate_reset_token(user)
            reset_url = url_for('auth.reset_password', token=token, _external=True)
            # No mail transport is configured; operators deliver the link from the log
            logger.info("Password reset link for %s: %s", email, reset_url)
        else:
            logger.info("Password reset requested for unknown email %s", email)

        flash('E-mail enviado! Verifique sua caixa de entrada para redefinir a senha.', 'success')
        return redirect(url_for('auth.login'))

    return render_template('auth/forgot_password.html')


@bp.route('/reset-password/<token>', methods=['GET', 'POST'])
def reset_password(token):
    user = verify_reset_token(token)
    if user is None:
        flash('Link de redefinição inválido ou expirado.', 'error')
        return redirect(url_for('auth.forgot_password'))

    if request.method == 'POST':
        password = request.form.get('password') or ''
        errors = User.validate_password(password)
        if errors:
            for error in errors:
                flash(error, 'error')
            return render_template('auth/reset_password.html', token=token), 400

        mongo.db.users.update_one(
            {'_id': user['_id']},
            {'$set': {'password_hash': User.hash_password(password)}},
        )
        logger.info("Password reset for user %s", user['_id'])
        flash('Senha alterada com sucesso! Você já pode fazer login com sua nova senha.', 'success')
        return redirect(url_for('auth.login'))

    return render_template('auth/reset_password.html', token=token)
