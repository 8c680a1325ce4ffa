"""Authentication blueprint (session cookie)."""
from flask import Blueprint, request, jsonify, session, g

from app.database import get_session
from app.middleware import require_login
from app.utils.number_format import to_object
from app.services.auth_service import authenticate

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/login', methods=['POST'])
def login():
    """Body: {correo, password}"""
    data = to_object(request.get_json(silent=True))
    principal = authenticate(get_session(), data.get('correo'), data.get('password'))

    session.clear()
    session['user_id'] = principal.id
    session.permanent = True

    return jsonify({'message': 'Sesión iniciada', 'usuario': principal.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'message': 'Sesión cerrada'})


@auth_bp.route('/me', methods=['GET'])
@require_login
def me():
    return jsonify(g.principal.to_dict())
