"""
Integration tests for authentication and authorization.
"""

from app.models import AppUser


class TestLogin:
    """Session login flow."""

    def test_login_and_me(self, client, sales_user):
        response = client.post('/api/auth/login', json={
            'correo': sales_user['email'].upper(),
            'password': sales_user['password'],
        })
        assert response.status_code == 200
        assert response.get_json()['usuario']['rol'] == 'ventas'

        me = client.get('/api/auth/me').get_json()
        assert me['id'] == sales_user['id']
        assert me['correo'] == sales_user['email']
        assert me['acceso_total'] is False

    def test_wrong_password(self, client, sales_user):
        response = client.post('/api/auth/login', json={
            'correo': sales_user['email'],
            'password': 'wrongpassword',
        })
        assert response.status_code == 401

    def test_missing_credentials(self, client, session):
        response = client.post('/api/auth/login', json={'correo': 'alguien@test.com'})
        assert response.status_code == 400

    def test_logout(self, authenticated_client):
        assert authenticated_client.get('/api/auth/me').status_code == 200

        authenticated_client.post('/api/auth/logout')

        assert authenticated_client.get('/api/auth/me').status_code == 401


class TestSessionPrincipal:
    """Principal loading on every request."""

    def test_anonymous_request(self, client):
        response = client.get('/api/auth/me')
        assert response.status_code == 401
        assert response.get_json()['status'] == 'error'

    def test_deactivated_user_loses_access(self, authenticated_client, session, sales_user):
        session.query(AppUser).filter_by(id=sales_user['id']).update({AppUser.active: False})
        session.commit()

        assert authenticated_client.get('/api/auth/me').status_code == 401

    def test_super_admin_passes_role_checks(self, client, session, catalog):
        user = AppUser(email='root@test.com', is_super_admin=True, active=True)
        user.set_password('password123')
        session.add(user)
        session.commit()
        user_id = user.id

        with client.session_transaction() as sess:
            sess['user_id'] = user_id

        response = client.put('/api/catalog/tariffs', json={
            'tarifas': [{'id': catalog['tariff_ids'][0], 'precio': 55, 'merma_porcentaje': 0}],
        })
        assert response.status_code == 200


class TestMetrics:

    def test_metrics_endpoint(self, client):
        response = client.get('/metrics')
        assert response.status_code == 200
        assert b'cotizador_http_requests_total' in response.data


class TestLoginBody:

    def test_array_body(self, client, session):
        response = client.post('/api/auth/login', json=['correo', 'password'])
        assert response.status_code == 400
