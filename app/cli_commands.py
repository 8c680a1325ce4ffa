"""
Flask CLI commands for database bootstrap and user management.

Commands:
- flask init-db: Create all tables
- flask seed-catalogs: Load quote statuses, inks, faces and weight bands
- flask create-user: Create a back-office user
"""

import click
import re
from decimal import Decimal
from app.database import get_session, create_all
from app.models import (
    AppUser, Role, Ink, Face, WeightBand, QuoteStatus, DEFAULT_STATUS_NAMES
)

DEFAULT_INK_COUNTS = [1, 2, 3, 4, 5, 6, 7, 8]
DEFAULT_FACE_COUNTS = [1, 2]
# (kg_min, kg_max) - kg_max None is unbounded
DEFAULT_WEIGHT_BANDS = [
    (Decimal('0'), Decimal('10')),
    (Decimal('10'), Decimal('30')),
    (Decimal('30'), Decimal('50')),
    (Decimal('50'), Decimal('100')),
    (Decimal('100'), None),
]


def seed_catalogs(session):
    """Insert the fixed catalogs that are missing. Returns rows added."""
    added = 0

    for status_id, name in DEFAULT_STATUS_NAMES.items():
        if not session.get(QuoteStatus, int(status_id)):
            session.add(QuoteStatus(id=int(status_id), name=name))
            added += 1

    existing_inks = {i.count for i in session.query(Ink).all()}
    for count in DEFAULT_INK_COUNTS:
        if count not in existing_inks:
            session.add(Ink(count=count))
            added += 1

    existing_faces = {f.count for f in session.query(Face).all()}
    for count in DEFAULT_FACE_COUNTS:
        if count not in existing_faces:
            session.add(Face(count=count))
            added += 1

    if session.query(WeightBand).count() == 0:
        for kg_min, kg_max in DEFAULT_WEIGHT_BANDS:
            label = f"{kg_min} - {kg_max if kg_max is not None else '∞'} kg"
            session.add(WeightBand(label=label, kg=kg_min, kg_min=kg_min, kg_max=kg_max))
            added += 1

    session.commit()
    return added


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create all tables."""
        create_all()
        click.echo(click.style('✅ Tablas creadas', fg='green'))

    @app.cli.command('seed-catalogs')
    def seed_catalogs_command():
        """Load quote statuses, inks, faces and weight bands."""
        try:
            added = seed_catalogs(get_session())
            click.echo(click.style(f'✅ Catálogos cargados ({added} registros nuevos)', fg='green'))
        except Exception as e:
            get_session().rollback()
            click.echo(click.style(f'❌ Error al cargar catálogos: {str(e)}', fg='red'))

    @app.cli.command('create-user')
    @click.option('--email', prompt=True, help='User email address')
    @click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='User password')
    @click.option('--role', default='ventas', show_default=True, help='Role name (created if missing)')
    @click.option('--super-admin', is_flag=True, default=False, help='Grant access to everything')
    def create_user(email, password, role, super_admin):
        """Create a back-office user."""
        email = email.strip().lower()
        db_session = get_session()

        # Validate email format
        email_pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        if not re.match(email_pattern, email):
            click.echo(click.style('❌ Email inválido. Use formato: user@example.com', fg='red'))
            return

        if len(password) < 6:
            click.echo(click.style('❌ La contraseña debe tener al menos 6 caracteres.', fg='red'))
            return

        if db_session.query(AppUser).filter_by(email=email).first():
            click.echo(click.style(f'❌ Ya existe un usuario con el email: {email}', fg='red'))
            return

        try:
            role_row = db_session.query(Role).filter_by(name=role).first()
            if not role_row:
                role_row = Role(name=role)
                db_session.add(role_row)
                db_session.flush()

            user = AppUser(email=email, role_id=role_row.id, is_super_admin=super_admin, active=True)
            user.set_password(password)
            db_session.add(user)
            db_session.commit()

            click.echo(click.style('\n✅ Usuario creado exitosamente!', fg='green', bold=True))
            click.echo(f'   Email: {email}')
            click.echo(f'   Rol: {role}')
            click.echo(f'   ID: {user.id}')

        except Exception as e:
            get_session().rollback()
            click.echo(click.style(f'❌ Error al crear usuario: {str(e)}', fg='red'))
