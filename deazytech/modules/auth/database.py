"""
Admin Accounts
==============

Password accounts for the admin area, stored in the relational store.
"""

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from deazytech.core.errors import StorageError, ValidationError
from deazytech.core.logging_service import LoggingService

SCHEMA = [
    '''
    CREATE TABLE IF NOT EXISTS admins (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        email TEXT UNIQUE NOT NULL,
        password_hash TEXT NOT NULL,
        last_login TIMESTAMP,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''',
    'CREATE INDEX IF NOT EXISTS idx_admins_email ON admins(email)',
]

MIN_PASSWORD_LENGTH = 6


class AdminAccounts:

    def __init__(self, db):
        self.db = db

    def count(self):
        try:
            row = self.db.run_one('SELECT COUNT(*) AS total FROM admins')
        except SQLAlchemyError as e:
            LoggingService.error('auth', 'Error counting admins', {'error': str(e)})
            raise StorageError('Failed to count admin accounts') from e
        return row['total'] if row else 0

    def get(self, admin_id):
        try:
            return self.db.run_one(
                'SELECT id, email, last_login, created_at FROM admins WHERE id = :id',
                {'id': admin_id}
            )
        except SQLAlchemyError as e:
            LoggingService.error('auth', 'Error getting admin', {'id': admin_id, 'error': str(e)})
            raise StorageError('Failed to load admin account') from e

    def create(self, email, password):
        """Create an admin account and return its id"""
        email = (email or '').strip().lower()
        if not email or not password:
            raise ValidationError('Email and password are required')
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long')

        try:
            return self.db.transaction(lambda executor: executor.run_insert(
                'INSERT INTO admins (email, password_hash) VALUES (:email, :password_hash)',
                {'email': email, 'password_hash': generate_password_hash(password)}
            ))
        except IntegrityError as e:
            raise ValidationError('An admin with this email already exists') from e
        except SQLAlchemyError as e:
            LoggingService.error('auth', 'Error creating admin', {'email': email, 'error': str(e)})
            raise StorageError('Failed to create admin account') from e

    def verify(self, email, password):
        """Return the admin row for valid credentials, else None"""
        email = (email or '').strip().lower()
        try:
            row = self.db.run_one(
                'SELECT id, email, password_hash FROM admins WHERE email = :email',
                {'email': email}
            )
            if not row or not check_password_hash(row['password_hash'], password or ''):
                return None

            self.db.run_write(
                'UPDATE admins SET last_login = CURRENT_TIMESTAMP WHERE id = :id',
                {'id': row['id']}
            )
        except SQLAlchemyError as e:
            LoggingService.error('auth', 'Error verifying admin credentials', {'email': email, 'error': str(e)})
            raise StorageError('Failed to verify credentials') from e

        return {'id': row['id'], 'email': row['email']}
