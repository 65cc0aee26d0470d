from deazytech.core.repository import ResourceRepository

SCHEMA = [
    '''
    CREATE TABLE IF NOT EXISTS industries (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        description TEXT,
        image_url TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''',
]

SCALAR_FIELDS = ('name', 'description', 'image_url')


def make_repository(db):
    return ResourceRepository(db, 'industries', scalar_fields=SCALAR_FIELDS, label_field='name')
