from deazytech.core.repository import ResourceRepository

SCHEMA = [
    '''
    CREATE TABLE IF NOT EXISTS clients (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        image_url TEXT,
        website TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''',
]

# image_url holds the logo
SCALAR_FIELDS = ('name', 'image_url', 'website')


def make_repository(db):
    return ResourceRepository(
        db, 'clients',
        scalar_fields=SCALAR_FIELDS,
        label_field='name',
        source='clients',
    )
