from deazytech.core.repository import ResourceRepository

SCHEMA = [
    '''
    CREATE TABLE IF NOT EXISTS testimonials (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        role TEXT NOT NULL,
        company TEXT NOT NULL,
        content TEXT NOT NULL,
        image_url TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''',
]

SCALAR_FIELDS = ('name', 'role', 'company', 'content', 'image_url')


def make_repository(db):
    return ResourceRepository(
        db, 'testimonials',
        scalar_fields=SCALAR_FIELDS,
        label_field='name',
        source='testimonials',
    )
