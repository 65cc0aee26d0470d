from deazytech.core.repository import ChildCollection, ResourceRepository

SCHEMA = [
    '''
    CREATE TABLE IF NOT EXISTS services (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        description TEXT,
        image_url TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS service_features (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        service_id INTEGER NOT NULL,
        feature TEXT NOT NULL,
        FOREIGN KEY (service_id) REFERENCES services(id) ON DELETE CASCADE
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS service_benefits (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        service_id INTEGER NOT NULL,
        benefit TEXT NOT NULL,
        FOREIGN KEY (service_id) REFERENCES services(id) ON DELETE CASCADE
    )
    ''',
    'CREATE INDEX IF NOT EXISTS idx_service_features_service ON service_features(service_id)',
    'CREATE INDEX IF NOT EXISTS idx_service_benefits_service ON service_benefits(service_id)',
]

SCALAR_FIELDS = ('title', 'description', 'image_url')


def make_repository(db):
    return ResourceRepository(
        db, 'services',
        scalar_fields=SCALAR_FIELDS,
        children=(
            ChildCollection('features', 'service_features', 'service_id', 'feature'),
            ChildCollection('benefits', 'service_benefits', 'service_id', 'benefit'),
        ),
        label_field='title',
        source='services',
    )
