from deazytech.core.repository import ChildCollection, ResourceRepository

SCHEMA = [
    '''
    CREATE TABLE IF NOT EXISTS experts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        role TEXT NOT NULL,
        bio TEXT,
        image_url TEXT,
        experience TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS expert_expertise (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        expert_id INTEGER NOT NULL,
        expertise TEXT NOT NULL,
        FOREIGN KEY (expert_id) REFERENCES experts(id) ON DELETE CASCADE
    )
    ''',
    'CREATE INDEX IF NOT EXISTS idx_expert_expertise_expert ON expert_expertise(expert_id)',
]

SCALAR_FIELDS = ('name', 'role', 'bio', 'image_url', 'experience')


def make_repository(db):
    return ResourceRepository(
        db, 'experts',
        scalar_fields=SCALAR_FIELDS,
        children=(ChildCollection('expertise', 'expert_expertise', 'expert_id', 'expertise'),),
        label_field='name',
        source='experts',
    )
