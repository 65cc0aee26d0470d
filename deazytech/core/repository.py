"""
Resource Repository
===================

One parameterized CRUD implementation for every relational resource.
A resource is a parent table of scalar columns plus zero or more child
attribute tables (one string per row, keyed by the parent id).

    experts = ResourceRepository(
        db, 'experts',
        scalar_fields=('name', 'role', 'bio', 'image_url', 'experience'),
        children=(ChildCollection('expertise', 'expert_expertise', 'expert_id', 'expertise'),),
    )

Child collections are replaced wholesale on update: a key present in the
update data (even an empty list) deletes and re-inserts the rows, a missing
key leaves them alone. Child rows are removed on delete by the schema's
ON DELETE CASCADE rule, not here.
"""

from sqlalchemy.exc import SQLAlchemyError

from .errors import StorageError
from .logging_service import LoggingService


class ChildCollection:
    """A one-to-many list-of-strings attribute stored in its own table"""

    def __init__(self, name, table, foreign_key, column):
        self.name = name
        self.table = table
        self.foreign_key = foreign_key
        self.column = column

    def __repr__(self):
        return f"ChildCollection({self.name!r} -> {self.table}.{self.column})"


class ResourceRepository:

    def __init__(self, db, table, scalar_fields, children=(), label_field=None, source=None):
        self.db = db
        self.table = table
        self.scalar_fields = tuple(scalar_fields)
        self.children = tuple(children)
        self.label_field = label_field or self.scalar_fields[0]
        self.source = source or table

    # ===== Reads =====

    def get_all(self):
        """All entities, newest first, with child collections assembled"""
        def work(executor):
            rows = executor.run(
                f'SELECT * FROM {self.table} ORDER BY created_at DESC, id DESC'
            )
            # One query per parent per collection; fine at CMS volumes
            return [self._assemble(executor, row) for row in rows]

        return self._guarded('list', work)

    def get_by_id(self, entity_id):
        return self._guarded('get', lambda executor: self._fetch(executor, entity_id), entity_id)

    def count(self, since=None):
        """Row count, optionally only rows created at or after ``since``"""
        def work(executor):
            if since is None:
                row = executor.run_one(f'SELECT COUNT(*) AS total FROM {self.table}')
            else:
                row = executor.run_one(
                    f'SELECT COUNT(*) AS total FROM {self.table} WHERE created_at >= :since',
                    {'since': since}
                )
            return row['total'] if row else 0

        return self._guarded('count', work)

    def recent(self, limit=5):
        """Lightweight (id, label, created_at) rows for activity feeds"""
        def work(executor):
            return executor.run(
                f'SELECT id, {self.label_field} AS label, created_at FROM {self.table} '
                f'ORDER BY created_at DESC, id DESC LIMIT :limit',
                {'limit': limit}
            )

        return self._guarded('recent', work)

    # ===== Writes =====

    def create(self, data):
        """Insert parent and children atomically, return the stored entity"""
        columns = ', '.join(self.scalar_fields)
        placeholders = ', '.join(f':{field}' for field in self.scalar_fields)
        values = {field: data.get(field) for field in self.scalar_fields}

        def work(executor):
            new_id = executor.run_insert(
                f'INSERT INTO {self.table} ({columns}) VALUES ({placeholders})',
                values
            )

            for child in self.children:
                items = data.get(child.name) or []
                if items:
                    self._insert_children(executor, child, new_id, items)

            entity = self._fetch(executor, new_id)
            if entity is None:
                raise StorageError(f'Failed to create {self.source}')
            return entity

        entity = self._guarded('create', work)
        LoggingService.log_user_action(self.source, f'created {self.table} #{entity["id"]}')
        return entity

    def update(self, entity_id, data):
        """
        Partial update in one transaction.

        Scalar fields are written only when truthy; the UPDATE is skipped
        when none are. Each child collection present in ``data`` is replaced.
        """
        updates = [field for field in self.scalar_fields if data.get(field)]

        def work(executor):
            if updates:
                set_clause = ', '.join(f'{field} = :{field}' for field in updates)
                params = {field: data[field] for field in updates}
                params['id'] = entity_id
                executor.run_write(
                    f'UPDATE {self.table} SET {set_clause}, updated_at = CURRENT_TIMESTAMP WHERE id = :id',
                    params
                )

            for child in self.children:
                if data.get(child.name) is None:
                    continue
                executor.run_write(
                    f'DELETE FROM {child.table} WHERE {child.foreign_key} = :id',
                    {'id': entity_id}
                )
                if data[child.name]:
                    self._insert_children(executor, child, entity_id, data[child.name])

        self._guarded('update', work, entity_id)
        LoggingService.log_user_action(self.source, f'updated {self.table} #{entity_id}')

    def delete(self, entity_id):
        """Delete the parent row; returns False if nothing matched"""
        def work(executor):
            return executor.run_write(
                f'DELETE FROM {self.table} WHERE id = :id', {'id': entity_id}
            ) > 0

        deleted = self._guarded('delete', work, entity_id)
        if deleted:
            LoggingService.log_user_action(self.source, f'deleted {self.table} #{entity_id}')
        return deleted

    # ===== Helpers =====

    def _fetch(self, executor, entity_id):
        row = executor.run_one(f'SELECT * FROM {self.table} WHERE id = :id', {'id': entity_id})
        if row is None:
            return None
        return self._assemble(executor, row)

    def _assemble(self, executor, row):
        entity = dict(row)
        for child in self.children:
            child_rows = executor.run(
                f'SELECT {child.column} FROM {child.table} '
                f'WHERE {child.foreign_key} = :parent_id ORDER BY id',
                {'parent_id': row['id']}
            )
            entity[child.name] = [child_row[child.column] for child_row in child_rows]
        return entity

    def _insert_children(self, executor, child, parent_id, items):
        executor.run_many(
            f'INSERT INTO {child.table} ({child.foreign_key}, {child.column}) '
            f'VALUES (:parent_id, :value)',
            [{'parent_id': parent_id, 'value': item} for item in items]
        )

    def _guarded(self, operation, work, entity_id=None):
        """Run ``work`` in a transaction; log and wrap driver errors"""
        try:
            return self.db.transaction(work)
        except SQLAlchemyError as e:
            LoggingService.error(self.source, f"Error during {operation} on {self.table}", {
                'operation': operation,
                'table': self.table,
                'id': entity_id,
                'error': str(e),
            })
            raise StorageError(f'Failed to {operation} {self.source}') from e
