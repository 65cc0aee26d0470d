"""
Admin CRUD Routes
=================

Registers the admin page and JSON endpoints for one relational resource on
its blueprint:

    GET         /               admin list page
    GET, POST   /api            list / create
    GET         /api/<id>       read
    PUT         /api/<id>       partial update
    DELETE      /api/<id>       delete

The blueprint lives under /admin, so the gate has already checked the
session before any of these run.
"""

from flask import current_app, jsonify, render_template, request

from .api_client import parse_string_list
from .errors import NotFoundError, ValidationError
from .logging_service import LoggingService
from .storage import upload_image, validate_image

SCALAR_TYPES = (str, int, float)


class ResourceForm:
    """Reads a resource payload from a JSON body or a multipart form"""

    def __init__(self, scalar_fields, list_fields=(), required=(), image_folder=None):
        self.scalar_fields = tuple(scalar_fields)
        self.list_fields = tuple(list_fields)
        self.required = tuple(required)
        self.image_folder = image_folder

    def parse(self, partial=False):
        """Known fields present in the request.

        Absent keys stay absent so updates can tell "leave alone" from
        "clear". A multipart ``image`` file is stored only once the payload
        has been accepted, and its URL becomes ``image_url``.
        """
        if request.is_json:
            payload = request.get_json(silent=True)
            if not isinstance(payload, dict):
                raise ValidationError('Request body must be a JSON object')
            data = self._from_json(payload)
        else:
            data = self._from_form()

        image, file_bytes = None, None
        if self.image_folder:
            image = request.files.get('image')
            if image is not None and image.filename:
                file_bytes = validate_image(image)

        if not partial:
            missing = [field for field in self.required if not data.get(field)]
            if missing:
                raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        # Nothing is stored until the whole payload has been accepted
        if file_bytes is not None:
            stored = upload_image(file_bytes, image.filename, self.image_folder, image.mimetype)
            data['image_url'] = stored['url']

        return data

    def _from_json(self, payload):
        data = {}
        for field in self.scalar_fields:
            if field in payload:
                value = payload[field]
                if value is not None and not isinstance(value, SCALAR_TYPES):
                    raise ValidationError(f'Invalid value for {field}')
                data[field] = value.strip() if isinstance(value, str) else value
        for field in self.list_fields:
            if field in payload:
                data[field] = parse_string_list(payload[field])
        return data

    def _from_form(self):
        data = {}
        form = request.form
        for field in self.scalar_fields:
            if field in form:
                data[field] = form.get(field, '').strip()
        for field in self.list_fields:
            if field in form:
                values = form.getlist(field)
                if len(values) == 1:
                    data[field] = parse_string_list(values[0])
                else:
                    data[field] = [v.strip() for v in values if v.strip()]
        return data


def register_crud_routes(bp, resource_name, form, label, title=None):
    """Attach list/create/read/update/delete views for ``resource_name``"""
    title = title or resource_name.capitalize()

    def repository():
        return current_app.extensions['deazytech'].repositories[resource_name]

    def manage():
        return render_template('admin/resource_list.html',
                               title=title,
                               resource=resource_name,
                               items=repository().get_all(),
                               fields=form.scalar_fields + form.list_fields)

    def collection():
        if request.method == 'POST':
            data = form.parse()
            entity = repository().create(data)
            LoggingService.info(resource_name, f'{label} created', {'id': entity['id']})
            return jsonify(entity), 201
        return jsonify(repository().get_all())

    def item(entity_id):
        repo = repository()

        if request.method == 'GET':
            entity = repo.get_by_id(entity_id)
            if entity is None:
                raise NotFoundError(f'{label} not found')
            return jsonify(entity)

        if request.method == 'PUT':
            if repo.get_by_id(entity_id) is None:
                raise NotFoundError(f'{label} not found')
            data = form.parse(partial=True)
            repo.update(entity_id, data)
            return jsonify(repo.get_by_id(entity_id))

        if not repo.delete(entity_id):
            raise NotFoundError(f'{label} not found')
        return jsonify({'message': f'{label} deleted successfully'})

    bp.add_url_rule('/', 'manage', manage)
    bp.add_url_rule('/api', 'collection', collection, methods=['GET', 'POST'])
    bp.add_url_rule('/api/<int:entity_id>', 'item', item, methods=['GET', 'PUT', 'DELETE'])
