import os

from flask import abort, current_app, jsonify, request, send_from_directory

from deazytech.core.errors import UnauthorizedError
from deazytech.core.logging_service import LoggingService
from deazytech.core.storage import upload_image, validate_image
from deazytech.modules.auth import has_session
from . import uploads_bp


@uploads_bp.route('/api/upload', methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE'])
def upload():
    """Store an uploaded image and return {filename, path, url}"""
    if request.method != 'POST':
        return jsonify({'error': 'Method not allowed'}), 405

    if not has_session():
        raise UnauthorizedError()

    file = request.files.get('image') or request.files.get('file')
    file_bytes = validate_image(file)

    result = upload_image(file_bytes, file.filename, request.form.get('folder'), file.mimetype)
    LoggingService.log_user_action('uploads', 'uploaded image', details={'path': result['path']})
    return jsonify(result)


@uploads_bp.route('/uploads/<path:filename>')
def serve_upload(filename):
    """Serve locally stored uploads"""
    upload_root = current_app.config['UPLOAD_FOLDER']
    if not os.path.isdir(upload_root):
        abort(404)
    return send_from_directory(upload_root, filename)
