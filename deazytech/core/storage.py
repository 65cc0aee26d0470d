"""
Storage Utility
===============

Image upload with local / cloud (DigitalOcean Spaces) branching.
"""

import os
import re
import time

from .config import _get_config_value
from .errors import ValidationError

ALLOWED_IMAGE_TYPES = ('image/jpeg', 'image/png', 'image/gif', 'image/webp')


def is_cloud_storage():
    """Check if using cloud storage"""
    return _get_config_value('STORAGE_TYPE', 'local') == 'cloud'


def sanitize_folder(folder):
    """Reduce a requested folder to a single safe path segment"""
    folder = re.sub(r'[^a-zA-Z0-9_-]', '', folder or '')
    return folder or 'images'


def unique_filename(original_name):
    """Millisecond timestamp prefix plus the name stripped to [a-zA-Z0-9.-]"""
    cleaned = re.sub(r'[^a-zA-Z0-9.-]', '', original_name or '').lstrip('.')
    return f"{int(time.time() * 1000)}-{cleaned or 'upload'}"


def validate_image(file, max_size=None):
    """Check MIME type and size of an uploaded FileStorage.

    Returns the file's bytes. Raises ValidationError for anything that
    should not reach storage.
    """
    if file is None or not file.filename:
        raise ValidationError('No file uploaded')

    if file.mimetype not in ALLOWED_IMAGE_TYPES:
        raise ValidationError('Invalid file type')

    if max_size is None:
        max_size = int(_get_config_value('MAX_UPLOAD_SIZE', 5 * 1024 * 1024))

    file_bytes = file.read()
    if len(file_bytes) > max_size:
        raise ValidationError('File too large')

    return file_bytes


def upload_image(file_bytes, original_name, folder='images', content_type=None):
    """Store image bytes under ``folder``.

    Returns {filename, path, url}: ``path`` is relative to the upload root,
    ``url`` is public (cloud) or served by the app under /uploads (local).
    """
    folder = sanitize_folder(folder)
    filename = unique_filename(original_name)
    relative_path = f"{folder}/{filename}"

    if is_cloud_storage():
        url = _upload_to_spaces(file_bytes, relative_path, content_type)
    else:
        url = _save_locally(file_bytes, relative_path)

    return {
        'filename': filename,
        'path': relative_path,
        'url': url,
    }


def _spaces_client():
    import boto3
    region = _get_config_value('SPACES_REGION')
    return boto3.client(
        's3',
        region_name=region,
        endpoint_url=f"https://{region}.digitaloceanspaces.com",
        aws_access_key_id=_get_config_value('SPACES_KEY'),
        aws_secret_access_key=_get_config_value('SPACES_SECRET'),
    )


def _upload_to_spaces(file_bytes, relative_path, content_type):
    """Upload to DigitalOcean Spaces via boto3."""
    region = _get_config_value('SPACES_REGION')
    space_name = _get_config_value('SPACES_NAME')
    object_key = f"{_get_config_value('SPACES_FOLDER', 'uploads')}/{relative_path}"

    _spaces_client().put_object(
        Bucket=space_name,
        Key=object_key,
        Body=file_bytes,
        ACL='public-read',
        ContentType=content_type or 'application/octet-stream',
    )

    return f"https://{space_name}.{region}.digitaloceanspaces.com/{object_key}"


def _save_locally(file_bytes, relative_path):
    """Save under UPLOAD_FOLDER, served back at /uploads/<path>."""
    upload_root = _get_config_value('UPLOAD_FOLDER')
    filepath = os.path.join(upload_root, *relative_path.split('/'))
    os.makedirs(os.path.dirname(filepath), exist_ok=True)
    with open(filepath, 'wb') as f:
        f.write(file_bytes)
    return f"/uploads/{relative_path}"
