"""
Lecture file storage on top of Django's default_storage.
Files are saved under LECTURE_UPLOAD_DIR with a random name that keeps the
original extension; the original filename is stored on the Lecture row.
"""
import logging
import os
import uuid

from django.conf import settings
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)


class LectureFileTooLarge(Exception):
    pass


def max_upload_bytes():
    return settings.LECTURE_MAX_UPLOAD_MB * 1024 * 1024


def store_lecture_file(uploaded):
    """
    Save an uploaded file and return its storage path.
    Raises LectureFileTooLarge above the configured limit; storage errors propagate.
    """
    size = getattr(uploaded, 'size', None)
    if size is not None and size > max_upload_bytes():
        raise LectureFileTooLarge(
            f'File is larger than {settings.LECTURE_MAX_UPLOAD_MB} MB'
        )
    ext = os.path.splitext(uploaded.name or '')[1].lower()
    name = f'{settings.LECTURE_UPLOAD_DIR}/{uuid.uuid4().hex}{ext}'
    path = default_storage.save(name, uploaded)
    logger.info('Lecture file stored path=%s size=%s', path, size)
    return path


def delete_lecture_file(path):
    """Remove a stored file. Missing files are ignored; storage errors are logged, not raised."""
    if not path:
        return
    try:
        if default_storage.exists(path):
            default_storage.delete(path)
    except OSError:
        logger.exception('Could not delete lecture file path=%s', path)


def lecture_file_exists(path):
    return bool(path) and default_storage.exists(path)


def open_lecture_file(path):
    return default_storage.open(path, 'rb')
