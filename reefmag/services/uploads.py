"""File upload service for PDFs, covers and collection images."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path

from flask import current_app
from werkzeug.datastructures import FileStorage

from reefmag.errors import ValidationError


IMAGE_EXTENSIONS = frozenset({'png', 'jpg', 'jpeg', 'gif', 'webp', 'svg'})
PDF_EXTENSIONS = frozenset({'pdf'})


@dataclass(frozen=True)
class UploadFolder:
    name: str
    url_prefix: str
    extensions: frozenset
    protected: bool = False


# PDFs are only reachable through the token-checked /uploads route.
FOLDERS = {
    'pdfs': UploadFolder('pdfs', '/uploads', PDF_EXTENSIONS, protected=True),
    'covers': UploadFolder('covers', '/media/covers', IMAGE_EXTENSIONS),
    'splitted': UploadFolder('splitted', '/media/splitted', PDF_EXTENSIONS),
    'sponsors': UploadFolder('sponsors', '/media/sponsors', IMAGE_EXTENSIONS),
    'products': UploadFolder('products', '/media/products', IMAGE_EXTENSIONS),
}

PUBLIC_FOLDERS = frozenset(name for name, folder in FOLDERS.items() if not folder.protected)


def _extension(filename: str) -> str:
    return filename.rsplit('.', 1)[1].lower() if '.' in filename else ''


def upload_root() -> Path:
    return Path(current_app.config['UPLOAD_ROOT']).resolve()


def folder_path(folder: str) -> Path:
    """Return (and ensure) the directory backing an upload folder."""
    path = upload_root() / FOLDERS[folder].name
    path.mkdir(parents=True, exist_ok=True)
    return path


def ensure_upload_dirs() -> None:
    for name in FOLDERS:
        folder_path(name)


def _ensure_within_root(path: Path) -> None:
    root = upload_root().resolve()
    if root not in path.resolve().parents:
        raise PermissionError('Attempted to access a file outside the upload root')


def has_file(file: FileStorage | None) -> bool:
    return bool(file and file.filename)


def save_upload(file: FileStorage, folder: str) -> str:
    """
    Store an uploaded file under a fresh unique name.

    Args:
        file: The uploaded file from the request
        folder: Key of FOLDERS the file belongs to

    Returns:
        URL path under which the stored file is served
    """
    upload_folder = FOLDERS[folder]
    if not has_file(file):
        raise ValidationError(f"{folder} file is required")

    ext = _extension(file.filename)
    if ext not in upload_folder.extensions:
        raise ValidationError(f"File type .{ext} is not allowed for {folder}")

    filename = f"{uuid.uuid4().hex}.{ext}"
    target = folder_path(folder) / filename
    _ensure_within_root(target)

    file.stream.seek(0)
    file.save(str(target))
    current_app.logger.info(f"Stored upload {filename} in {folder}")
    return f"{upload_folder.url_prefix}/{filename}"


def path_for_url(file_url: str | None) -> Path | None:
    """Map a stored URL path back onto the filesystem."""
    if not file_url:
        return None
    for name, upload_folder in FOLDERS.items():
        prefix = upload_folder.url_prefix + '/'
        if file_url.startswith(prefix):
            filename = file_url[len(prefix):].split('?', 1)[0]
            if not filename or '/' in filename:
                return None
            target = upload_root() / name / filename
            _ensure_within_root(target)
            return target
    return None


def filename_for_url(file_url: str | None) -> str | None:
    path = path_for_url(file_url)
    return path.name if path else None


def delete_upload(file_url: str | None) -> bool:
    """
    Delete an uploaded file given its URL path.

    Returns:
        True if a file was removed, False otherwise
    """
    target = path_for_url(file_url)
    if target is None:
        return False

    if target.exists() and target.is_file():
        target.unlink()
        current_app.logger.info(f"Deleted upload {file_url}")
        return True

    return False


__all__ = [
    'FOLDERS',
    'PUBLIC_FOLDERS',
    'UploadFolder',
    'ensure_upload_dirs',
    'folder_path',
    'has_file',
    'save_upload',
    'delete_upload',
    'path_for_url',
    'filename_for_url',
]
