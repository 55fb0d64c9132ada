import os
import re
import secrets

from django.core.files.storage import default_storage
from django.utils import timezone

UPLOAD_CATEGORIES = ('projects', 'skills', 'avatars')
ALLOWED_EXTENSIONS = ('jpeg', 'jpg', 'png', 'gif', 'webp')
MAX_UPLOAD_MB = 5


def generated_name(original_name):
    stem, ext = os.path.splitext(os.path.basename(original_name))
    stem = re.sub(r'[^a-zA-Z0-9]', '-', stem).lower() or 'image'
    stamp = timezone.now().strftime('%Y%m%d%H%M%S')
    return f'{stem}-{stamp}-{secrets.randbelow(10**9)}{ext.lower()}'


def store_image(category, f):
    """Save under <UPLOAD_ROOT>/<category>/ and return (path, url)."""
    if category not in UPLOAD_CATEGORIES:
        raise ValueError(f'Unknown upload category: {category}')
    path = default_storage.save(f'{category}/{generated_name(f.name)}', f)
    return path, default_storage.url(path)
