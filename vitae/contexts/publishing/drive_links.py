"""
Google Drive share-link utilities.

Supported link shapes:
    - https://drive.google.com/file/d/{FILE_ID}/view?usp=sharing
    - https://drive.google.com/open?id={FILE_ID}
    - https://drive.google.com/uc?id={FILE_ID}
    - a bare file id
"""

import re
from typing import Optional

FILE_PATH_ID = re.compile(r"/file/d/([a-zA-Z0-9_-]+)")
QUERY_ID = re.compile(r"[?&]id=([a-zA-Z0-9_-]+)")
BARE_ID = re.compile(r"^[a-zA-Z0-9_-]+$")

DIRECT_DOWNLOAD_URL = "https://drive.google.com/uc?export=download&id={file_id}"


def extract_google_drive_file_id(link: str) -> Optional[str]:
    """Return the file id of a Drive link or bare id, or None if none is recognised."""
    if not link:
        return None

    for pattern in (FILE_PATH_ID, QUERY_ID):
        match = pattern.search(link)
        if match:
            return match.group(1)

    if BARE_ID.match(link.strip()):
        return link.strip()

    return None


def convert_to_direct_download_link(share_link: str) -> Optional[str]:
    """
    Convert a Drive share link to a direct download URL.

    Example:
        >>> convert_to_direct_download_link("https://drive.google.com/file/d/abc123/view")
        'https://drive.google.com/uc?export=download&id=abc123'
    """
    file_id = extract_google_drive_file_id(share_link)
    if not file_id:
        return None
    return DIRECT_DOWNLOAD_URL.format(file_id=file_id)
