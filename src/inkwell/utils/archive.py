"""In-memory ZIP packaging for EPUB and ODT files."""

import io
import zipfile
from collections.abc import Mapping


def build_archive(mimetype: str, files: Mapping[str, bytes]) -> bytes:
    """
    Create an OCF-style ZIP package in memory.

    The mimetype entry MUST be:
    1. The first file in the archive
    2. Stored uncompressed (ZIP_STORED)

    All other files are compressed with ZIP_DEFLATED, in the order given.

    Args:
        mimetype: Content of the ``mimetype`` entry
        files: Archive names mapped to their content

    Returns:
        The ZIP archive
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("mimetype", mimetype, compress_type=zipfile.ZIP_STORED)
        for name, content in files.items():
            if name == "mimetype":
                continue
            archive.writestr(name, content, compress_type=zipfile.ZIP_DEFLATED)
    return buffer.getvalue()
