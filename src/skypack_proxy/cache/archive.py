"""Archive packaging for generated skeleton directories."""

from __future__ import annotations

import io
import os
import zipfile

# Fixed timestamp so identical inputs produce identical archives.
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


def make_archive_from_directory(cwd: str, *, prefix_path: str, compression_level: int) -> bytes:
    """Zip every file under cwd, rooted at prefix_path inside the archive.

    Args:
        cwd: Directory to package.
        prefix_path: Archive-relative root (e.g. ``node_modules/preact``).
        compression_level: 0 stores members; 1-9 deflates at that level.

    Returns:
        The archive bytes.
    """
    if not 0 <= int(compression_level) <= 9:
        raise ValueError(f"compression level must be between 0 and 9, got {compression_level}")
    level = int(compression_level)
    compression = zipfile.ZIP_STORED if level == 0 else zipfile.ZIP_DEFLATED

    members = []
    for dirpath, dirnames, filenames in os.walk(cwd):
        dirnames.sort()
        for filename in sorted(filenames):
            full = os.path.join(dirpath, filename)
            rel = os.path.relpath(full, cwd).replace(os.sep, "/")
            members.append((rel, full))

    prefix = prefix_path.strip("/")
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for rel, full in members:
            info = zipfile.ZipInfo(f"{prefix}/{rel}" if prefix else rel, date_time=_ZIP_EPOCH)
            info.compress_type = compression
            info.external_attr = 0o644 << 16
            with open(full, "rb") as fh:
                data = fh.read()
            if compression == zipfile.ZIP_DEFLATED:
                zf.writestr(info, data, compresslevel=level)
            else:
                zf.writestr(info, data)
    return buf.getvalue()
