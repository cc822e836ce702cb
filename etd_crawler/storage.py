"""Output directory layout: `<id>.json` records next to their attachments."""

import json
import os
import tempfile

from .errors import StorageError
from .models import DocumentRecord


class OutputStore:
    def __init__(self, output_dir: str):
        self.output_dir = output_dir

    def ensure(self):
        try:
            os.makedirs(self.output_dir, exist_ok=True)
        except OSError as e:
            raise StorageError(self.output_dir, e) from e

    def record_path(self, document_id: str) -> str:
        return os.path.join(self.output_dir, f"{document_id}.json")

    def attachment_path(self, name: str) -> str:
        return os.path.join(self.output_dir, name)

    def has_record(self, document_id: str) -> bool:
        """Resumption marker: a record written by an earlier run."""
        return os.path.exists(self.record_path(document_id))

    def write_attachment(self, name: str, data: bytes) -> str:
        path = self.attachment_path(name)
        self._write(path, data)
        return path

    def write_record(self, record: DocumentRecord) -> str:
        path = self.record_path(record.document_id)
        payload = json.dumps(record.to_json_dict(), ensure_ascii=False).encode("utf-8")
        self._write(path, payload)
        return path

    def _write(self, path: str, data: bytes):
        # Temp file + rename so a partial <id>.json never looks like a finished record
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.output_dir,
                                            prefix=f".{os.path.basename(path)}.",
                                            suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(path, e) from e
