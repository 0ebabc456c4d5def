"""Change notification bus.

In-process observers connect to ``data_changed``. Other application
instances sharing the same database are told through a small stamp file next
to it: every publish rewrites the stamp, and a QFileSystemWatcher in each
instance turns a foreign write into ``external_change`` so that instance
reloads its tables. Delivery across instances is eventually consistent; the
last writer to the database wins.
"""
import logging
import uuid
from pathlib import Path

from PySide6.QtCore import QObject, QFileSystemWatcher, Signal

logger = logging.getLogger(__name__)


class ChangeBus(QObject):
    data_changed = Signal(str)      # table name, emitted after every local mutation
    external_change = Signal(str)   # table name written by another instance

    def __init__(self, stamp_path=None, parent=None):
        super().__init__(parent)
        self.instance_id = uuid.uuid4().hex
        self.stamp_path = Path(stamp_path) if stamp_path else None
        self._watcher = None
        if self.stamp_path is not None:
            self._start_watching()

    def _start_watching(self):
        self.stamp_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.stamp_path.exists():
            self.stamp_path.write_text("", encoding="utf-8")
        self._watcher = QFileSystemWatcher([str(self.stamp_path)], self)
        self._watcher.fileChanged.connect(self._on_stamp_changed)

    def subscribe(self, handler):
        self.data_changed.connect(handler)

    def subscribe_external(self, handler):
        self.external_change.connect(handler)

    def publish(self, table: str):
        self.data_changed.emit(table)
        if self.stamp_path is not None:
            try:
                self.stamp_path.write_text(f"{self.instance_id} {table}", encoding="utf-8")
            except OSError as e:
                logger.warning("Could not write sync stamp %s: %s", self.stamp_path, e)

    def _on_stamp_changed(self, path):
        # some platforms drop the watch when the file is replaced
        if self._watcher is not None and path not in self._watcher.files():
            self._watcher.addPath(path)
        try:
            content = Path(path).read_text(encoding="utf-8").split()
        except OSError as e:
            logger.warning("Could not read sync stamp %s: %s", path, e)
            return
        if len(content) != 2:
            return
        writer, table = content
        if writer == self.instance_id:
            return
        logger.info("Change to %s announced by another instance", table)
        self.external_change.emit(table)
