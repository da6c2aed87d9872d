"""
Note Store.

File-backed persistence of the note collection. The whole collection lives
in one pretty-printed UTF-8 JSON object keyed by note id, and every change
writes a temp file beside it and renames it into place.

Every public operation holds a lock for its full read-modify-write sequence.
The lock is shared by all NoteStore instances in the process that point at
the same file, so an autosave firing while another save is in progress
cannot interleave with it. Nothing coordinates separate processes.

Failure policy: I/O and parse errors are logged and reported as False or an
empty mapping, never raised. The one exception is the constructor, which
raises StorageInitError when the data directory cannot be created.

Usage:
    from stickynotes.repositories.note import NoteStore

    store = NoteStore("data")
    store.save(Note.create())
    notes = store.load_all()
"""

import json
import os
import shutil
import tempfile
import threading
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from stickynotes.core.exceptions import CorruptDataError, StorageInitError
from stickynotes.core.logging import get_logger
from stickynotes.models.note import Note

logger = get_logger(__name__)

DEFAULT_DATA_DIR = "data"
DEFAULT_FILE_NAME = "notes.json"

_document_adapter = TypeAdapter(dict[str, Note | None])

_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    """Return the process-wide lock for a backing file."""
    key = path.resolve()
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _locks[key] = lock
        return lock


class NoteStore:
    """
    Concurrency-safe key/value persistence of notes to a single JSON file.

    Load results contain only notes passing Note.is_valid(); malformed
    entries are dropped, never repaired.
    """

    def __init__(
        self,
        data_dir: str | Path = DEFAULT_DATA_DIR,
        file_name: str = DEFAULT_FILE_NAME,
    ) -> None:
        """
        Initialize the store and create the data directory if needed.

        Args:
            data_dir: Directory holding the backing file
            file_name: Name of the backing file inside data_dir

        Raises:
            StorageInitError: If the data directory cannot be created
        """
        self._data_dir = Path(data_dir)
        self._path = self._data_dir / file_name
        self._ensure_data_dir()
        self._lock = _lock_for(self._path)

    @classmethod
    def from_config(cls) -> "NoteStore":
        """Build a store from storage.yaml and the STICKYNOTES_DATA_DIR override."""
        from stickynotes.core.config import get_app_config, get_data_dir

        return cls(get_data_dir(), get_app_config().storage.file_name)

    @property
    def path(self) -> Path:
        """Path of the backing file."""
        return self._path

    def _ensure_data_dir(self) -> None:
        if self._data_dir.is_dir():
            return
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(
                "Failed to create data directory",
                extra={"data_dir": str(self._data_dir), "error": str(e)},
            )
            raise StorageInitError(f"Cannot create data directory: {self._data_dir}") from e
        logger.info("Created data directory", extra={"data_dir": str(self._data_dir)})

    # -------------------------------------------------------------------------
    # Unlocked helpers. Callers must hold self._lock.
    # -------------------------------------------------------------------------

    def _read_document(self) -> dict[str, Note | None]:
        """
        Read and type-check the backing file.

        Raises:
            CorruptDataError: If the file is not JSON, not an object, or
                holds a record with wrongly-typed fields
            OSError: If the file cannot be read
        """
        try:
            text = self._path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptDataError("Notes file is not valid UTF-8") from e

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Invalid JSON in notes file: {e}") from e

        if raw is None:
            return {}
        try:
            return _document_adapter.validate_python(raw)
        except PydanticValidationError as e:
            raise CorruptDataError(
                f"Notes file does not match the note schema ({e.error_count()} errors)"
            ) from e

    def _load_unlocked(self) -> dict[str, Note]:
        if not self._path.exists():
            logger.debug("No notes file found, starting fresh", extra={"path": str(self._path)})
            return {}

        try:
            document = self._read_document()
        except CorruptDataError as e:
            logger.error("Ignoring corrupt notes file", extra={"path": str(self._path), "error": e.message})
            return {}
        except OSError as e:
            logger.error("Failed to read notes file", extra={"path": str(self._path), "error": str(e)})
            return {}

        notes: dict[str, Note] = {}
        for note_id, note in document.items():
            if note is not None and note.is_valid():
                notes[note_id] = note
            else:
                logger.warning("Skipping invalid note data", extra={"note_id": note_id})

        logger.debug("Loaded notes from storage", extra={"count": len(notes)})
        return notes

    def _write_unlocked(self, notes: dict[str, Note]) -> None:
        """
        Serialize the full collection and replace the backing file.

        The document is encoded up front and written to a sibling temp file
        that is then renamed over the backing file, so a failure at any step
        leaves the previous file as it was.

        Raises:
            OSError: If the file cannot be written
            ValueError: If the collection cannot be serialized or encoded
        """
        document = {note_id: note.to_record() for note_id, note in notes.items()}
        data = json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")

        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    def save(self, note: Note | None) -> bool:
        """
        Insert or overwrite a note.

        Args:
            note: Note to persist

        Returns:
            True if written; False for a missing or invalid note (storage
            untouched) or on any I/O or serialization failure
        """
        if note is None:
            logger.warning("Attempted to save null note")
            return False

        if not note.is_valid():
            logger.warning("Attempted to save invalid note", extra={"note_id": note.id})
            return False

        with self._lock:
            try:
                notes = self._load_unlocked()
                notes[note.id] = note.model_copy()
                self._write_unlocked(notes)
            except (OSError, TypeError, ValueError) as e:
                logger.error("Failed to save note", extra={"note_id": note.id, "error": str(e)})
                return False

        logger.info("Note saved", extra={"note_id": note.id})
        return True

    def load_all(self) -> dict[str, Note]:
        """
        Load every valid note.

        Returns:
            Mapping of note id to Note; empty if the file is missing,
            unreadable or corrupt
        """
        with self._lock:
            return self._load_unlocked()

    def delete(self, note_id: str) -> bool:
        """
        Remove a note.

        Args:
            note_id: Id of the note to remove

        Returns:
            True if the note was present and the file was rewritten
        """
        if not note_id or not note_id.strip():
            logger.warning("Attempted to delete note with empty id")
            return False

        with self._lock:
            try:
                notes = self._load_unlocked()
                if notes.pop(note_id, None) is None:
                    logger.warning("Note not found for deletion", extra={"note_id": note_id})
                    return False
                self._write_unlocked(notes)
            except (OSError, TypeError, ValueError) as e:
                logger.error("Failed to delete note", extra={"note_id": note_id, "error": str(e)})
                return False

        logger.info("Note deleted", extra={"note_id": note_id})
        return True

    def clear_all(self) -> bool:
        """
        Remove the backing file.

        Returns:
            True if the file is gone afterwards, including when it never
            existed; False if removal failed
        """
        with self._lock:
            try:
                self._path.unlink(missing_ok=True)
            except OSError as e:
                logger.error("Failed to clear notes", extra={"path": str(self._path), "error": str(e)})
                return False

        logger.info("All notes cleared", extra={"path": str(self._path)})
        return True

    def count(self) -> int:
        """Number of valid stored notes."""
        with self._lock:
            return len(self._load_unlocked())

    def exists(self, note_id: str) -> bool:
        """Check whether a valid note with this id is stored."""
        if not note_id or not note_id.strip():
            return False
        with self._lock:
            return note_id in self._load_unlocked()

    def backup(self, backup_path: str | Path) -> bool:
        """
        Copy the backing file byte for byte.

        Args:
            backup_path: Destination file; overwritten if present. Its
                directory must already exist.

        Returns:
            True on success; False if there is nothing to back up yet or
            the copy failed
        """
        destination = Path(backup_path)
        with self._lock:
            if not self._path.exists():
                logger.warning("No notes file to back up", extra={"path": str(self._path)})
                return False
            try:
                shutil.copyfile(self._path, destination)
            except OSError as e:
                logger.error("Failed to create backup", extra={"backup_path": str(destination), "error": str(e)})
                return False

        logger.info("Backup created", extra={"backup_path": str(destination)})
        return True
