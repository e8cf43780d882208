"""
TASKPOINTS - Persistent Record Store
====================================
The only module that touches the data files.

- Readers take a shared flock on `<path>.lock`, writers an exclusive one.
  Both attempts are non-blocking: contention fails fast with LockContention.
- Writes go to a temp file in the same directory and are swapped in with
  os.replace, so a reader never sees a half-written file and a crash keeps
  the previous version.

The lock is advisory. A process that ignores the sidecar is not stopped.
"""

import fcntl
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .errors import CorruptData, LockContention

logger = logging.getLogger("taskpoints")

DocumentT = TypeVar("DocumentT", bound=BaseModel)

FILE_MODE = 0o644


@contextmanager
def advisory_lock(lock_path: Path, exclusive: bool) -> Iterator[None]:
    """Hold a shared or exclusive flock on lock_path, failing fast on contention"""
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    mode = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH

    with open(lock_path, "a") as handle:
        try:
            fcntl.flock(handle.fileno(), mode | fcntl.LOCK_NB)
        except BlockingIOError as exc:
            logger.warning(f"🔒 Lock busy: {lock_path}")
            raise LockContention(lock_path) from exc
        try:
            yield
        finally:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


class JsonStore:
    """Load/save one pydantic document to one JSON file"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @property
    def lock_path(self) -> Path:
        return self.path.with_name(self.path.name + ".lock")

    def load(self, model: Type[DocumentT]) -> DocumentT:
        """Read the document, or its zero value when the file is missing or empty"""
        with advisory_lock(self.lock_path, exclusive=False):
            try:
                raw = self.path.read_bytes()
            except FileNotFoundError:
                logger.debug(f"No data file yet at {self.path}, starting empty")
                return model()

            if not raw:
                return model()

            try:
                document = model.model_validate_json(raw)
            except ValidationError as exc:
                raise CorruptData(self.path, _summarize(exc)) from exc

        logger.debug(f"📂 Loaded {model.__name__} from {self.path}")
        return document

    def save(self, document: BaseModel) -> None:
        """Atomically replace the file with the serialized document"""
        payload = json.dumps(
            document.model_dump(mode="json", by_alias=True),
            indent=2,
            ensure_ascii=False
        ) + "\n"

        with advisory_lock(self.lock_path, exclusive=True):
            self._atomic_write(payload)

        logger.info(f"✅ Saved {type(document).__name__} to {self.path}")

    def _atomic_write(self, payload: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, FILE_MODE)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


def _summarize(exc: ValidationError) -> str:
    """First validation problem, short enough for a one-line message"""
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    more = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
    return f"{location}: {message}{more}" if location else f"{message}{more}"
