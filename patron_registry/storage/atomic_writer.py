import logging
import os
import tempfile
from typing import Optional


logger = logging.getLogger(__name__)


class AtomicFileWriter:
    """
    Write text to a temporary file next to the target and move it into place
    with os.replace, so readers see either the old file or the complete new
    one, never a truncated mix.

    Behaviour:
      - Create a uniquely named temporary file in the target's directory.
      - Write the full content in the requested encoding, flush and
        optionally fsync it.
      - Atomically rename the temporary file onto the target.
      - Remove the temporary file if anything fails before the rename.
    """

    def __init__(self, fsync_after_write: bool = True, temp_suffix: str = ".tmp") -> None:
        self.fsync_after_write = bool(fsync_after_write)
        self.temp_suffix = str(temp_suffix)

    def atomic_write(self, target_path: str, content: str, encoding: str = "utf-8") -> None:
        """
        Atomically replace `target_path` with `content`.

        Raises
        ------
        OSError:
            If writing, syncing or renaming fails. The previous file, if any,
            is left untouched.
        """
        if not target_path:
            raise OSError("target_path must be a non-empty path")

        target_path = os.fspath(target_path)
        dirpath = os.path.dirname(os.path.abspath(target_path)) or os.getcwd()
        basename = os.path.basename(target_path) or "tmpfile"

        temp_name: Optional[str] = None
        try:
            # delete=False: the file must be closed before os.replace on Windows
            with tempfile.NamedTemporaryFile(
                mode="wb",
                suffix=self.temp_suffix,
                prefix=basename + "-",
                dir=dirpath,
                delete=False,
            ) as tf:
                temp_name = tf.name
                tf.write(content.encode(encoding))
                tf.flush()
                if self.fsync_after_write:
                    os.fsync(tf.fileno())

            os.replace(temp_name, target_path)
            temp_name = None
        except (OSError, UnicodeError) as exc:
            if temp_name and os.path.exists(temp_name):
                try:
                    os.unlink(temp_name)
                except OSError:
                    logger.exception("Failed to remove temporary file: %s", temp_name)
            if isinstance(exc, OSError):
                raise
            raise OSError(f"Could not encode content for {target_path} as {encoding}") from exc

        logger.debug("Atomic write successful: %s", target_path)
