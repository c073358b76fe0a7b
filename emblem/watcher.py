from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler
import logging
from pathlib import Path
from typing import Dict, Iterable

from .compiler import EmblemCompiler
from .errors import EmblemCompileError

logger = logging.getLogger(__name__)


def trigger_recompile(write_pairs: Dict[Path, Path], compiler: EmblemCompiler) -> int:
    """
    Compiles every source to its destination.
    A file that fails to compile is logged and skipped; returns the failure count.
    """
    failures = 0
    for (src, dst) in write_pairs.items():
        try:
            with open(src, "r") as f:
                output = compiler.compile(f.read())
        except (OSError, EmblemCompileError) as e:
            logger.error("Failed to compile %s: %s", src, e)
            failures += 1
            continue
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            with open(dst, "w+") as f:
                f.write(output)
        except OSError as e:
            logger.error("Failed to write %s: %s", dst, e)
            failures += 1
            continue
        logger.info("Compiled %s -> %s", src, dst)
    return failures


class ChangeHandler(FileSystemEventHandler):
    def __init__(self, files_to_watch: Iterable[Path], write_pairs: Dict[Path, Path], compiler: EmblemCompiler):
        self.files_to_watch = {x.resolve() for x in files_to_watch}  # sources + extra watch paths
        self.write_pairs = write_pairs
        self.compiler = compiler
        logger.info("Handler initialized. Monitoring for changes...")

    def on_modified(self, event):
        if event.is_directory:
            return

        src_path_abs = Path(event.src_path).resolve()
        if src_path_abs in self.files_to_watch:
            logger.info("Detected modification in: %s", src_path_abs)
            trigger_recompile(self.write_pairs, self.compiler)


def run_watcher(write_pairs: Dict[Path, Path], watch_paths: Iterable[Path], compiler: EmblemCompiler) -> None:
    """Sets up and runs the watchdog observer until interrupted."""
    files_to_watch = set(write_pairs.keys()) | set(watch_paths)
    dirs_to_watch = {p.resolve().parent for p in files_to_watch}

    if not dirs_to_watch:
        logger.error("No valid directories provided to watch.")
        return

    event_handler = ChangeHandler(files_to_watch, write_pairs, compiler)
    observer = Observer()

    scheduled_count = 0
    for dir_path in dirs_to_watch:
        if not dir_path.is_dir():
            logger.warning("Directory '%s' does not exist. Cannot watch.", dir_path)
            continue

        # Non-recursive: only files directly inside the directory
        observer.schedule(event_handler, str(dir_path), recursive=False)
        scheduled_count += 1
        logger.info("Scheduled watcher for directory: %s", dir_path)

    if scheduled_count == 0:
        logger.error("No watchers were successfully scheduled. Exiting.")
        return

    observer.start()
    logger.info("Watching for file changes in %d director%s. Press Ctrl+C to stop.",
                scheduled_count, 'y' if scheduled_count == 1 else 'ies')

    try:
        while observer.is_alive():
            observer.join(timeout=1)
    except KeyboardInterrupt:
        logger.info("Stopping watcher (Ctrl+C pressed)...")
    finally:
        if observer.is_alive():
            observer.stop()
        observer.join()
        logger.info("Watcher stopped.")
