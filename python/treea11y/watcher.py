# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
import time
from pathlib import Path
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler
from .cli import _load_config, cmd_check


class CheckEventHandler(FileSystemEventHandler):
    def __init__(self, args, delay=0.5):
        self.args = args
        self.delay = delay
        self.last_check = 0

    def on_modified(self, event):
        if event.is_directory:
            return

        # Ignore hidden files and bytecode caches
        if "/." in event.src_path or "\\." in event.src_path:
            return
        if "__pycache__" in event.src_path or not event.src_path.endswith((".py", ".toml")):
            return

        # Debounce
        now = time.time()
        if now - self.last_check < self.delay:
            return

        print(f"[watch] Change detected in {event.src_path}...")
        try:
            cmd_check(self.args)
        except Exception as e:
            print(f"[error] Check failed: {e}")

        self.last_check = now


def cmd_watch(args):
    """Watch project files and re-run the accessibility check on change."""
    config = _load_config(args)
    paths = config.get_watch_paths()

    for path in paths:
        print(f"[watch] Watching {path} for changes...")

    try:
        cmd_check(args)
    except Exception as e:
        print(f"[error] Initial check failed: {e}")

    event_handler = CheckEventHandler(args)
    observer = Observer()
    for path in paths:
        observer.schedule(event_handler, str(Path(path)), recursive=True)
    observer.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        observer.stop()
    observer.join()
    return 0
