# ABOUTME: Key-press recorder writing whitespace-delimited token logs per active window
import time
import threading
import signal
import sys
import logging
from pathlib import Path
from typing import Optional, Any

# macOS specific imports
from pynput import keyboard
from Cocoa import NSWorkspace

from .recording import (
    KeyBuffer,
    sanitize_window_title,
    token_for_key,
    window_folder_name,
)
from .utils import ConfigManager, setup_logging


class MacOSAppTracker:
    """Track the active application and window on macOS."""

    def __init__(self):
        self.workspace = NSWorkspace.sharedWorkspace()

    def get_active_app(self) -> str:
        """Get the currently active application name."""
        try:
            active_app = self.workspace.frontmostApplication()
            if active_app:
                return active_app.localizedName() or "unknown"
        except Exception as e:
            logging.error(f"Error getting active app: {e}")
        return "unknown"

    def get_window_title(self) -> str:
        """Get the focused window title, falling back to the app name."""
        try:
            from Cocoa import (
                AXUIElementCreateApplication,
                AXUIElementCopyAttributeValue,
                kAXFocusedWindowAttribute,
                kAXTitleAttribute,
            )

            app = self.workspace.frontmostApplication()
            if not app:
                return "unknown"

            app_ref = AXUIElementCreateApplication(app.processIdentifier())
            window_ref = AXUIElementCopyAttributeValue(
                app_ref, kAXFocusedWindowAttribute, None
            )[1]
            if not window_ref:
                return self.get_active_app()

            title = AXUIElementCopyAttributeValue(window_ref, kAXTitleAttribute, None)[1]
            if title:
                return f"{title} - {self.get_active_app()}"

        except Exception as e:
            logging.debug(f"Could not get window title: {e}")
        return self.get_active_app()


class KeyPressRecorder:
    """Record key presses as tokens and append them to per-window log files."""

    def __init__(self, config_path: Optional[str] = None):
        self.config = ConfigManager(config_path or "config.yaml")
        self.log_dir = Path(self.config.get("recording.log_directory", "./log"))
        self.write_interval = self.config.get("recording.write_interval_seconds", 1)
        threshold_ms = self.config.get("recording.pause_threshold_ms", 500)

        self.buffer = KeyBuffer(threshold_ms / 1000)
        self.app_tracker = MacOSAppTracker()
        self.is_running = False
        self.total_keystrokes = 0
        self.session_start_time = time.time()

        setup_logging(self.config.get("output.log_level", "INFO"))

    def on_key_press(self, key: Any) -> None:
        """Handle key press events."""
        try:
            char = getattr(key, "char", None)
            name = getattr(key, "name", None)
            vk = getattr(key, "vk", None)
            self.buffer.append(token_for_key(char, name, vk), time.time())
            self.total_keystrokes += 1
        except Exception as e:
            logging.error(f"Error in key press handler: {e}")

    def log_file_for(self, window_title: str) -> Path:
        """Path of the log file for a window: <log_dir>/<app>/<title>.txt."""
        title = sanitize_window_title(window_title) or "unknown"
        folder = self.log_dir / (window_folder_name(title) or "unknown")
        return folder / f"{title}.txt"

    def flush(self, window_title: Optional[str] = None) -> Optional[Path]:
        """Append buffered tokens to the active window's log file."""
        text = self.buffer.drain()
        if not text:
            return None

        path = self.log_file_for(window_title or self.app_tracker.get_window_title())
        try:
            if not path.parent.exists():
                path.parent.mkdir(parents=True, exist_ok=True)
                logging.info(f"Created log folder: {path.parent}")
            with open(path, "a", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            logging.error(f"Failed to write to {path}: {e}")
            # Keep the tokens for the next flush
            self.buffer.restore(text)
            return None
        return path

    def _periodic_flush(self) -> None:
        while self.is_running:
            time.sleep(self.write_interval)
            try:
                self.flush()
            except Exception as e:
                logging.error(f"Error in periodic flush: {e}")

    def start_monitoring(self) -> None:
        """Start recording key presses."""
        if self.is_running:
            logging.warning("Recorder is already running")
            return

        self.is_running = True
        self.session_start_time = time.time()
        logging.info(f"Starting key recorder, logs are saved under {self.log_dir}")

        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

        writer = threading.Thread(target=self._periodic_flush, daemon=True)
        writer.start()

        self.listener = keyboard.Listener(on_press=self.on_key_press)
        self.listener.start()
        try:
            while self.is_running:
                time.sleep(0.1)
        except KeyboardInterrupt:
            logging.info("Keyboard interrupt received")
        finally:
            self.stop_monitoring()

    def _signal_handler(self, signum: int, frame: Any) -> None:
        logging.info(f"Received signal {signum}, shutting down...")
        self.is_running = False

    def stop_monitoring(self) -> None:
        """Stop recording and write anything still buffered."""
        self.is_running = False
        if hasattr(self, "listener"):
            self.listener.stop()
        self.flush()

        elapsed = time.time() - self.session_start_time
        logging.info(f"Session completed: {self.total_keystrokes} keystrokes in {elapsed:.1f}s")


def parse_duration(duration_str: str) -> float:
    """Parse duration string like '1h', '30m', '24h' into seconds."""
    import re

    match = re.match(r"^(\d+)([hms])$", duration_str.lower())
    if not match:
        raise ValueError(f"Invalid duration format: {duration_str}")

    value, unit = match.groups()
    return int(value) * {"s": 1, "m": 60, "h": 3600}[unit]


def main():
    """Main entry point for the recorder."""
    import argparse

    parser = argparse.ArgumentParser(description="Record key presses to token logs")
    parser.add_argument(
        "--config", default="config.yaml", help="Path to configuration file"
    )
    parser.add_argument(
        "--duration", type=str, help="Duration to run (e.g., '1h', '30m', '24h')"
    )
    args = parser.parse_args()

    recorder = KeyPressRecorder(args.config)

    if args.duration:
        try:
            duration_seconds = parse_duration(args.duration)
        except ValueError as e:
            parser.error(str(e))
        timer = threading.Timer(duration_seconds, recorder._signal_handler, (signal.SIGTERM, None))
        timer.daemon = True
        timer.start()
        logging.info(f"Will run for {args.duration} ({duration_seconds}s)")

    recorder.start_monitoring()
    sys.exit(0)


if __name__ == "__main__":
    main()
