"""
Actions - Side effects triggered from palette items.

Opens URLs and paths, talks to Vesslo through its URL scheme, copies to
the clipboard, and runs Homebrew cask upgrades.

Platform tools:
  macOS:  open, open -R, pbcopy, osascript
  Linux:  xdg-open, wl-copy, notify-send
"""

import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

VESSLO_URL_SCHEME = "vesslo://"

TOAST_ANIMATED = "animated"
TOAST_SUCCESS = "success"
TOAST_FAILURE = "failure"


@dataclass
class BrewResult:
    """Outcome of a brew invocation, already phrased for a toast."""
    ok: bool
    title: str
    message: str = ""


def _is_macos() -> bool:
    return sys.platform == "darwin"


def vesslo_app_url(bundle_id: str) -> str:
    return f"{VESSLO_URL_SCHEME}app/{bundle_id}"


def app_store_url(app_store_id: str) -> str:
    return f"macappstore://apps.apple.com/app/id{app_store_id}"


def brew_upgrade_command(cask: Optional[str] = None, brew: str = "brew") -> list[str]:
    """
    Build the argv for a cask upgrade.

    Without a cask name every outdated cask is upgraded.
    """
    argv = [brew, "upgrade", "--cask"]
    if cask:
        argv.append(cask)
    return argv


def format_command(argv: list[str]) -> str:
    """Shell-quoted command line, for display and copying."""
    return shlex.join(argv)


def _spawn(argv: list[str]) -> bool:
    """Start a helper process without waiting. Returns False if missing."""
    try:
        subprocess.Popen(
            argv,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        return True
    except FileNotFoundError:
        logger.warning(f"{argv[0]} not found, cannot run: {format_command(argv)}")
        return False


def open_url(url: str) -> bool:
    """Open a URL with the system handler (browser, App Store, Vesslo)."""
    opener = "open" if _is_macos() else "xdg-open"
    return _spawn([opener, url])


def open_path(path: str) -> bool:
    """Open an application or file."""
    opener = "open" if _is_macos() else "xdg-open"
    return _spawn([opener, path])


def reveal_path(path: str) -> bool:
    """Show a path in the file manager (Finder on macOS)."""
    if _is_macos():
        return _spawn(["open", "-R", path])
    return _spawn(["xdg-open", str(Path(path).parent)])


def copy_to_clipboard(text: str) -> bool:
    argv = ["pbcopy"] if _is_macos() else ["wl-copy"]
    try:
        subprocess.run(argv, input=text, text=True, check=True, timeout=5)
        return True
    except FileNotFoundError:
        logger.debug(f"{argv[0]} not found, cannot copy to clipboard")
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired):
        logger.exception("Clipboard copy failed")
    return False


def notify(title: str, message: str = "", style: str = TOAST_SUCCESS) -> None:
    """
    Show a desktop notification (the palette's toast).

    Always logged, so failures stay visible without a notifier.
    """
    if style == TOAST_FAILURE:
        logger.warning(f"{title}: {message}" if message else title)
    else:
        logger.info(f"{title}: {message}" if message else title)

    if _is_macos():
        script = f"display notification {_applescript_str(message)} with title {_applescript_str(title)}"
        _spawn(["osascript", "-e", script])
    else:
        urgency = "critical" if style == TOAST_FAILURE else "normal"
        _spawn(["notify-send", "-a", "Vesslo", "-u", urgency, title, message])


def _applescript_str(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def open_in_vesslo(bundle_id: Optional[str]) -> bool:
    """Hand an app over to Vesslo through its URL scheme."""
    if not bundle_id:
        return False

    if not open_url(vesslo_app_url(bundle_id)):
        notify("Failed to open in Vesslo", f"Could not open {vesslo_app_url(bundle_id)}", TOAST_FAILURE)
        return False
    return True


def _run_brew(argv: list[str], timeout: float) -> subprocess.CompletedProcess:
    logger.debug(f"Running {format_command(argv)}")
    return subprocess.run(
        argv,
        capture_output=True,
        text=True,
        check=True,
        timeout=timeout,
    )


def _error_message(error: Exception) -> str:
    if isinstance(error, subprocess.CalledProcessError):
        detail = (error.stderr or error.stdout or "").strip()
        return detail or f"brew exited with status {error.returncode}"
    if isinstance(error, subprocess.TimeoutExpired):
        return f"Timed out after {int(error.timeout)}s"
    if isinstance(error, FileNotFoundError):
        return "Homebrew (brew) not found"
    return str(error) or "Unknown error"


def run_brew_upgrade(cask: str, app_name: str, brew: str = "brew", timeout: float = 900) -> BrewResult:
    """
    Upgrade a single cask, reporting progress through toasts.

    Blocks until brew finishes; call it off the UI thread.
    """
    argv = brew_upgrade_command(cask, brew)
    notify(f"Updating {app_name}...", format_command(argv), TOAST_ANIMATED)

    try:
        completed = _run_brew(argv, timeout)
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as e:
        result = BrewResult(False, f"Failed to update {app_name}", _error_message(e))
    else:
        result = BrewResult(True, f"{app_name} updated!", completed.stdout.strip() or "Update complete")

    notify(result.title, result.message, TOAST_SUCCESS if result.ok else TOAST_FAILURE)
    return result


def run_brew_upgrade_all(count: int, brew: str = "brew", timeout: float = 900) -> BrewResult:
    """Upgrade every outdated cask in one brew call."""
    argv = brew_upgrade_command(brew=brew)
    notify("Updating all Homebrew apps...", f"{count} apps", TOAST_ANIMATED)

    try:
        completed = _run_brew(argv, timeout)
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as e:
        result = BrewResult(False, "Update failed", _error_message(e))
    else:
        result = BrewResult(True, "All apps updated!", completed.stdout.strip() or "Update complete")

    notify(result.title, result.message, TOAST_SUCCESS if result.ok else TOAST_FAILURE)
    return result
