import os
import subprocess
import sys
from pathlib import Path

SHORTCUT_NAME = "Dark-Mode-Toggle.lnk"
CREATE_NO_WINDOW = 0x08000000


def startup_shortcut_path() -> Path:
    startup = Path(os.environ.get("APPDATA", "")) / "Microsoft" / "Windows" / "Start Menu" / "Programs" / "Startup"
    return startup / SHORTCUT_NAME


def is_startup_enabled() -> bool:
    return startup_shortcut_path().exists()


def _shortcut_target() -> tuple[str, str, str]:
    target = str(Path(sys.executable).resolve())
    if getattr(sys, "frozen", False):
        return target, "", str(Path(sys.executable).resolve().parent)
    return target, "-m dark_mode_toggle", str(Path(__file__).resolve().parent.parent)


def set_startup_enabled(enabled: bool) -> None:
    link_path = startup_shortcut_path()
    if not enabled:
        if link_path.exists():
            link_path.unlink()
        return

    link_path.parent.mkdir(parents=True, exist_ok=True)
    target, args, workdir = _shortcut_target()

    def esc(text: str) -> str:
        return text.replace("'", "''")

    ps = (
        "$WshShell = New-Object -ComObject WScript.Shell; "
        f"$Shortcut = $WshShell.CreateShortcut('{esc(str(link_path))}'); "
        f"$Shortcut.TargetPath = '{esc(target)}'; "
        f"$Shortcut.Arguments = '{esc(args)}'; "
        f"$Shortcut.WorkingDirectory = '{esc(workdir)}'; "
        f"$Shortcut.IconLocation = '{esc(target)}'; "
        "$Shortcut.Save();"
    )
    subprocess.run(
        ["powershell", "-NoProfile", "-ExecutionPolicy", "Bypass", "-Command", ps],
        check=True,
        creationflags=CREATE_NO_WINDOW if os.name == "nt" else 0,
    )
