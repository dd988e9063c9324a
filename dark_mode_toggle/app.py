import logging
import sys
import threading
import tkinter as tk
from tkinter import messagebox, simpledialog

import pystray

from dark_mode_toggle import startup
from dark_mode_toggle.icon import build_icon_image
from dark_mode_toggle.runtime import (
    CONFIG_FILENAME,
    PACKAGE_LOGGER,
    get_app_dir,
    get_data_dir,
    init_logging,
    is_debug_enabled,
)
from dark_mode_toggle.scheduler import ScheduleController
from dark_mode_toggle.settings import ConfigStore, format_hhmm, parse_hhmm
from dark_mode_toggle.theme import RegistryThemeSink
from dark_mode_toggle.timer import TkPeriodicTimer


class DarkModeTrayApp:
    def __init__(self) -> None:
        self.app_dir = get_app_dir()
        self.data_dir = get_data_dir()
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.config_path = self.data_dir / CONFIG_FILENAME

        self.debug_enabled = is_debug_enabled()
        self.log_path = init_logging(self.debug_enabled, self.app_dir, self.data_dir)
        self.logger = logging.getLogger(f"{PACKAGE_LOGGER}.app")
        self.logger.info(
            "app-start app_dir=%s data_dir=%s frozen=%s", self.app_dir, self.data_dir, getattr(sys, "frozen", False)
        )

        self.settings = ConfigStore(self.config_path)
        self.theme = RegistryThemeSink(on_change=lambda _is_light: self._update_icon())

        self.root = tk.Tk()
        self.root.withdraw()
        self.root.title("Dark Mode Toggle")

        self.icon = pystray.Icon(
            "dark_mode_toggle",
            build_icon_image(self.theme.is_light_theme()),
            "Dark Mode Toggle",
            menu=self._build_menu(),
        )
        self.scheduler = ScheduleController(self.settings, self.theme, TkPeriodicTimer(self.root))

    def run(self) -> None:
        tray_thread = threading.Thread(target=self.icon.run, daemon=True, name="tray-thread")
        tray_thread.start()
        self.logger.info("run tray-thread-started")
        self.root.mainloop()

    def _build_menu(self) -> pystray.Menu:
        return pystray.Menu(
            pystray.MenuItem("Toggle Dark/Light", self._on_toggle_theme, default=True),
            pystray.MenuItem(
                "Automatic schedule",
                self._on_toggle_schedule,
                checked=lambda _: self.settings.is_schedule_enabled,
            ),
            pystray.MenuItem("Edit schedule...", self._on_edit_schedule),
            pystray.MenuItem(
                "Start with Windows",
                self._on_toggle_startup,
                checked=lambda _: startup.is_startup_enabled(),
            ),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Exit", self._on_exit),
        )

    def _update_icon(self) -> None:
        try:
            self.icon.icon = build_icon_image(self.theme.is_light_theme())
            self.icon.update_menu()
        except Exception as ex:
            self.logger.warning("icon-update failed error=%s", ex)

    # Menu callbacks arrive on the tray thread; everything that touches the
    # scheduler or the settings runs on the Tk thread.

    def _on_toggle_theme(self, icon=None, item=None) -> None:
        def _toggle():
            is_light = self.theme.toggle_theme()
            if is_light is None:
                self.logger.warning("menu-toggle-theme failed")
                return
            self.scheduler.notify_manual_override()
            self.logger.info("menu-toggle-theme is_light=%s", is_light)

        self.root.after(0, _toggle)

    def _on_toggle_schedule(self, icon=None, item=None) -> None:
        def _toggle():
            self.settings.set_schedule_enabled(not self.settings.is_schedule_enabled)
            self.scheduler.refresh()
            self.logger.info("menu-toggle-schedule enabled=%s", self.settings.is_schedule_enabled)
            try:
                self.icon.update_menu()
            except Exception:
                pass

        self.root.after(0, _toggle)

    def _on_edit_schedule(self, icon=None, item=None) -> None:
        def _edit():
            current = f"{format_hhmm(self.settings.light_mode_start)},{format_hhmm(self.settings.light_mode_end)}"
            text = simpledialog.askstring(
                "Edit schedule",
                "Light mode window: start,end\nExample: 09:00,17:00",
                initialvalue=current,
                parent=self.root,
            )
            if not text:
                return

            parts = [p.strip() for p in text.split(",")]
            if len(parts) != 2:
                messagebox.showerror("Invalid format", "Enter two comma-separated times.")
                return

            try:
                start = parse_hhmm(parts[0])
                end = parse_hhmm(parts[1])
            except ValueError:
                messagebox.showerror("Invalid time", "Times must be HH:MM (24-hour).")
                return

            self.settings.set_light_mode_start(start.hour, start.minute)
            self.settings.set_light_mode_end(end.hour, end.minute)
            self.logger.info("menu-edit-schedule start=%s end=%s", parts[0], parts[1])
            self.scheduler.refresh()

        self.root.after(0, _edit)

    def _on_toggle_startup(self, icon=None, item=None) -> None:
        def _toggle():
            try:
                enable = not startup.is_startup_enabled()
                startup.set_startup_enabled(enable)
                self.logger.info("menu-toggle-startup enabled=%s", enable)
            except Exception as ex:
                self.logger.error("startup-toggle failed error=%s", ex)
                messagebox.showerror("Start with Windows", f"Failed to update startup shortcut:\n{ex}")
            finally:
                try:
                    self.icon.update_menu()
                except Exception:
                    pass

        self.root.after(0, _toggle)

    def _on_exit(self, icon=None, item=None) -> None:
        self.root.after(0, self._quit)

    def _quit(self) -> None:
        self.logger.info("app-quit requested")
        self.scheduler.dispose()
        try:
            self.icon.stop()
        except Exception:
            pass
        self.root.quit()


def main() -> None:
    DarkModeTrayApp().run()


if __name__ == "__main__":
    main()
