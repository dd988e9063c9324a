import logging
import os
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

PERSONALIZE_KEY = r"Software\Microsoft\Windows\CurrentVersion\Themes\Personalize"
APPS_USE_LIGHT_THEME = "AppsUseLightTheme"
SYSTEM_USES_LIGHT_THEME = "SystemUsesLightTheme"


class ThemeSink(Protocol):
    def set_theme(self, is_light: bool) -> object: ...


class RegistryThemeSink:
    """Applies the Windows app/system light theme through the current user's registry hive."""

    def __init__(self, registry: Any = None, on_change: Callable[[bool], None] | None = None) -> None:
        if registry is None and os.name == "nt":
            import winreg

            registry = winreg
        self._registry = registry
        self._on_change = on_change

    @property
    def available(self) -> bool:
        return self._registry is not None

    def is_light_theme(self) -> bool:
        reg = self._registry
        if reg is None:
            return True
        try:
            with reg.OpenKey(reg.HKEY_CURRENT_USER, PERSONALIZE_KEY) as key:
                value, _ = reg.QueryValueEx(key, APPS_USE_LIGHT_THEME)
        except OSError:
            return True
        try:
            return int(value) != 0
        except (TypeError, ValueError):
            return True

    def set_theme(self, is_light: bool) -> bool:
        reg = self._registry
        if reg is None:
            logger.warning("theme-apply skipped no-registry is_light=%s", is_light)
            return False

        value = 1 if is_light else 0
        try:
            with reg.CreateKeyEx(reg.HKEY_CURRENT_USER, PERSONALIZE_KEY, 0, reg.KEY_SET_VALUE) as key:
                reg.SetValueEx(key, APPS_USE_LIGHT_THEME, 0, reg.REG_DWORD, value)
                reg.SetValueEx(key, SYSTEM_USES_LIGHT_THEME, 0, reg.REG_DWORD, value)
        except OSError as ex:
            logger.error("theme-apply failed is_light=%s error=%s", is_light, ex)
            return False
        logger.info("theme-apply is_light=%s", is_light)
        if self._on_change is not None:
            self._on_change(is_light)
        return True

    def toggle_theme(self) -> bool | None:
        target = not self.is_light_theme()
        if not self.set_theme(target):
            return None
        return target
