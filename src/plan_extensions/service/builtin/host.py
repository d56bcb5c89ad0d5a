"""Host extension - facts about the process running the server."""

import os
import platform
import time

from plan_extensions.extension import (
    DataExtension,
    boolean_provider,
    conditional,
    double_provider,
    number_provider,
    plugin_info,
    string_provider,
)
from plan_extensions.types import Color, FormatType


@plugin_info(name="Host", icon_name="server", color=Color.BLUE_GREY)
class HostExtension(DataExtension):
    """Server values describing the Python process."""

    def __init__(self) -> None:
        self._started = time.monotonic()

    @string_provider(text="Python version", icon_name="code", priority=100)
    def python_version(self) -> str:
        return platform.python_version()

    @number_provider(
        text="Process uptime",
        icon_name="clock",
        priority=90,
        format_type=FormatType.TIME_MILLISECONDS,
    )
    def uptime(self) -> int:
        return int((time.monotonic() - self._started) * 1000)

    @number_provider(text="CPU cores", icon_name="microchip", priority=80)
    def cpu_count(self) -> int:
        return os.cpu_count() or 0

    @boolean_provider(condition_name="has_load_average", hidden=True)
    def load_average_available(self) -> bool:
        return hasattr(os, "getloadavg")

    @conditional("has_load_average")
    @double_provider(text="Load average (1 min)", icon_name="tachometer-alt", priority=70)
    def load_average(self) -> float:
        return os.getloadavg()[0]
