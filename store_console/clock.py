# ==============================================================================
# RELOJ INYECTABLE
# ==============================================================================
# Toda espera y toda marca de tiempo pasan por un reloj.
# - SystemClock: reloj real (producción)
# - ManualClock: reloj controlado a mano (tests deterministas, sin timers)
# ==============================================================================

import asyncio
import time
from datetime import datetime, timedelta, timezone


class SystemClock:
    """Reloj real basado en time.monotonic() y asyncio.sleep()."""

    def now(self) -> float:
        """Segundos monotónicos (para ventanas de frescura y timeouts)."""
        return time.monotonic()

    def utcnow(self) -> datetime:
        """Fecha/hora de pared en UTC (para createdAt)."""
        return datetime.now(timezone.utc)

    async def sleep(self, seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)
        else:
            await asyncio.sleep(0)


class ManualClock:
    """
    Reloj manual para tests.

    El tiempo solo avanza con advance() o cuando alguien duerme:
    sleep() suma los segundos pedidos y cede el control una vez al loop.
    """

    EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def utcnow(self) -> datetime:
        return self.EPOCH + timedelta(seconds=self._now)

    def advance(self, seconds: float) -> None:
        self._now += seconds

    async def sleep(self, seconds: float) -> None:
        if seconds > 0:
            self._now += seconds
        await asyncio.sleep(0)
