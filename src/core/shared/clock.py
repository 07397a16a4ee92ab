"""
Fonte de tempo do domínio.

Toda mutação obtém seus timestamps de um Clock injetado, sempre
no fuso de referência (America/Sao_Paulo por padrão).
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

FUSO_PADRAO = "America/Sao_Paulo"


class Clock(ABC):
    """Interface para obter o instante atual."""

    @property
    @abstractmethod
    def fuso(self) -> ZoneInfo:
        """Fuso de referência usado nas datas de calendário."""
        raise NotImplementedError

    @abstractmethod
    def agora(self) -> datetime:
        """Retorna datetime aware no fuso de referência."""
        raise NotImplementedError


class SystemClock(Clock):
    """Relógio do sistema."""

    def __init__(self, fuso: str = FUSO_PADRAO):
        self._fuso = ZoneInfo(fuso)

    @property
    def fuso(self) -> ZoneInfo:
        return self._fuso

    def agora(self) -> datetime:
        return datetime.now(self._fuso)


class FixedClock(Clock):
    """
    Relógio controlado manualmente (testes).

    Example:
        clock = FixedClock(datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc))
        clock.avancar(minutos=30)
    """

    def __init__(self, instante: datetime, fuso: str = FUSO_PADRAO):
        self._fuso = ZoneInfo(fuso)
        self._instante = instante.astimezone(self._fuso)

    @property
    def fuso(self) -> ZoneInfo:
        return self._fuso

    def agora(self) -> datetime:
        return self._instante

    def avancar(self, minutos: float = 0, horas: float = 0, dias: float = 0) -> datetime:
        self._instante = self._instante + timedelta(minutes=minutos, hours=horas, days=dias)
        return self._instante

    def definir(self, instante: datetime) -> None:
        self._instante = instante.astimezone(self._fuso)
