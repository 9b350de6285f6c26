# ==============================================================================
# PERÍODOS Y FECHAS
# ==============================================================================
# Rangos de fechas para los reportes (hoy / semana / mes / personalizado).
# Todas las fechas se comparan en hora LOCAL, sin zona horaria:
# - timestamps con zona ('Z', '+05:30') se convierten a hora local
# - timestamps sin zona se toman como hora local
# ==============================================================================

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Optional, Union

from dateutil.relativedelta import relativedelta


PERIOD_TODAY = 'today'
PERIOD_WEEK = 'week'
PERIOD_MONTH = 'month'
PERIOD_CUSTOM = 'custom'

# Desplazamiento usado para "período anterior" en el crecimiento de ingresos.
# Es UN MES para todos los presets (también hoy y semana).
DEFAULT_COMPARISON_OFFSET = relativedelta(months=1)

DateLike = Union[str, date, datetime, None]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parsea una fecha ISO a datetime local sin zona.

    Returns:
        datetime o None si no se puede parsear
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    else:
        try:
            text = str(value).strip()
            if text.endswith('Z'):
                text = text[:-1] + '+00:00'
            dt = datetime.fromisoformat(text)
        except (ValueError, TypeError):
            return None
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=23, minute=59, second=59, microsecond=999999)


def start_of_week(dt: datetime) -> datetime:
    """Lunes de la semana de dt, 00:00."""
    return start_of_day(dt) - relativedelta(days=dt.weekday())


def end_of_week(dt: datetime) -> datetime:
    """Domingo de la semana de dt, 23:59:59.999999."""
    return end_of_day(start_of_week(dt) + relativedelta(days=6))


def start_of_month(dt: datetime) -> datetime:
    return start_of_day(dt).replace(day=1)


def end_of_month(dt: datetime) -> datetime:
    return end_of_day(start_of_month(dt) + relativedelta(months=1, days=-1))


@dataclass(frozen=True)
class DateRange:
    """Rango cerrado [start, end] en hora local."""
    start: datetime
    end: datetime

    def contains(self, moment: Optional[datetime]) -> bool:
        if moment is None:
            return False
        return self.start <= moment <= self.end

    def shifted_back(self, offset: relativedelta) -> 'DateRange':
        """Mismo rango desplazado hacia atrás (p. ej. un mes)."""
        return DateRange(self.start - offset, self.end - offset)

    def to_dict(self):
        return {
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
        }


def range_bound(value: DateLike, is_end: bool) -> Optional[datetime]:
    """
    Límite de un rango personalizado.
    Una fecha sin hora ('YYYY-MM-DD') abarca el día completo.
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    has_time = isinstance(value, datetime) or (isinstance(value, str) and len(value.strip()) > 10)
    if has_time:
        return parsed
    return end_of_day(parsed) if is_end else start_of_day(parsed)


def period_range(
    period: str,
    now: Optional[datetime] = None,
    custom_start: DateLike = None,
    custom_end: DateLike = None,
) -> DateRange:
    """
    Calcula el rango de fechas de un preset.

    Args:
        period: 'today', 'week', 'month', 'custom'
        now: Momento de referencia (por defecto, ahora en hora local)
        custom_start: Inicio para 'custom' (si falta: inicio de mes)
        custom_end: Fin para 'custom' (si falta: fin de mes)

    Returns:
        DateRange. Un preset desconocido se trata como 'month'.
    """
    now = parse_timestamp(now) if now is not None else datetime.now()

    if period == PERIOD_TODAY:
        return DateRange(start_of_day(now), end_of_day(now))

    if period == PERIOD_WEEK:
        return DateRange(start_of_week(now), end_of_week(now))

    if period == PERIOD_CUSTOM:
        start = range_bound(custom_start, is_end=False) or start_of_month(now)
        end = range_bound(custom_end, is_end=True) or end_of_month(now)
        return DateRange(start, end)

    return DateRange(start_of_month(now), end_of_month(now))


def period_label(period: str, date_range: DateRange) -> str:
    """Etiqueta para encabezados de reportes."""
    if period == PERIOD_TODAY:
        return 'Today'
    if period == PERIOD_WEEK:
        return 'This Week'
    if period == PERIOD_CUSTOM:
        return '{} - {}'.format(
            date_range.start.strftime('%d/%m/%Y'),
            date_range.end.strftime('%d/%m/%Y'),
        )
    return 'This Month'
