# ==============================================================================
# CONFIGURACIÓN
# ==============================================================================
# Valores leídos de variables de entorno al importar el módulo.
#
#   BIZ_DATA_DIR          Carpeta de los JSON (por defecto ./data)
#   BIZ_SECRET_KEY        Clave de la cookie de sesión de Flask
#   BIZ_CURRENCY_SYMBOL   Símbolo de moneda para reportes (₹)
#   BIZ_GST_RATE          Tasa de GST por defecto para pedidos nuevos (18)
#   BIZ_PRODUCTION_MODE   1 = sin logging verbose
#   BIZ_ENABLE_PROFILING  1 = mide rutas y funciones clave
#   FLASK_HOST / FLASK_PORT / FLASK_DEBUG
# ==============================================================================

import logging
import os
from dataclasses import dataclass


def _env_flag(name: str, default: str = '0') -> bool:
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


BASE = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DATA_DIR = os.environ.get('BIZ_DATA_DIR') or os.path.join(BASE, 'data')

# SECRET_KEY: en producción DEBE definirse via variable de entorno
_DEFAULT_SECRET = 'biz_manager_dev_secret_key_change_in_production'
SECRET_KEY = os.environ.get('BIZ_SECRET_KEY') or _DEFAULT_SECRET

CURRENCY_SYMBOL = os.environ.get('BIZ_CURRENCY_SYMBOL', '₹')
DEFAULT_GST_RATE = _env_float('BIZ_GST_RATE', 18.0)

PRODUCTION_MODE = _env_flag('BIZ_PRODUCTION_MODE')
ENABLE_PROFILING = _env_flag('BIZ_ENABLE_PROFILING', '1')

FLASK_HOST = os.environ.get('FLASK_HOST', '127.0.0.1')
FLASK_PORT = int(os.environ.get('FLASK_PORT', 5000))
FLASK_DEBUG = _env_flag('FLASK_DEBUG')


@dataclass
class Settings:
    """
    Configuración efectiva de una instancia de la aplicación.
    Los tests crean una con data_dir apuntando a tmp_path.
    """
    data_dir: str = DATA_DIR
    secret_key: str = SECRET_KEY
    currency_symbol: str = CURRENCY_SYMBOL
    default_gst_rate: float = DEFAULT_GST_RATE
    production_mode: bool = PRODUCTION_MODE


def configure_logging(production_mode: bool = PRODUCTION_MODE) -> None:
    """Configura el logging raíz (INFO en producción, DEBUG en desarrollo)."""
    logging.basicConfig(
        level=logging.INFO if production_mode else logging.DEBUG,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )
    if production_mode and SECRET_KEY == _DEFAULT_SECRET:
        logging.getLogger(__name__).warning(
            "BIZ_PRODUCTION_MODE activo sin BIZ_SECRET_KEY definida"
        )
