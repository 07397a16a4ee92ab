"""
Database Adapter - Tradução de falhas do banco e health check.

Os repositórios Django executam suas consultas dentro de
erros_de_banco(), que converte exceções do driver em exceções de
domínio:

- IntegrityError na gravação concorrente -> ConcurrencyError
- demais DatabaseError -> DependencyFailureError (HTTP 500)
"""

from contextlib import contextmanager
from typing import Any, Dict, Optional
import logging

from django.db import DatabaseError, IntegrityError, connection

from src.core.shared.exceptions import ConcurrencyError, DependencyFailureError

logger = logging.getLogger(__name__)


@contextmanager
def erros_de_banco(operacao: str, conflito: Optional[str] = None):
    """
    Context manager que traduz erros do banco.

    Args:
        operacao: Descrição usada no log e na mensagem
        conflito: Se informado, IntegrityError vira ConcurrencyError
            com esta mensagem

    Example:
        with erros_de_banco("salvar chamado", conflito="Número já utilizado"):
            TicketModel.objects.create(...)
    """
    try:
        yield
    except IntegrityError as e:
        if conflito:
            logger.warning(f"Conflito ao {operacao}: {e}")
            raise ConcurrencyError(conflito) from e
        logger.error(f"Falha de integridade ao {operacao}: {e}", exc_info=True)
        raise DependencyFailureError(
            f"Falha no banco de dados ao {operacao}",
            dependency="database",
        ) from e
    except DatabaseError as e:
        logger.error(f"Falha no banco de dados ao {operacao}: {e}", exc_info=True)
        raise DependencyFailureError(
            f"Falha no banco de dados ao {operacao}",
            dependency="database",
        ) from e


def check_database_connection() -> Dict[str, Any]:
    """
    Verifica conexão com o banco (usado pelo /health/).

    Returns:
        {"status": "healthy"|"unhealthy", "vendor": ..., "error": ...}
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        return {"status": "healthy", "vendor": connection.vendor}
    except DatabaseError as e:
        logger.error(f"Health check do banco falhou: {e}")
        return {"status": "unhealthy", "vendor": connection.vendor, "error": str(e)}
