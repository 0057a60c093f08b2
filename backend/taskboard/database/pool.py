"""
Pool de conexões com o banco.

Envolve um engine SQLAlchemy configurado com ``QueuePool`` de tamanho fixo
(sem overflow). Conexões livres são reutilizadas em ordem FIFO e cada uma
passa por um pre-ping antes de ser entregue; conexões quebradas são
descartadas e substituídas pelo próprio pool.
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session
from sqlalchemy.pool import QueuePool

from taskboard.core import config
from taskboard.core.errors import ConnectivityError, PoolExhaustedError

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


class ConnectionPool:
    def __init__(
        self,
        url: str,
        max_connections: int = 5,
        timeout: float = 10.0,
        connect_retries: int = 3,
        retry_delay: float = 0.5,
    ):
        if max_connections < 1:
            raise ValueError("max_connections deve ser >= 1")
        self.url = url
        self.max_connections = max_connections
        self.timeout = timeout
        self.connect_retries = max(1, connect_retries)
        self.retry_delay = retry_delay

        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False

        self.engine = create_engine(
            url,
            poolclass=QueuePool,
            pool_size=max_connections,
            max_overflow=0,
            pool_timeout=timeout,
            pool_pre_ping=True,
            pool_use_lifo=False,
            connect_args=connect_args,
        )
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

    @classmethod
    def from_config(cls) -> "ConnectionPool":
        if not config.DATABASE_URL:
            raise RuntimeError("DATABASE_URL nao configurada. Defina a variavel de ambiente antes de iniciar a API.")
        return cls(
            config.DATABASE_URL,
            max_connections=config.DB_POOL_SIZE,
            timeout=config.DB_POOL_TIMEOUT,
            connect_retries=config.DB_CONNECT_RETRIES,
            retry_delay=config.DB_CONNECT_RETRY_DELAY,
        )

    def acquire(self) -> Connection:
        """
        Empresta uma conexão exclusiva do pool.

        Bloqueia até ``timeout`` segundos esperando uma conexão livre e levanta
        ``PoolExhaustedError`` se nenhuma for devolvida nesse intervalo. Falhas
        ao abrir a conexão são repetidas ``connect_retries`` vezes antes de
        levantar ``ConnectivityError``.
        """
        last_error: Optional[Exception] = None
        for attempt in range(1, self.connect_retries + 1):
            try:
                return self.engine.connect()
            except PoolTimeoutError as exc:
                logger.warning(
                    "Pool esgotado: nenhuma conexao livre em %.1fs (tamanho=%d)",
                    self.timeout,
                    self.max_connections,
                )
                raise PoolExhaustedError(
                    f"Nenhuma conexão livre após {self.timeout:g}s"
                ) from exc
            except DBAPIError as exc:
                last_error = exc
                logger.warning(
                    "Falha ao conectar ao banco (tentativa %d/%d): %s",
                    attempt,
                    self.connect_retries,
                    exc.orig if exc.orig is not None else exc,
                )
                if attempt < self.connect_retries and self.retry_delay > 0:
                    time.sleep(self.retry_delay)
        raise ConnectivityError("Banco de dados indisponível") from last_error

    def release(self, conn: Connection) -> None:
        if conn.closed:
            return
        conn.close()

    @contextmanager
    def lease(self) -> Iterator[Connection]:
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Sessão ORM ligada a uma conexão emprestada, devolvida ao sair do bloco."""
        with self.lease() as conn:
            db = Session(bind=conn, autoflush=False)
            try:
                yield db
            finally:
                db.close()

    def open(self, prewarm: bool = False) -> None:
        conns = []
        try:
            for _ in range(self.max_connections if prewarm else 1):
                conns.append(self.acquire())
            conns[0].execute(text("SELECT 1"))
        finally:
            for conn in conns:
                self.release(conn)
        logger.info("Pool de conexoes pronto (tamanho=%d, aquecido=%s)", self.max_connections, prewarm)

    def status(self) -> dict:
        pool = self.engine.pool
        return {
            "size": pool.size(),
            "checked_out": pool.checkedout(),
            "checked_in": pool.checkedin(),
        }

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Conexoes do pool encerradas")
