from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor

audit_logger = logging.getLogger("attendance_payroll.audit")


@dataclass(frozen=True)
class AuditEvent:
    tenant_id: int
    module: str
    action: str
    actor: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)


class AuditSink(Protocol):
    def record(self, event: AuditEvent) -> None:
        raise NotImplementedError


class LoggingAuditSink(AuditSink):
    def record(self, event: AuditEvent) -> None:
        audit_logger.info(
            "tenant=%s module=%s action=%s actor=%s details=%s",
            event.tenant_id,
            event.module,
            event.action,
            event.actor,
            json.dumps(event.details, default=str, sort_keys=True),
        )


class MySQLAuditSink(AuditSink):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def record(self, event: AuditEvent) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(tenant_id, module, action, details, actor)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    int(event.tenant_id),
                    event.module,
                    event.action,
                    json.dumps(event.details, default=str, sort_keys=True),
                    event.actor,
                ),
            )
        audit_logger.debug("audit %s persisted for tenant %s", event.action, event.tenant_id)


class ChainedAuditSink(AuditSink):
    """Hands every event to each sink in order."""

    def __init__(self, *sinks: AuditSink):
        self._sinks = sinks

    def record(self, event: AuditEvent) -> None:
        for sink in self._sinks:
            sink.record(event)
