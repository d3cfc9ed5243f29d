"""Shared fixtures: an in-memory stand-in for the WordPress database engine"""
import pytest

from config import Config
from metrics.registry import MetricsRegistry


class FakeResult:
    def __init__(self, rows):
        self._rows = list(rows)

    def all(self):
        return list(self._rows)


class FakeConnection:
    """Answers queries by exact SQL text from the owning engine's result table"""

    def __init__(self, engine):
        self.engine = engine
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True
        return False

    def execute(self, statement, params=None):
        sql = str(statement)
        self.engine.executed.append((sql, dict(params or {})))
        if sql in self.engine.failures:
            raise self.engine.failures[sql]
        return FakeResult(self.engine.results.get(sql, []))


class FakeEngine:
    def __init__(self, results=None):
        self.results = dict(results or {})
        self.failures = {}
        self.executed = []
        self.connections = []
        self.connect_error = None
        self.disposed = False

    def connect(self):
        if self.connect_error is not None:
            raise self.connect_error
        conn = FakeConnection(self)
        self.connections.append(conn)
        return conn

    def dispose(self):
        self.disposed = True

    def set_rows(self, registry, name, rows):
        self.results[registry.get_query(name).sql] = rows

    def fail(self, registry, name, error):
        self.failures[registry.get_query(name).sql] = error

    def executed_sql(self):
        return [sql for sql, _ in self.executed]


def default_rows(registry):
    """One zero row for every scalar query, no rows for grouped ones"""
    return {
        query.sql: ([] if query.grouped else [(0,)])
        for query in registry.queries()
    }


def make_config(**overrides):
    values = {"db_name": "wordpress", "db_user": "exporter"}
    values.update(overrides)
    return Config(**values)


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def registry(config):
    return MetricsRegistry(config)


@pytest.fixture
def engine(registry):
    return FakeEngine(default_rows(registry))
