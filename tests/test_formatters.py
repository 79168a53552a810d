from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

import pytest
import yaml

from reconf.formatters import EnvFormatter, IniFormatter, JSONFormatter, YAMLFormatter
from reconf.formatters.env_format import parse_raw_into_map


@dataclass
class Database:
    host: str = field(default="", metadata={"env": "HOST", "yaml": "hostname"})
    port: int = field(default=0, metadata={"env": "PORT"})


@dataclass
class Service:
    name: str = field(default="", metadata={"env": "NAME", "json": "service_name"})
    debug: bool = field(default=False, metadata={"env": "DEBUG"})
    ratio: float = field(default=0.0, metadata={"env": "RATIO"})
    hosts: List[str] = field(default_factory=list, metadata={"env": "HOSTS"})
    labels: Dict[str, str] = field(default_factory=dict, metadata={"env": "LABELS"})
    db: Database = field(default_factory=Database, metadata={"env_prefix": "DB_"})
    cache: Optional[Database] = field(default=None, metadata={"env_prefix": "CACHE_"})
    internal: str = ""


@pytest.mark.parametrize(
    "raw, want",
    [
        (b"", {}),
        (b"foo=bar", {"foo": "bar"}),
        (b"foo=bar\nbar=baz", {"foo": "bar", "bar": "baz"}),
        (b"foo=bar baz", {"foo": "bar baz"}),
        (b"foo=bar=baz", {"foo": "bar=baz"}),
        (b"foo", {}),
        (b"\nfoo=bar\n\n\nbar=baz\n", {"foo": "bar", "bar": "baz"}),
    ],
    ids=[
        "empty",
        "single",
        "multiple",
        "with spaces",
        "multiple equal signs",
        "no equal signs",
        "multiple new line signs",
    ],
)
def test_parse_raw_into_map(raw, want):
    assert parse_raw_into_map(raw) == want


class TestEnvFormatter:
    """KEY=VALUE decoding."""

    def test_tagged_fields(self):
        cfg = Service()
        EnvFormatter().unmarshal(
            b"NAME=api\nDEBUG=true\nRATIO=0.25\nHOSTS=a,b\nLABELS=team:core,tier:1\ninternal=x",
            cfg,
        )
        assert cfg.name == "api"
        assert cfg.debug is True
        assert cfg.ratio == 0.25
        assert cfg.hosts == ["a", "b"]
        assert cfg.labels == {"team": "core", "tier": "1"}
        # untagged fields are never read from the environment
        assert cfg.internal == ""

    def test_nested_prefix(self):
        cfg = Service()
        EnvFormatter().unmarshal(b"DB_HOST=db.local\nDB_PORT=5432", cfg)
        assert cfg.db == Database(host="db.local", port=5432)
        assert cfg.cache is None

    def test_optional_nested_created_when_set(self):
        cfg = Service()
        EnvFormatter().unmarshal(b"CACHE_PORT=6379", cfg)
        assert cfg.cache == Database(port=6379)

    def test_formatter_prefix(self):
        cfg = Service()
        EnvFormatter(prefix="APP_").unmarshal(b"APP_NAME=svc\nNAME=other\nAPP_DB_PORT=1", cfg)
        assert cfg.name == "svc"
        assert cfg.db.port == 1

    def test_absent_keys_leave_zero(self):
        cfg = Service()
        EnvFormatter().unmarshal(b"UNRELATED=1", cfg)
        assert cfg == Service()

    def test_empty_values_are_unset(self):
        cfg = Service()
        EnvFormatter().unmarshal(b"DB_PORT=\nDEBUG=\nNAME=\nCACHE_PORT=", cfg)
        assert cfg == Service()

    def test_invalid_value(self):
        with pytest.raises(ValueError, match="DB_PORT"):
            EnvFormatter().unmarshal(b"DB_PORT=abc", Service())


class TestJSONFormatter:
    """JSON decoding."""

    def test_keys_from_metadata(self):
        cfg = Service()
        JSONFormatter().unmarshal(b'{"service_name": "api", "db": {"port": 1}}', cfg)
        assert cfg.name == "api"
        assert cfg.db.port == 1

    def test_unknown_fields_allowed_by_default(self):
        cfg = Service()
        JSONFormatter().unmarshal(b'{"extra": 1}', cfg)
        assert cfg == Service()

    def test_disallow_unknown_fields(self):
        with pytest.raises(ValueError, match="extra"):
            JSONFormatter(disallow_unknown_fields=True).unmarshal(b'{"extra": 1}', Service())

    def test_use_decimal(self):
        @dataclass
        class Price:
            amount: Decimal = Decimal("0")
            ratio: float = 0.0

        cfg = Price()
        JSONFormatter(use_decimal=True).unmarshal(b'{"amount": 0.1, "ratio": 0.5}', cfg)
        assert cfg.amount == Decimal("0.1")
        assert cfg.ratio == 0.5

    def test_common_types(self):
        @dataclass
        class Stamped:
            at: Optional[datetime] = None
            pair: Tuple[int, str] = (0, "")

        cfg = Stamped()
        JSONFormatter().unmarshal(b'{"at": "2024-01-01T00:00:00", "pair": [1, "a"]}', cfg)
        assert cfg.at == datetime(2024, 1, 1)
        assert cfg.pair == (1, "a")

    def test_top_level_must_be_object(self):
        with pytest.raises(TypeError):
            JSONFormatter().unmarshal(b"[1, 2]", Service())


class TestYAMLFormatter:
    """YAML decoding."""

    def test_nested(self):
        cfg = Service()
        data = yaml.safe_dump({"name": "api", "db": {"hostname": "h", "port": 2}, "hosts": ["x"]})
        YAMLFormatter().unmarshal(data.encode(), cfg)
        assert cfg.name == "api"
        assert cfg.db == Database(host="h", port=2)
        assert cfg.hosts == ["x"]

    def test_empty_document(self):
        cfg = Service()
        YAMLFormatter().unmarshal(b"", cfg)
        assert cfg == Service()

    def test_invalid_yaml(self):
        with pytest.raises(yaml.YAMLError):
            YAMLFormatter().unmarshal(b"invalid: yaml: content: [", Service())


class TestIniFormatter:
    """INI decoding."""

    def test_sections(self):
        cfg = Service()
        IniFormatter().unmarshal(
            b"[DEFAULT]\nname=api\ndebug=1\n\n[db]\nhost=db.local\nport=5432\n",
            cfg,
        )
        assert cfg.name == "api"
        assert cfg.debug is True
        assert cfg.db == Database(host="db.local", port=5432)

    def test_default_keys_do_not_leak_into_sections(self):
        cfg = Service()
        IniFormatter().unmarshal(b"[DEFAULT]\nport=1\n\n[db]\nhost=h\n", cfg)
        assert cfg.db == Database(host="h")
