from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

import pytest

from reconf.core.fields import (
    coerce_string,
    has_method,
    is_config_instance,
    is_zero,
    populate,
    split_map,
    unwrap_optional,
)


class Level(enum.Enum):
    DEBUG = "debug"
    INFO = "info"


@dataclass
class Database:
    host: str = ""
    port: int = 0


@dataclass
class AppConfig:
    name: str = ""
    debug: bool = False
    ratio: float = 0.0
    level: Optional[Level] = None
    db: Database = field(default_factory=Database)
    replica: Optional[Database] = None
    tags: List[str] = field(default_factory=list)
    limits: Dict[str, int] = field(default_factory=dict)
    pair: Tuple[int, ...] = ()
    secret: str = field(default="", metadata={"json": "-"})


def by_name(f):
    key = f.metadata.get("json", f.name)
    return None if key == "-" else key


class TestIsZero:
    """Zero-value detection."""

    @pytest.mark.parametrize(
        "value",
        [None, False, 0, 0.0, "", b"", [], {}, (), set(), Decimal("0"), Database()],
    )
    def test_zero_values(self, value):
        assert is_zero(value)

    @pytest.mark.parametrize(
        "value",
        [True, 1, -0.5, "x", [0], {"a": 0}, Database(port=1), object(), Level.DEBUG],
    )
    def test_non_zero_values(self, value):
        assert not is_zero(value)

    def test_optional_field_present_is_not_zero(self):
        @dataclass
        class WithPtr:
            count: Optional[int] = None

        assert is_zero(WithPtr())
        assert not is_zero(WithPtr(count=0))

    def test_is_config_instance(self):
        assert is_config_instance(Database())
        assert not is_config_instance(Database)
        assert not is_config_instance({"host": "x"})


def test_unwrap_optional():
    assert unwrap_optional(Optional[int]) == (int, True)
    assert unwrap_optional(int | None) == (int, True)
    assert unwrap_optional(int) == (int, False)
    assert unwrap_optional(List[int]) == (List[int], False)


class TestPopulate:
    """Decoding mappings into dataclasses."""

    def test_populates_present_fields_only(self):
        cfg = AppConfig()
        populate(cfg, {"name": "svc", "db": {"port": 5432}}, by_name)
        assert cfg.name == "svc"
        assert cfg.db == Database(port=5432)
        assert cfg.tags == []
        assert cfg.replica is None

    def test_nested_and_collections(self):
        cfg = AppConfig()
        populate(
            cfg,
            {
                "replica": {"host": "r1"},
                "tags": ["a", "b"],
                "limits": {"cpu": 2},
                "pair": [1, 2],
                "level": "info",
                "ratio": 1,
            },
            by_name,
        )
        assert cfg.replica == Database(host="r1")
        assert cfg.tags == ["a", "b"]
        assert cfg.limits == {"cpu": 2}
        assert cfg.pair == (1, 2)
        assert cfg.level is Level.INFO
        assert cfg.ratio == 1.0

    def test_excluded_field_is_ignored(self):
        cfg = AppConfig()
        populate(cfg, {"secret": "s", "-": "s"}, by_name)
        assert cfg.secret == ""

    def test_null_for_required_field_is_ignored(self):
        cfg = AppConfig(name="keep")
        populate(cfg, {"name": None, "replica": None}, by_name)
        assert cfg.name == "keep"
        assert cfg.replica is None

    def test_type_mismatch(self):
        with pytest.raises(ValueError, match=r"db\.port"):
            populate(AppConfig(), {"db": {"port": "not a port"}}, by_name)

    def test_lax_coercion(self):
        cfg = AppConfig()
        populate(cfg, {"db": {"port": "5432"}, "ratio": 2}, by_name)
        assert cfg.db.port == 5432
        assert cfg.ratio == 2.0

    def test_datetime_and_fixed_tuple(self):
        @dataclass
        class Stamped:
            at: Optional[datetime] = None
            pair: Tuple[int, str] = (0, "")

        cfg = Stamped()
        populate(cfg, {"at": "2024-01-01T00:00:00", "pair": [1, "a"]}, by_name)
        assert cfg.at == datetime(2024, 1, 1)
        assert cfg.pair == (1, "a")

    def test_list_of_nested_uses_field_keys(self):
        @dataclass
        class Cluster:
            nodes: List[AppConfig] = field(default_factory=list)

        cfg = Cluster()
        populate(cfg, {"nodes": [{"name": "a", "secret": "s"}, {"db": {"port": 1}}]}, by_name)
        assert [n.name for n in cfg.nodes] == ["a", ""]
        assert cfg.nodes[0].secret == ""
        assert cfg.nodes[1].db == Database(port=1)

    def test_non_mapping_input(self):
        with pytest.raises(TypeError, match="expected a mapping"):
            populate(AppConfig(), ["name"], by_name)

    def test_disallow_unknown(self):
        with pytest.raises(ValueError, match="unknown field"):
            populate(AppConfig(), {"name": "x", "nope": 1}, by_name, disallow_unknown=True)

    def test_from_strings(self):
        cfg = AppConfig()
        populate(
            cfg,
            {"debug": "true", "ratio": "0.5", "tags": "a,b", "limits": "cpu:2,mem:4"},
            by_name,
            from_strings=True,
        )
        assert cfg.debug is True
        assert cfg.ratio == 0.5
        assert cfg.tags == ["a", "b"]
        assert cfg.limits == {"cpu": 2, "mem": 4}


class TestStrings:
    """Environment-style string parsing."""

    @pytest.mark.parametrize("raw", ["1", "t", "T", "TRUE", "true", "True"])
    def test_true(self, raw):
        assert coerce_string(bool, raw) is True

    @pytest.mark.parametrize("raw", ["0", "f", "F", "FALSE", "false", "False"])
    def test_false(self, raw):
        assert coerce_string(bool, raw) is False

    def test_invalid_bool(self):
        with pytest.raises(ValueError, match="invalid boolean"):
            coerce_string(bool, "yes")

    def test_invalid_int(self):
        with pytest.raises(ValueError, match="PORT: cannot parse 'ten'"):
            coerce_string(int, "ten", path="PORT")

    def test_enum_by_value(self):
        assert coerce_string(Level, "debug") is Level.DEBUG

    def test_lists_and_maps(self):
        assert coerce_string(List[int], "1,2,3") == [1, 2, 3]
        assert coerce_string(Dict[str, int], "cpu:2,mem:4") == {"cpu": 2, "mem": 4}
        assert coerce_string(List[str], "") == []

    def test_datetime(self):
        assert coerce_string(datetime, "2024-01-01T00:00:00") == datetime(2024, 1, 1)

    def test_split_map_requires_separator(self):
        with pytest.raises(ValueError):
            split_map("a:1,b")


@dataclass
class GitSettings:
    merge: bool = False
    port: int = 0


@dataclass
class SelfChecking:
    port: int = 0

    def validate(self) -> None:
        pass


def test_has_method():
    assert has_method(SelfChecking(), "validate")
    assert not has_method(SelfChecking(), "merge")
    # a field named like the hook hides nothing callable
    assert not has_method(GitSettings(merge=True), "merge")
    assert not has_method(GitSettings(), "merge")
