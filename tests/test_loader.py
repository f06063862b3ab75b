"""Tests for TOML catalogue loading."""

import pytest

from portlens.core.loader import (
    load_rules,
    load_signatures,
    parse_port_ranges,
    rule_from_dict,
    rules_from_catalogue,
    signature_from_dict,
    signatures_from_catalogue,
)
from portlens.errors import CatalogueError
from portlens.models.enums import ProcessCategory
from portlens.models.runtime import PortRange

CATALOGUE = """
[[rules]]
process_name = "caddy"
app_name = "Caddy"
description = "Caddy web server"
category = "system"
port_ranges = [[80, 80], [443, 443]]
actions = ["停止服务", "重启"]

[[rules]]
process_name = "beam.smp"
app_name = "Erlang VM"

[[signatures]]
name = "Astro开发服务器"
project_type = "Astro"
description = "Astro"
process_names = ["node"]
command_patterns = ["astro"]
port_ranges = [4321]
"""


@pytest.fixture
def catalogue_file(tmp_path):
    path = tmp_path / "catalogue.toml"
    path.write_text(CATALOGUE, encoding="utf-8")
    return path


class TestParsePortRanges:
    def test_pairs_and_ints(self):
        assert parse_port_ranges([[1, 10], 22]) == (PortRange(1, 10), PortRange(22, 22))

    def test_none(self):
        assert parse_port_ranges(None) is None

    @pytest.mark.parametrize("raw", [[[10, 1]], [[0, 5]], [[1, 70000]], [[1, 2, 3]], [["a", "b"]]])
    def test_invalid(self, raw):
        with pytest.raises(CatalogueError):
            parse_port_ranges(raw)


class TestLoadRules:
    def test_load(self, catalogue_file):
        rules = load_rules(catalogue_file)
        assert [r.process_name for r in rules] == ["caddy", "beam.smp"]
        caddy = rules[0]
        assert caddy.category is ProcessCategory.SYSTEM
        assert caddy.port_ranges == (PortRange(80, 80), PortRange(443, 443))
        assert caddy.actions == ("停止服务", "重启")

    def test_defaults(self, catalogue_file):
        beam = load_rules(catalogue_file)[1]
        assert beam.category is ProcessCategory.OTHER
        assert beam.port_ranges is None
        assert beam.actions == ()

    def test_unknown_category(self):
        with pytest.raises(CatalogueError, match="category"):
            rule_from_dict({"process_name": "x", "app_name": "X", "category": "games"})

    def test_missing_key(self):
        with pytest.raises(CatalogueError, match="app_name"):
            rule_from_dict({"process_name": "x"})

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogueError):
            load_rules(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[[rules]\n")
        with pytest.raises(CatalogueError):
            load_rules(path)


class TestLoadSignatures:
    def test_load(self, catalogue_file):
        (sig,) = load_signatures(catalogue_file)
        assert sig.project_type == "Astro"
        assert sig.process_names == ("node",)
        assert sig.port_ranges == (PortRange(4321, 4321),)

    def test_file_without_signatures(self, tmp_path):
        path = tmp_path / "rules-only.toml"
        path.write_text('[[rules]]\nprocess_name = "a"\napp_name = "A"\n')
        assert load_signatures(path) == []


SIGNATURE = {
    "name": "Astro开发服务器",
    "project_type": "Astro",
    "process_names": ["node"],
    "command_patterns": ["astro"],
}


class TestValueTypes:
    @pytest.mark.parametrize("key", ["process_names", "command_patterns"])
    def test_bare_string_instead_of_list(self, key):
        with pytest.raises(CatalogueError, match=key):
            signature_from_dict({**SIGNATURE, key: "astro"})

    def test_non_string_list_item(self):
        with pytest.raises(CatalogueError, match="process_names"):
            signature_from_dict({**SIGNATURE, "process_names": ["node", 1]})

    def test_actions_must_be_list(self):
        with pytest.raises(CatalogueError, match="actions"):
            rule_from_dict({"process_name": "x", "app_name": "X", "actions": "重启"})

    def test_name_must_be_string(self):
        with pytest.raises(CatalogueError, match="process_name"):
            rule_from_dict({"process_name": 5, "app_name": "X"})

    def test_scalar_port_ranges(self):
        with pytest.raises(CatalogueError, match="port_ranges"):
            parse_port_ranges(80)

    def test_scalar_port_ranges_in_file(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text('[[rules]]\nprocess_name = "a"\napp_name = "A"\nport_ranges = 80\n')
        with pytest.raises(CatalogueError):
            load_rules(path)

    @pytest.mark.parametrize("data", [{"rules": [1]}, {"rules": "caddy"}])
    def test_rules_must_be_tables(self, data):
        with pytest.raises(CatalogueError, match="rules"):
            rules_from_catalogue(data)

    def test_signatures_must_be_tables(self):
        with pytest.raises(CatalogueError, match="signatures"):
            signatures_from_catalogue({"signatures": ["astro"]})

    def test_parsed_data_reused(self):
        data = {"rules": [{"process_name": "a", "app_name": "A"}], "signatures": [SIGNATURE]}
        assert [r.process_name for r in rules_from_catalogue(data)] == ["a"]
        assert [s.project_type for s in signatures_from_catalogue(data)] == ["Astro"]
