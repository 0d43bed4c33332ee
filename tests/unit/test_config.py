"""
test_config.py - options / config file tests

DoD:
- defaults per option table
- string globs → one-item lists, camelCase names accepted
- keys merged, unknown options → INVALID_CONFIG
- config file base_dir relative to the file
"""

from pathlib import Path

import pytest

from fabassemble.config import AssemblyOptions, KeysConfig, load_options, merge_options
from fabassemble.domain.errors import AssemblyError, ErrorCodes


class TestDefaults:
    """AssemblyOptions defaults."""

    def test_defaults(self):
        options = AssemblyOptions()

        assert options.layout == "default"
        assert options.materials == ["src/materials/**/*"]
        assert options.views == ["src/views/**/*", "!src/views/layouts/**"]
        assert options.data == ["src/data/**/*.{json,yml,yaml}"]
        assert options.keys == KeysConfig("materials", "views", "docs")
        assert options.dest == Path("dist")
        assert options.dna is True
        assert options.strict_ids is False

    def test_instances_independent(self):
        a = AssemblyOptions()
        b = AssemblyOptions()
        a.materials.append("extra/*")

        assert b.materials == ["src/materials/**/*"]

    def test_dest_dir(self):
        options = AssemblyOptions(base_dir=Path("/site"), dest=Path("out"))

        assert options.dest_dir == Path("/site/out")


class TestFromDict:
    """AssemblyOptions.from_dict / merge_options tests."""

    def test_string_glob(self):
        options = AssemblyOptions.from_dict({"materials": "patterns/**/*"})

        assert options.materials == ["patterns/**/*"]

    def test_camel_case_names(self):
        options = AssemblyOptions.from_dict({"layoutIncludes": "inc/*", "logErrors": True})

        assert options.layout_includes == ["inc/*"]
        assert options.log_errors is True

    def test_keys_merged(self):
        options = AssemblyOptions.from_dict({"keys": {"materials": "patterns"}})

        assert options.keys == KeysConfig(materials="patterns", views="views", docs="docs")

    def test_unknown_option(self):
        with pytest.raises(AssemblyError) as exc_info:
            AssemblyOptions.from_dict({"beautifier": {}})

        assert exc_info.value.code == ErrorCodes.INVALID_CONFIG
        assert exc_info.value.context["option"] == "beautifier"

    def test_unknown_key_name(self):
        with pytest.raises(AssemblyError) as exc_info:
            AssemblyOptions.from_dict({"keys": {"pages": "x"}})

        assert exc_info.value.code == ErrorCodes.INVALID_CONFIG

    def test_merge_does_not_modify_base(self):
        base = AssemblyOptions()

        merged = merge_options(base, {"keys": {"docs": "guides"}, "helpers": {"x": len}})

        assert base.keys.docs == "docs"
        assert base.helpers == {}
        assert merged.keys.docs == "guides"
        assert merged.helpers == {"x": len}

    def test_hooks_appended(self):
        first, second = object(), object()
        base = AssemblyOptions(hooks=[first])

        merged = merge_options(base, {"hooks": [second]})

        assert merged.hooks == [first, second]
        assert base.hooks == [first]


class TestLoadOptions:
    """load_options tests."""

    def test_base_dir_defaults_to_config_dir(self, tmp_path: Path):
        config = tmp_path / "fabassemble.yaml"
        config.write_text("dest: public\nmaterials: patterns/**/*\n", encoding="utf-8")

        options = load_options(config)

        assert options.base_dir == tmp_path / "."
        assert options.dest_dir == tmp_path / "." / "public"
        assert options.materials == ["patterns/**/*"]

    def test_relative_base_dir(self, tmp_path: Path):
        config = tmp_path / "fabassemble.yaml"
        config.write_text("baseDir: site\n", encoding="utf-8")

        options = load_options(config)

        assert options.base_dir == tmp_path / "site"

    def test_overrides_applied_last(self, tmp_path: Path):
        config = tmp_path / "fabassemble.yaml"
        config.write_text("dna: true\n", encoding="utf-8")

        options = load_options(config, dna=False)

        assert options.dna is False

    def test_empty_file(self, tmp_path: Path):
        config = tmp_path / "fabassemble.yaml"
        config.write_text("", encoding="utf-8")

        assert load_options(config).layout == "default"

    def test_invalid_yaml(self, tmp_path: Path):
        config = tmp_path / "fabassemble.yaml"
        config.write_text("dest: [x\n", encoding="utf-8")

        with pytest.raises(AssemblyError) as exc_info:
            load_options(config)

        assert exc_info.value.code == ErrorCodes.INVALID_CONFIG

    def test_not_a_mapping(self, tmp_path: Path):
        config = tmp_path / "fabassemble.yaml"
        config.write_text("- a\n", encoding="utf-8")

        with pytest.raises(AssemblyError) as exc_info:
            load_options(config)

        assert exc_info.value.code == ErrorCodes.INVALID_CONFIG
