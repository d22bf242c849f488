"""Tests for configuration helpers."""

import pytest
import yaml
from pydantic import ValidationError

from blazor_pack.config import CodecConfig, dump_config, load_config
from blazor_pack.framing.varint import MAX_FRAME_LENGTH


def test_defaults():
    cfg = load_config(None)
    assert cfg.max_depth == 100
    assert cfg.max_frame_length == MAX_FRAME_LENGTH
    assert cfg.json_indent is None
    assert cfg.preserve_int_format is False


def test_load_and_dump_config(tmp_path):
    cfg_path = tmp_path / "codec.yaml"
    cfg_path.write_text(yaml.safe_dump({"max_depth": 32, "json_indent": 2, "preserve_int_format": True}))

    cfg = load_config(cfg_path)
    assert cfg.max_depth == 32
    assert cfg.json_indent == 2
    assert cfg.preserve_int_format is True

    out_path = tmp_path / "nested" / "dump.yaml"
    dump_config(cfg, out_path)
    assert load_config(out_path) == cfg


def test_empty_file_gives_defaults(tmp_path):
    cfg_path = tmp_path / "empty.yaml"
    cfg_path.write_text("")
    assert load_config(cfg_path) == CodecConfig()


def test_indent_accepts_none_strings():
    assert CodecConfig(json_indent="none").json_indent is None
    assert CodecConfig(json_indent="").json_indent is None


def test_non_mapping_file_is_rejected(tmp_path):
    cfg_path = tmp_path / "list.yaml"
    cfg_path.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_config(cfg_path)


@pytest.mark.parametrize(
    "field, value",
    [("max_depth", 0), ("max_depth", 201), ("max_frame_length", MAX_FRAME_LENGTH + 1), ("json_indent", 9)],
)
def test_limits_are_validated(field, value):
    with pytest.raises(ValidationError):
        CodecConfig(**{field: value})
