from pathlib import Path

import pytest

from openapi_snapshot.config import (
    DEFAULT_OUT,
    DEFAULT_OUTLINE_OUT,
    DEFAULT_URL,
    Config,
    Mode,
    OutputProfile,
    ReduceKey,
    parse_header,
    parse_reduce_list,
    validate_config,
)
from openapi_snapshot.errors import ReduceError, UsageError


def test_parse_reduce_list_accepts_paths_components():
    assert parse_reduce_list("paths,components") == [ReduceKey.PATHS, ReduceKey.COMPONENTS]


def test_parse_reduce_list_keeps_order_and_dedupes():
    assert parse_reduce_list("components, paths,components,") == [ReduceKey.COMPONENTS, ReduceKey.PATHS]


@pytest.mark.parametrize("value", ["", ",", "Paths", "info"])
def test_parse_reduce_list_rejects(value):
    with pytest.raises(ReduceError):
        parse_reduce_list(value)


def test_snapshot_defaults():
    config = Config.from_options()
    assert config.url == DEFAULT_URL
    assert config.url_from_default
    assert config.out == DEFAULT_OUT
    assert config.outline_out is None
    assert config.reduce == ()


def test_watch_defaults_for_full_profile():
    config = Config.from_options(mode=Mode(watch=True, interval_ms=500), minify=True)
    assert config.reduce == (ReduceKey.PATHS, ReduceKey.COMPONENTS)
    assert config.outline_out == DEFAULT_OUTLINE_OUT
    assert config.minify


def test_watch_no_outline_and_outline_profile():
    config = Config.from_options(mode=Mode(watch=True), no_outline=True)
    assert config.outline_out is None
    outline = Config.from_options(mode=Mode(watch=True), profile=OutputProfile.OUTLINE)
    assert outline.reduce == ()
    assert outline.outline_out is None
    validate_config(outline)


def test_explicit_url_is_not_default():
    config = Config.from_options(url="http://example.test/openapi.json")
    assert not config.url_from_default


def test_stdout_needs_no_out():
    config = Config.from_options(stdout=True)
    assert config.out is None
    validate_config(config)


def test_config_is_immutable():
    config = Config.from_options()
    with pytest.raises(Exception):
        config.url = "http://elsewhere"


@pytest.mark.parametrize(
    "config",
    [
        Config(out=None),
        Config(profile=OutputProfile.OUTLINE, reduce=(ReduceKey.PATHS,)),
        Config(profile=OutputProfile.OUTLINE, outline_out=Path("o.json")),
        Config(timeout_ms=0),
        Config(headers=("broken",)),
    ],
)
def test_validate_config_rejects(config):
    with pytest.raises(UsageError):
        validate_config(config)


def test_parse_header():
    assert parse_header("Authorization:  Bearer a:b ") == ("Authorization", "Bearer a:b")
    for raw in ("nocolon", ": value", "bad name: x", "X-Name: \u20ac", "X-Name: snow \u2603"):
        with pytest.raises(UsageError):
            parse_header(raw)
