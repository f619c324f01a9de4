"""fbmsggen.toml handling."""
from pathlib import Path

import pytest

from fbmsggen.compiler.config import (
    ConfigError, GeneratorConfig, find_config, load_config, load_config_from_string,
)
from fbmsggen.semantics.records import KIND_MSG, KIND_SYMBOL


def test_defaults():
    config = GeneratorConfig()
    assert config.output == Path("errmsgs.go")
    assert (config.package, config.variable) == ("firebirdsql", "errmsgs")
    assert config.macros == [KIND_MSG]
    config.validate()


def test_paths_resolve_against_config_dir(tmp_path):
    config = load_config_from_string(
        """
        [generator]
        inputs = ["src/include/firebird/impl/msg/all.h"]
        include_dirs = "src/include"
        output = "out/errmsgs.go"
        package = "fb"
        variable = "messages"
        macros = ["FB_IMPL_MSG", "FB_IMPL_MSG_SYMBOL"]

        [facilities]
        R2DBC_FIREBIRD = 27
        """,
        base_dir=tmp_path,
    )
    assert config.inputs == [tmp_path / "src/include/firebird/impl/msg/all.h"]
    assert config.include_dirs == [tmp_path / "src/include"]
    assert config.output == tmp_path / "out/errmsgs.go"
    assert (config.package, config.variable) == ("fb", "messages")
    assert config.macros == [KIND_MSG, KIND_SYMBOL]
    assert config.facilities == {"R2DBC_FIREBIRD": 27}


@pytest.mark.parametrize("text, reason", [
    ('[generator]\npackage = "1bad"\n', "not a Go identifier"),
    ('[generator]\nvariable = "err-msgs"\n', "not a Go identifier"),
    ('[generator]\npackage = "func"\n', "is a Go keyword"),
    ('[generator]\nvariable = "map"\n', "is a Go keyword"),
    ('[generator]\nmacros = ["FB_IMPL_MSG_WHATEVER"]\n', "unknown macro"),
    ('[generator]\ninputs = [1, 2]\n', "list of paths"),
    ('[facilities]\nJRD = "0"\n', "must be an integer"),
    ('generator = 5\n', "must be a table"),
    ('[generator\n', "Expected"),
])
def test_invalid_config(text, reason):
    with pytest.raises(ConfigError) as info:
        load_config_from_string(text, source="fbmsggen.toml")
    assert reason in info.value.reason
    assert info.value.code == "GE3002"


def test_load_config_file(tmp_path):
    path = tmp_path / "fbmsggen.toml"
    path.write_text('[generator]\ninputs = ["all.h"]\n', encoding="utf-8")
    config = load_config(path)
    assert config.inputs == [tmp_path / "all.h"]
    assert config.source == str(path)


def test_load_missing_config(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "fbmsggen.toml")


def test_find_config(tmp_path):
    assert find_config(tmp_path) is None
    (tmp_path / "fbmsggen.toml").write_text("", encoding="utf-8")
    assert find_config(tmp_path) == tmp_path / "fbmsggen.toml"
