import json

import pytest
import yaml

from linkcheck.config import CheckConfig, load_config, normalize_root, save_config


def test_root_is_normalized():
    config = CheckConfig(root="htTp://WWW.Example.com:80")

    assert config.root == "http://www.example.com/"


def test_root_fragment_is_dropped():
    assert normalize_root("http://site.test/docs/#intro") == "http://site.test/docs/"


@pytest.mark.parametrize("root", ["", "   ", "not a url", "/docs", "ftp://site.test/"])
def test_malformed_root_is_rejected(root):
    with pytest.raises(ValueError):
        CheckConfig(root=root)


def test_defaults():
    config = CheckConfig(root="http://site.test/")

    assert config.verbose is True
    assert config.debug is False
    assert config.external_links is True
    assert config.headers_for(config.root)["User-Agent"] == config.user_agent


def test_in_root():
    config = CheckConfig(root="http://site.test/docs/")

    assert config.in_root("http://site.test/docs/a")
    assert not config.in_root("http://site.test/blog")


def test_rejects_non_positive_timeout():
    with pytest.raises(ValueError, match="timeout_seconds"):
        CheckConfig(root="http://site.test/", timeout_seconds=0)


def test_from_dict_requires_root():
    with pytest.raises(ValueError, match="root"):
        CheckConfig.from_dict({"verbose": False})


def test_from_dict_rejects_non_bool_flags():
    with pytest.raises(ValueError, match="external_links"):
        CheckConfig.from_dict({"root": "http://site.test/", "external_links": "no"})


def test_load_yaml(tmp_path):
    path = tmp_path / "check.yaml"
    path.write_text(
        yaml.safe_dump({"root": "http://site.test", "external_links": False, "timeout_seconds": 5}),
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.root == "http://site.test/"
    assert config.external_links is False
    assert config.timeout_seconds == 5.0


def test_save_and_load_json(tmp_path):
    path = tmp_path / "nested" / "check.json"
    original = CheckConfig(root="http://site.test/", debug=True, user_agent="bot/2")

    save_config(original, path)

    assert json.loads(path.read_text(encoding="utf-8"))["user_agent"] == "bot/2"
    assert load_config(path).to_dict() == original.to_dict()


def test_unsupported_suffix(tmp_path):
    path = tmp_path / "check.toml"
    path.write_text("root = 'x'", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported config suffix"):
        load_config(path)
