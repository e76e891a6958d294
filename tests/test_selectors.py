import pytest

from buildwatch.core.builds import BuildDefinition
from buildwatch.core.selectors import AndSelector, NameRegexSelector, OrSelector, PathSelector


def _definition(name, path=None):
    return BuildDefinition(uri="vstfs:///Build/Definition/1", name=name, path=path)


def test_name_regex_selector_matches():
    selector = NameRegexSelector("^CI-")

    assert selector.matches(_definition("CI-web")) is True
    assert selector.matches(_definition("Nightly-web")) is False


def test_name_regex_selector_rejects_invalid_pattern():
    with pytest.raises(ValueError, match="Invalid regex"):
        NameRegexSelector("(")


def test_path_selector_matches_folder_and_children():
    selector = PathSelector("/Team/CI")

    assert selector.matches(_definition("a", "\\Team\\CI")) is True
    assert selector.matches(_definition("b", "\\team\\ci\\web")) is True
    assert selector.matches(_definition("c", "\\Team\\CIX")) is False
    assert selector.matches(_definition("d", None)) is False


def test_root_path_selector_matches_everything_with_a_folder():
    assert PathSelector("\\").matches(_definition("a", "\\Team")) is True


def test_and_or_selectors():
    definition = _definition("CI-web", "\\Team\\CI")

    name_sel = NameRegexSelector("web")
    path_sel = PathSelector("\\Team")

    assert AndSelector([name_sel, path_sel]).matches(definition) is True
    assert AndSelector([name_sel, PathSelector("\\Other")]).matches(definition) is False
    assert OrSelector([name_sel, PathSelector("\\Other")]).matches(definition) is True
