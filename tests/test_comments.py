import dataclasses

from buildwatch.core.builds import BuildDefinition, BuildStatus, BuildStatusEnum, Changeset
from buildwatch.core.comments import CommentCache

DEFINITION = BuildDefinition(uri="vstfs:///Build/Definition/1", name="CI")


class _HistoryStub:
    def __init__(self, changeset):
        self.changeset = changeset
        self.calls = 0

    def get_latest_changeset(self, definition):
        self.calls += 1
        return self.changeset


def _status(**overrides):
    status = BuildStatus(
        build_definition_id="1",
        name="CI",
        build_id="100",
        status=BuildStatusEnum.WORKING,
        requested_by="ann",
        comment="manual",
    )
    return dataclasses.replace(status, **overrides)


def test_enrich_overwrites_comment_and_build_id():
    cache = CommentCache(_HistoryStub(Changeset(id="4711", author="ann", comment="fix")))

    enriched = cache.enrich_with_changeset(DEFINITION, _status())

    assert enriched.comment == "fix"
    assert enriched.build_id == "4711"
    assert enriched.status == BuildStatusEnum.WORKING


def test_same_fingerprint_fetches_once():
    history = _HistoryStub(Changeset(id="1", author="ann", comment="c"))
    cache = CommentCache(history)

    cache.enrich_with_changeset(DEFINITION, _status())
    cache.enrich_with_changeset(DEFINITION, _status())

    assert history.calls == 1


def test_changed_fingerprint_fetches_again():
    history = _HistoryStub(Changeset(id="1", author="ann", comment="c"))
    cache = CommentCache(history)

    cache.enrich_with_changeset(DEFINITION, _status())
    cache.enrich_with_changeset(DEFINITION, _status(status=BuildStatusEnum.BROKEN))

    assert history.calls == 2


def test_missing_changeset_returns_none_and_is_cached():
    history = _HistoryStub(None)
    cache = CommentCache(history)

    assert cache.enrich_with_changeset(DEFINITION, _status()) is None
    assert cache.enrich_with_changeset(DEFINITION, _status()) is None
    assert history.calls == 1
    assert cache.entries["CI"].changeset is None


def test_cache_is_keyed_by_definition_name():
    history = _HistoryStub(Changeset(id="1", author="ann", comment="c"))
    cache = CommentCache(history)
    same_name = BuildDefinition(uri="vstfs:///Build/Definition/2", name="CI")

    cache.enrich_with_changeset(DEFINITION, _status())
    cache.enrich_with_changeset(same_name, _status())

    assert history.calls == 1


def test_fingerprint_ignores_url():
    assert _status(url="a").fingerprint() == _status(url="b").fingerprint()
    assert _status(comment="a").fingerprint() != _status(comment="b").fingerprint()
