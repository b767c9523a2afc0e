import pytest

from coursedocs.core.cache import MemoryCacheBackend, ReadCache
from coursedocs.models import TopicKind
from coursedocs.services import build_kind_services
from tests.stubs import InMemoryDocumentRepository, InMemoryTopicRepository, RecordingMediaStore, make_policy


@pytest.fixture
def media():
    return RecordingMediaStore()


@pytest.fixture
def cache():
    return ReadCache(MemoryCacheBackend())


@pytest.fixture
def course(media, cache):
    return build_kind_services(
        make_policy(TopicKind.COURSE), InMemoryTopicRepository(), InMemoryDocumentRepository(), media, cache
    )


@pytest.fixture
def interview(media, cache):
    return build_kind_services(
        make_policy(TopicKind.INTERVIEW), InMemoryTopicRepository(), InMemoryDocumentRepository(), media, cache
    )
