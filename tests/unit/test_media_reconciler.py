from datetime import datetime, timezone

import pytest

from coursedocs.content import ContentReferenceTracker, ExplicitListTracker
from coursedocs.models import Document
from coursedocs.services import MediaReconciler
from tests.stubs import RecordingMediaStore, media_url, rich_content

NOW = datetime(2024, 4, 5, tzinfo=timezone.utc)


def make_document(content="{}", image_urls=None) -> Document:
    return Document(
        id="d1",
        topic_id="t1",
        title="Hooks",
        slug="hooks",
        content=content,
        image_urls=image_urls or [],
        created_at=NOW,
        updated_at=NOW,
    )


def test_orphaned_is_the_set_difference_of_content_references():
    reconciler = MediaReconciler(RecordingMediaStore(), ContentReferenceTracker())
    before = make_document(rich_content(media_url("a"), media_url("b")))
    after = make_document(rich_content(media_url("b"), media_url("c")))

    assert reconciler.orphaned(before, after) == {media_url("a")}


def test_explicit_tracker_ignores_content():
    reconciler = MediaReconciler(RecordingMediaStore(), ExplicitListTracker())
    document = make_document(rich_content(media_url("inline")), image_urls=[media_url("listed")])

    assert reconciler.tracked_urls(document) == {media_url("listed")}


@pytest.mark.asyncio
async def test_release_continues_past_failures():
    class FlakyStore(RecordingMediaStore):
        async def delete_by_url(self, url):
            self.deleted_urls.append(url)
            if url == media_url("a"):
                raise RuntimeError("timeout")
            return url != media_url("c")

    store = FlakyStore()
    reconciler = MediaReconciler(store, ContentReferenceTracker())

    released = await reconciler.release([media_url("c"), media_url("a"), media_url("b"), media_url("a")])

    assert released == 1
    assert store.deleted_urls == [media_url("a"), media_url("b"), media_url("c")]
