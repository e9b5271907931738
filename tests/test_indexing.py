# tests/test_indexing.py

import numpy as np
import pytest

from core.errors import ModelError
from core.indexing.index_builder import GalleryIndexer
from core.indexing.scanner import GalleryScanner, extract_display_name
from core.vector_store.gallery_store import GalleryStore

from conftest import KeyedEmbedder, image_bytes, png_header


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("page1_10_photo_of_blondie.jpg", "Blondie"),
        ("random.jpg", "random"),
        ("page2_3_photo_of_rex_the_dog_.png", "Rex the dog"),
        ("photo_of_max__.webp", "Max"),
        ("Lucky Dog.PNG", "Lucky Dog"),
    ],
)
def test_extract_display_name(filename, expected):
    assert extract_display_name(filename) == expected


def test_scanner_filters_and_sorts(tmp_path):
    for name in ["b.JPG", "a.png", ".hidden.jpg", "notes.txt", "c.webp", "d.gif", "e.bmp", "f.jpeg"]:
        (tmp_path / name).write_bytes(b"x")
    (tmp_path / "nested.jpg").mkdir()

    files = GalleryScanner(tmp_path).scan()

    assert [f.identifier for f in files] == ["a.png", "b.JPG", "c.webp", "d.gif", "e.bmp", "f.jpeg"]


def test_scanner_raises_for_missing_directory(tmp_path):
    with pytest.raises(OSError):
        GalleryScanner(tmp_path / "missing").scan()


def test_build_index_from_gallery(gallery_dir, pixel_embedder):
    index = GalleryIndexer(pixel_embedder, show_progress=False).build_index(gallery_dir)

    assert index.identifiers == [
        "page1_10_photo_of_blondie.jpg",
        "page2_3_photo_of_rex_the_dog_.png",
        "random.png",
    ]
    assert [entry.display_name for entry in index] == ["Blondie", "Rex the dog", "random"]
    assert index.dim == pixel_embedder.dim
    assert index.model_name == pixel_embedder.model_name


def test_corrupt_files_are_skipped(gallery_dir, pixel_embedder):
    (gallery_dir / "broken.jpg").write_bytes(b"not an image at all")
    (gallery_dir / "empty.png").write_bytes(b"")

    indexer = GalleryIndexer(pixel_embedder, show_progress=False)
    index = indexer.build_index(gallery_dir)

    assert len(index) == 3
    assert sorted(failure.path.name for failure in indexer.failures) == ["broken.jpg", "empty.png"]
    assert "broken.jpg" not in index.identifiers


def test_oversized_image_is_skipped(tmp_path, pixel_embedder):
    (tmp_path / "good.png").write_bytes(image_bytes((40, 90, 160)))
    (tmp_path / "huge.png").write_bytes(png_header(20000, 20000))

    indexer = GalleryIndexer(pixel_embedder, show_progress=False)
    index = indexer.build_index(tmp_path)

    assert index.identifiers == ["good.png"]
    assert [failure.path.name for failure in indexer.failures] == ["huge.png"]


class UnloadableEmbedder(KeyedEmbedder):
    def __init__(self):
        super().__init__({(0, 0, 0): [1.0, 0.0, 0.0]})
        self.loads = 0

    def load(self):
        self.loads += 1
        raise ModelError("weights unavailable")


@pytest.mark.parametrize("workers", [1, 4])
def test_model_load_failure_aborts_build_once(gallery_dir, workers):
    embedder = UnloadableEmbedder()
    indexer = GalleryIndexer(embedder, workers=workers, show_progress=False)

    with pytest.raises(ModelError, match="weights unavailable"):
        indexer.build_index(gallery_dir)

    assert embedder.loads == 1
    assert embedder.calls == 0


def test_missing_directory_gives_empty_index(tmp_path, pixel_embedder):
    index = GalleryIndexer(pixel_embedder, show_progress=False).build_index(tmp_path / "nope")
    assert len(index) == 0


def test_empty_directory_gives_empty_index(tmp_path, pixel_embedder):
    index = GalleryIndexer(pixel_embedder, show_progress=False).build_index(tmp_path)
    assert len(index) == 0


def test_parallel_build_keeps_scan_order(tmp_path):
    colors = {}
    for i in range(10):
        color = (i * 20, 255 - i * 20, 7)
        colors[color] = [1.0, float(i), 0.5]
        (tmp_path / f"pet_{i:02d}.png").write_bytes(image_bytes(color))

    embedder = KeyedEmbedder(colors)
    index = GalleryIndexer(embedder, workers=4, show_progress=False).build_index(tmp_path)

    assert index.identifiers == [f"pet_{i:02d}.png" for i in range(10)]
    assert [float(entry.embedding[1]) for entry in index] == [float(i) for i in range(10)]


def test_load_or_build_reuses_cache(tmp_path):
    gallery = tmp_path / "gallery"
    gallery.mkdir()
    colors = {(200, 10, 10): [1.0, 0.0, 0.0], (10, 200, 10): [0.0, 1.0, 0.0]}
    (gallery / "red.png").write_bytes(image_bytes((200, 10, 10)))
    (gallery / "green.png").write_bytes(image_bytes((10, 200, 10)))
    (gallery / "broken.png").write_bytes(b"garbage")
    cache = tmp_path / "cache" / "gallery"

    embedder = KeyedEmbedder(colors)
    first = GalleryIndexer(embedder, show_progress=False).load_or_build(gallery, cache)
    calls_after_build = embedder.calls

    second = GalleryIndexer(embedder, show_progress=False).load_or_build(gallery, cache)

    assert calls_after_build == 2
    assert embedder.calls == calls_after_build
    assert second.identifiers == first.identifiers == ["green.png", "red.png"]
    assert np.allclose(second.matrix, first.matrix)


def test_load_or_build_rebuilds_when_gallery_changes(tmp_path):
    gallery = tmp_path / "gallery"
    gallery.mkdir()
    colors = {(200, 10, 10): [1.0, 0.0, 0.0], (10, 10, 200): [0.0, 0.0, 1.0]}
    (gallery / "red.png").write_bytes(image_bytes((200, 10, 10)))
    cache = tmp_path / "gallery-cache"

    embedder = KeyedEmbedder(colors)
    GalleryIndexer(embedder, show_progress=False).load_or_build(gallery, cache)
    (gallery / "blue.png").write_bytes(image_bytes((10, 10, 200)))

    index = GalleryIndexer(embedder, show_progress=False).load_or_build(gallery, cache)

    assert index.identifiers == ["blue.png", "red.png"]
    assert GalleryStore.read_sources(cache) == ["blue.png", "red.png"]


def test_cache_from_other_model_is_rejected(tmp_path, gallery_dir, pixel_embedder):
    cache = tmp_path / "idx"
    index = GalleryIndexer(pixel_embedder, show_progress=False).build_index(gallery_dir)
    GalleryStore.save(index, cache)

    with pytest.raises(ValueError):
        GalleryStore.load(cache, expected_model="some-other-model")

    restored = GalleryStore.load(cache, expected_model=pixel_embedder.model_name)
    assert [e.display_name for e in restored] == [e.display_name for e in index]
