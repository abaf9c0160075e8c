import tempfile
import unittest
from pathlib import Path

from audio_fixtures import PNG_BYTES, make_junk, make_mp3, make_mp3_with_raw_title, make_tagged_junk
from music_catalog.config import ExtractionSettings
from music_catalog.extractors import ContainerDurationProbe, ID3TagExtractor, MPEGDurationProbe, MutagenTagExtractor
from music_catalog.extractors.artwork import to_data_uri
from music_catalog.models import DurationUnavailable, ExtractionError, TagReading
from music_catalog.resolver import MetadataResolver

ART = "data:image/png;base64,AAAA"


class FakeExtractor:
    def __init__(self, name, reading=None):
        self.name = name
        self.reading = reading
        self.calls = 0

    def extract(self, path):
        self.calls += 1
        if self.reading is None:
            raise ExtractionError(f"{self.name} cannot read {path}")
        return self.reading


class FakeArtSource:
    def __init__(self, art=None):
        self.name = "fake-art"
        self.art = art
        self.calls = 0

    def album_art(self, path):
        self.calls += 1
        if self.art is None:
            raise ExtractionError("no art")
        return self.art


class FakeProbe:
    def __init__(self, name, seconds=None):
        self.name = name
        self.seconds = seconds
        self.calls = 0

    def probe(self, path):
        self.calls += 1
        if self.seconds is None:
            raise DurationUnavailable("no timing")
        return self.seconds


class TestMetadataResolverChain(unittest.TestCase):
    def test_first_successful_extractor_wins(self) -> None:
        general = FakeExtractor("general", TagReading(title="T", artist="A", genre="G", album="Al", duration=100))
        fallback = FakeExtractor("fallback", TagReading(title="Other"))
        resolver = MetadataResolver([general, fallback], [FakeArtSource()], [FakeProbe("p", 5)])

        meta = resolver.resolve(Path("/music/x.mp3"))

        self.assertEqual((meta.title, meta.artist, meta.genre, meta.album), ("T", "A", "G", "Al"))
        self.assertEqual(meta.duration, 100)
        self.assertEqual(fallback.calls, 0)

    def test_falls_through_to_next_extractor(self) -> None:
        general = FakeExtractor("general")
        fallback = FakeExtractor("fallback", TagReading(title="From ID3", artist="Artist"))
        resolver = MetadataResolver([general, fallback])

        meta = resolver.resolve(Path("/music/x.mp3"))

        self.assertEqual(meta.title, "From ID3")
        self.assertEqual(general.calls, 1)
        self.assertEqual(fallback.calls, 1)

    def test_missing_art_is_spliced_from_art_source(self) -> None:
        general = FakeExtractor("general", TagReading(title="T", artist="A", genre="G"))
        art = FakeArtSource(ART)
        resolver = MetadataResolver([general], [art])

        meta = resolver.resolve(Path("/music/x.mp3"))

        self.assertEqual(meta.album_art, ART)
        self.assertEqual((meta.title, meta.artist, meta.genre), ("T", "A", "G"))

    def test_art_source_not_consulted_when_reading_has_art(self) -> None:
        general = FakeExtractor("general", TagReading(title="T", album_art="data:image/jpeg;base64,BBBB"))
        art = FakeArtSource(ART)
        resolver = MetadataResolver([general], [art])

        meta = resolver.resolve(Path("/music/x.mp3"))

        self.assertEqual(meta.album_art, "data:image/jpeg;base64,BBBB")
        self.assertEqual(art.calls, 0)

    def test_duration_probes_run_in_order_until_one_succeeds(self) -> None:
        first = FakeProbe("first")
        second = FakeProbe("second", 42)
        third = FakeProbe("third", 99)
        resolver = MetadataResolver([FakeExtractor("general", TagReading(title="T"))], [], [first, second, third])

        meta = resolver.resolve(Path("/music/x.flac"))

        self.assertEqual(meta.duration, 42)
        self.assertEqual((first.calls, second.calls, third.calls), (1, 1, 0))

    def test_duration_left_absent_when_no_probe_succeeds(self) -> None:
        resolver = MetadataResolver([FakeExtractor("general", TagReading(title="T"))], [], [FakeProbe("p")])
        self.assertIsNone(resolver.resolve(Path("/music/x.flac")).duration)

    def test_defaults_when_tags_are_empty(self) -> None:
        resolver = MetadataResolver([FakeExtractor("general", TagReading())])
        meta = resolver.resolve(Path("/music/My Track.mp3"))
        self.assertEqual(meta.title, "My Track")
        self.assertEqual(meta.artist, "Unknown Artist")
        self.assertIsNone(meta.genre)
        self.assertIsNone(meta.album)

    def test_defaults_when_every_extractor_fails(self) -> None:
        resolver = MetadataResolver(
            [FakeExtractor("general"), FakeExtractor("fallback")],
            [FakeArtSource(ART)],
            [FakeProbe("p", 7)],
        )
        meta = resolver.resolve(Path("/music/untagged.ogg"))
        self.assertEqual(meta.title, "untagged")
        self.assertEqual(meta.artist, "Unknown Artist")
        self.assertEqual(meta.album_art, ART)
        self.assertEqual(meta.duration, 7)

    def test_requires_an_extractor(self) -> None:
        with self.assertRaises(ValueError):
            MetadataResolver([])


class TestMetadataResolverFromSettings(unittest.TestCase):
    def test_default_chain(self) -> None:
        resolver = MetadataResolver.from_settings()
        self.assertEqual([type(e) for e in resolver.extractors], [MutagenTagExtractor, ID3TagExtractor])
        self.assertEqual([type(s) for s in resolver.art_sources], [ID3TagExtractor])
        self.assertIs(resolver.extractors[1], resolver.art_sources[0])
        self.assertEqual(
            [type(p) for p in resolver.duration_probes],
            [MPEGDurationProbe, ContainerDurationProbe],
        )

    def test_custom_order(self) -> None:
        settings = ExtractionSettings(extractor_order=["id3"], art_sources=[], duration_probes=["container"])
        resolver = MetadataResolver.from_settings(settings)
        self.assertEqual([e.name for e in resolver.extractors], ["id3"])
        self.assertEqual(resolver.art_sources, [])
        self.assertEqual([p.name for p in resolver.duration_probes], ["container"])


class TestMetadataResolverOnFiles(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = MetadataResolver(
            [MutagenTagExtractor(), ID3TagExtractor()],
            [ID3TagExtractor()],
            [MPEGDurationProbe()],
        )

    def test_tagged_mp3(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = make_mp3(Path(tmpdir) / "song.mp3", title="Test Song", artist="Test Artist")
            meta = self.resolver.resolve(path)
        self.assertEqual(meta.title, "Test Song")
        self.assertEqual(meta.artist, "Test Artist")
        self.assertIsNone(meta.album_art)
        self.assertEqual(meta.duration, 5)

    def test_damaged_audio_falls_back_to_id3(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = make_tagged_junk(Path(tmpdir) / "broken.mp3", title="Recovered", album="Rescue", cover=PNG_BYTES)
            meta = self.resolver.resolve(path)
        self.assertEqual(meta.title, "Recovered")
        self.assertEqual(meta.artist, "Unknown Artist")
        self.assertEqual(meta.album, "Rescue")
        self.assertEqual(meta.album_art, to_data_uri(PNG_BYTES, "image/png"))
        self.assertIsNone(meta.duration)

    def test_unreadable_file_gets_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = make_junk(Path(tmpdir) / "mystery.mp3")
            meta = self.resolver.resolve(path)
        self.assertEqual(meta.title, "mystery")
        self.assertEqual(meta.artist, "Unknown Artist")
        self.assertIsNone(meta.album_art)
        self.assertIsNone(meta.duration)

    def test_title_frame_with_invalid_utf8_is_recovered(self) -> None:
        resolver = MetadataResolver([ID3TagExtractor()], [], [ContainerDurationProbe()])
        with tempfile.TemporaryDirectory() as tmpdir:
            path = make_mp3_with_raw_title(Path(tmpdir) / "mangled.mp3", b"\xd3(bad")
            meta = resolver.resolve(path)
        self.assertEqual(meta.artist, "Unknown Artist")
        self.assertIn(meta.duration, (None, 5))


if __name__ == "__main__":
    unittest.main()
