import tempfile
import unittest
from pathlib import Path

from audio_fixtures import PNG_BYTES, make_mp3
from music_catalog.app import MusicCatalogApp
from music_catalog.config import ExtractionSettings, Settings, StorageSettings


class TestHostCommands(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        root = Path(tmp.name).resolve()
        self.inbox = root / "inbox"
        self.inbox.mkdir()
        settings = Settings(
            storage=StorageSettings(data_root=root / "data"),
            extraction=ExtractionSettings(duration_probes=["mpeg"]),
        )
        self.app = MusicCatalogApp.create(settings)
        self.addCleanup(self.app.close)
        self.commands = self.app.commands

    def test_upload_returns_record_payload(self) -> None:
        source = make_mp3(self.inbox / "cover.mp3", title="With Art", artist="Painter", cover=PNG_BYTES)
        result = self.commands.upload_music_file(str(source))
        self.assertTrue(result.ok)
        self.assertEqual(result.data["title"], "With Art")
        self.assertTrue(result.data["album_art"].startswith("data:image/png;base64,"))
        self.assertEqual(result.to_payload(), {"ok": True, "data": result.data})

    def test_upload_missing_file_is_an_error_string(self) -> None:
        result = self.commands.upload_music_file(str(self.inbox / "ghost.mp3"))
        self.assertFalse(result.ok)
        self.assertIn("ghost.mp3", result.error)
        self.assertEqual(result.to_payload(), {"ok": False, "error": result.error})

    def test_unknown_id_messages(self) -> None:
        for result in (
            self.commands.get_music_metadata("music_1"),
            self.commands.delete_music("music_1"),
            self.commands.set_favorite("music_1", True),
        ):
            self.assertFalse(result.ok)
            self.assertEqual(result.error, "Track with id music_1 not found")

    def test_full_cycle_through_invoke(self) -> None:
        source = make_mp3(self.inbox / "cycle.mp3", title="Cycle")
        uploaded = self.commands.invoke("upload_music_file", file_path=str(source))
        track_id = uploaded.data["id"]

        self.assertTrue(self.commands.invoke("set_favorite", id=track_id, favorite=True).ok)
        fetched = self.commands.invoke("get_music_metadata", id=track_id)
        self.assertTrue(fetched.data["favorite"])

        listed = self.commands.invoke("get_all_music")
        self.assertEqual([item["id"] for item in listed.data], [track_id])

        deleted = self.commands.invoke("delete_music", id=track_id)
        self.assertTrue(deleted.ok)
        self.assertIsNone(deleted.data)
        self.assertEqual(self.commands.invoke("get_all_music").data, [])

    def test_invoke_rejects_unknown_commands_and_arguments(self) -> None:
        self.assertEqual(self.commands.invoke("greet", name="x").error, "Unknown command: greet")
        bad = self.commands.invoke("set_favorite", id="music_1")
        self.assertFalse(bad.ok)
        self.assertTrue(bad.error.startswith("Invalid arguments for set_favorite"))

    def test_name_keyword_is_reported_as_invalid_argument(self) -> None:
        result = self.commands.invoke("upload_music_file", name="x")
        self.assertFalse(result.ok)
        self.assertTrue(result.error.startswith("Invalid arguments for upload_music_file"))

    def test_set_favorite_rejects_non_boolean_values(self) -> None:
        track_id = self.commands.upload_music_file(str(make_mp3(self.inbox / "flag.mp3", title="Flag"))).data["id"]
        for value in ("false", 1, None):
            result = self.commands.invoke("set_favorite", id=track_id, favorite=value)
            self.assertFalse(result.ok)
            self.assertIn("expected a boolean", result.error)
        self.assertFalse(self.commands.get_music_metadata(track_id).data["favorite"])

    def test_command_names(self) -> None:
        self.assertEqual(
            self.commands.names,
            ["delete_music", "get_all_music", "get_music_metadata", "set_favorite", "upload_music_file"],
        )


if __name__ == "__main__":
    unittest.main()
