"""Unit tests for RenameProcessor."""

import logging
from pathlib import Path

import pytest

from bulkrename.filesystem import LocalFileSystem
from bulkrename.models.file import FileRecord, load_batch
from bulkrename.processors.rename_processor import DEFAULT_MAX_COLLISION_ATTEMPTS, RenameProcessor
from bulkrename.processors.strategies import ExactMatchStrategy, RegexMatchStrategy


def _proposed(path: str, new_name: str) -> FileRecord:
    return FileRecord.from_path(path).with_new_name(new_name)


class TestRenameProcessor:
    """Tests for RenameProcessor construction."""

    def test_init_defaults(self):
        """Test processor initialization with defaults."""
        processor = RenameProcessor()

        assert isinstance(processor.filesystem, LocalFileSystem)
        assert processor.max_collision_attempts == DEFAULT_MAX_COLLISION_ATTEMPTS == 1000

    def test_init_rejects_non_positive_attempts(self, fake_fs):
        with pytest.raises(ValueError):
            RenameProcessor(filesystem=fake_fs, max_collision_attempts=0)


class TestGeneratePreview:
    """Tests for preview generation."""

    def test_applies_strategy_to_original_names(self, fake_fs):
        """Test that each record gets the transformed name."""
        processor = RenameProcessor(filesystem=fake_fs)
        records = load_batch(["/docs/test1.txt", "/docs/other.txt"])

        preview = processor.generate_preview(records, ExactMatchStrategy("test", "done"))

        assert [r.new_name for r in preview] == ["done1.txt", "other.txt"]
        assert [r.has_changed for r in preview] == [True, False]

    def test_preserves_order(self, fake_fs):
        processor = RenameProcessor(filesystem=fake_fs)
        records = load_batch(["/z/zebra.txt", "/a/apple.txt", "/m/mango.txt"])

        preview = processor.generate_preview(records, ExactMatchStrategy(".txt", ".md"))

        assert [r.original_name for r in preview] == ["zebra.txt", "apple.txt", "mango.txt"]
        assert [r.new_name for r in preview] == ["zebra.md", "apple.md", "mango.md"]

    def test_does_not_mutate_input(self, fake_fs):
        """Test that the caller's records keep their proposal."""
        processor = RenameProcessor(filesystem=fake_fs)
        records = load_batch(["/docs/test.txt"])

        processor.generate_preview(records, ExactMatchStrategy("test", "done"))

        assert records[0].new_name == "test.txt"
        assert not records[0].has_changed

    def test_repeated_preview_does_not_compound(self, fake_fs):
        """Test that a second preview starts again from the original name."""
        processor = RenameProcessor(filesystem=fake_fs)
        records = load_batch(["/docs/a.txt"])

        first = processor.generate_preview(records, ExactMatchStrategy("a", "ab"))
        second = processor.generate_preview(first, ExactMatchStrategy("a", "ab"))

        assert first[0].new_name == "ab.txt"
        assert second[0].new_name == "ab.txt"

    def test_does_not_touch_filesystem(self, fake_fs):
        processor = RenameProcessor(filesystem=fake_fs)

        processor.generate_preview(load_batch(["/docs/a.txt"]), ExactMatchStrategy("a", "b"))

        assert fake_fs.renames == []

    def test_empty_batch(self, fake_fs):
        processor = RenameProcessor(filesystem=fake_fs)

        assert processor.generate_preview([], ExactMatchStrategy("a", "b")) == []


class TestExecute:
    """Tests for executing a previewed batch."""

    def test_unchanged_record_is_passed_through(self, fake_fs):
        """Test that unchanged files never reach the rename call."""
        fake_fs.files.add(Path("/docs/keep.txt"))
        processor = RenameProcessor(filesystem=fake_fs)

        result = processor.execute(load_batch(["/docs/keep.txt"]))

        assert fake_fs.renames == []
        assert result.new_paths == [Path("/docs/keep.txt")]
        assert result.success_count == 0
        assert result.failure_count == 0
        assert result.skipped_count == 1

    def test_renames_changed_record(self, fake_fs):
        fake_fs.files.add(Path("/docs/old.txt"))
        processor = RenameProcessor(filesystem=fake_fs)

        result = processor.execute([_proposed("/docs/old.txt", "new.txt")])

        assert fake_fs.renames == [(Path("/docs/old.txt"), Path("/docs/new.txt"))]
        assert result.success_count == 1
        assert result.new_paths == [Path("/docs/new.txt")]
        assert result.errors == []

    def test_collision_uses_first_free_number(self, fake_fs):
        """Test that renamed.txt and renamed1.txt being taken leads to renamed2.txt."""
        fake_fs.files.update({Path("/d/source.txt"), Path("/d/renamed.txt"), Path("/d/renamed1.txt")})
        processor = RenameProcessor(filesystem=fake_fs)

        result = processor.execute([_proposed("/d/source.txt", "renamed.txt")])

        assert fake_fs.renames == [(Path("/d/source.txt"), Path("/d/renamed2.txt"))]
        assert result.new_paths == [Path("/d/renamed2.txt")]
        assert result.success_count == 1

    def test_collision_without_extension(self, fake_fs):
        fake_fs.files.update({Path("/d/a"), Path("/d/b")})
        processor = RenameProcessor(filesystem=fake_fs)

        result = processor.execute([_proposed("/d/a", "b")])

        assert result.new_paths == [Path("/d/b1")]

    def test_collision_logged(self, fake_fs, caplog):
        fake_fs.files.update({Path("/d/a.txt"), Path("/d/b.txt")})
        processor = RenameProcessor(filesystem=fake_fs)

        with caplog.at_level(logging.INFO, logger="bulkrename"):
            processor.execute([_proposed("/d/a.txt", "b.txt")])

        assert "b1.txt" in caplog.text

    def test_collision_exhausted(self, fake_fs):
        """Test that running out of candidates fails only that file."""
        fake_fs.files.add(Path("/d/source.txt"))
        fake_fs.files.add(Path("/d/taken.txt"))
        fake_fs.files.update(Path(f"/d/taken{i}.txt") for i in range(1, 1001))
        processor = RenameProcessor(filesystem=fake_fs)

        result = processor.execute([_proposed("/d/source.txt", "taken.txt")])

        assert result.failure_count == 1
        assert result.success_count == 0
        assert result.new_paths == [Path("/d/source.txt")]
        assert "1000" in result.errors[0]
        assert "source.txt" in result.errors[0]
        assert fake_fs.renames == []

    def test_collision_bound_is_configurable(self, fake_fs):
        fake_fs.files.update({Path("/d/a.txt"), Path("/d/b.txt"), Path("/d/b1.txt"), Path("/d/b2.txt")})
        processor = RenameProcessor(filesystem=fake_fs, max_collision_attempts=2)

        result = processor.execute([_proposed("/d/a.txt", "b.txt")])

        assert result.failure_count == 1
        assert "after 2 attempts" in result.errors[0]

    def test_exhausted_file_does_not_abort_batch(self, fake_fs):
        fake_fs.files.update({Path("/d/a.txt"), Path("/d/b.txt"), Path("/d/c.txt"), Path("/d/c1.txt")})
        processor = RenameProcessor(filesystem=fake_fs, max_collision_attempts=1)

        result = processor.execute([_proposed("/d/a.txt", "c.txt"), _proposed("/d/b.txt", "z.txt")])

        assert result.failure_count == 1
        assert result.success_count == 1
        assert result.new_paths == [Path("/d/a.txt"), Path("/d/z.txt")]

    def test_rename_failure_skips_file(self, fake_fs):
        """Test that a failing file does not stop the files after it."""
        for name in ("one.txt", "two.txt", "three.txt"):
            fake_fs.files.add(Path("/d") / name)
        fake_fs.fail_on("/d/two.txt", PermissionError("permission denied"))
        processor = RenameProcessor(filesystem=fake_fs)
        records = [
            _proposed("/d/one.txt", "1.txt"),
            _proposed("/d/two.txt", "2.txt"),
            _proposed("/d/three.txt", "3.txt"),
        ]

        result = processor.execute(records)

        assert result.success_count == 2
        assert result.failure_count == 1
        assert len(result.errors) == 1
        assert "two.txt" in result.errors[0]
        assert "permission denied" in result.errors[0]
        assert result.new_paths == [Path("/d/1.txt"), Path("/d/two.txt"), Path("/d/3.txt")]

    def test_result_paths_parallel_to_input(self, fake_fs):
        fake_fs.files.update({Path("/d/a.txt"), Path("/d/b.txt"), Path("/d/c.txt")})
        fake_fs.fail_on("/d/c.txt", OSError("disk error"))
        processor = RenameProcessor(filesystem=fake_fs)
        records = [
            _proposed("/d/a.txt", "x.txt"),
            FileRecord.from_path("/d/b.txt"),
            _proposed("/d/c.txt", "y.txt"),
        ]

        result = processor.execute(records)

        assert len(result) == len(records)
        assert result.new_paths == [Path("/d/x.txt"), Path("/d/b.txt"), Path("/d/c.txt")]
        assert result.skipped_count == 1

    def test_earlier_renames_are_seen_by_later_collisions(self, fake_fs):
        """Test that the first file in the batch wins a contested name."""
        fake_fs.files.update({Path("/d/a.txt"), Path("/d/b.txt")})
        processor = RenameProcessor(filesystem=fake_fs)

        result = processor.execute([_proposed("/d/a.txt", "same.txt"), _proposed("/d/b.txt", "same.txt")])

        assert result.new_paths == [Path("/d/same.txt"), Path("/d/same1.txt")]
        assert result.success_count == 2

    @pytest.mark.parametrize("new_name", ["", ".", ".."])
    def test_unusable_new_name_fails_file(self, fake_fs, new_name):
        """Test that a name pointing at the directory itself is rejected, not numbered."""
        fake_fs.files.update({Path("/d"), Path("/d/report.txt"), Path("/d/next.txt")})
        processor = RenameProcessor(filesystem=fake_fs)

        result = processor.execute([_proposed("/d/report.txt", new_name), _proposed("/d/next.txt", "done.txt")])

        assert result.failure_count == 1
        assert result.success_count == 1
        assert "report.txt" in result.errors[0]
        assert "invalid new name" in result.errors[0]
        assert result.new_paths == [Path("/d/report.txt"), Path("/d/done.txt")]
        assert fake_fs.renames == [(Path("/d/next.txt"), Path("/d/done.txt"))]

    def test_empty_batch(self, fake_fs):
        result = RenameProcessor(filesystem=fake_fs).execute([])

        assert result.success_count == 0
        assert result.new_paths == []


class TestRenameProcessorIntegration:
    """Integration tests against the real filesystem."""

    def test_full_workflow(self, tmp_path):
        """Test preview then execute on real files."""
        (tmp_path / "test1.txt").touch()
        (tmp_path / "test2.txt").touch()
        (tmp_path / "other.txt").touch()
        processor = RenameProcessor()
        records = load_batch([tmp_path / "test1.txt", tmp_path / "test2.txt", tmp_path / "other.txt"])

        preview = processor.generate_preview(records, RegexMatchStrategy(r"test(\d)", "result_$1"))
        result = processor.execute(preview)

        assert result.success_count == 2
        assert (tmp_path / "result_1.txt").exists()
        assert (tmp_path / "result_2.txt").exists()
        assert (tmp_path / "other.txt").exists()
        assert not (tmp_path / "test1.txt").exists()

    def test_existing_target_is_not_overwritten(self, tmp_path):
        source = tmp_path / "source.txt"
        target = tmp_path / "target.txt"
        source.write_text("source")
        target.write_text("target")
        processor = RenameProcessor()

        result = processor.execute([_proposed(str(source), "target.txt")])

        assert target.read_text() == "target"
        assert (tmp_path / "target1.txt").read_text() == "source"
        assert result.new_paths == [tmp_path / "target1.txt"]

    def test_replacing_whole_name_with_nothing(self, tmp_path):
        """Test that an empty new name leaves the file in place."""
        source = tmp_path / "report.txt"
        source.touch()
        processor = RenameProcessor()

        preview = processor.generate_preview(load_batch([source]), ExactMatchStrategy("report.txt", ""))
        result = processor.execute(preview)

        assert result.failure_count == 1
        assert result.success_count == 0
        assert source.exists()
        assert not (tmp_path / "1").exists()

    def test_missing_source_is_reported(self, tmp_path):
        processor = RenameProcessor()

        result = processor.execute([_proposed(str(tmp_path / "ghost.txt"), "new.txt")])

        assert result.failure_count == 1
        assert "ghost.txt" in result.errors[0]
