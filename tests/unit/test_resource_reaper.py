"""Unit tests for per-request artifact cleanup."""

from pathlib import Path

from po_intake.pipeline.processors.resource_reaper import ResourceReaper


class TestReap:
    def test_deletes_tracked_files_and_workspace(self, work_dir):
        reaper = ResourceReaper.create(work_dir)
        a = reaper.track(reaper.workspace / "a.png")
        b = reaper.track(reaper.workspace / "b.png")
        a.write_bytes(b"a")
        b.write_bytes(b"b")

        assert reaper.reap() == []
        assert not a.exists()
        assert not b.exists()
        assert not reaper.workspace.exists()
        assert list(work_dir.iterdir()) == []

    def test_missing_files_skipped_silently(self, work_dir):
        reaper = ResourceReaper.create(work_dir)
        reaper.track(reaper.workspace / "never-written.png")

        assert reaper.reap() == []

    def test_directory_reported_as_not_a_file(self, work_dir):
        reaper = ResourceReaper.create(work_dir)
        sub = reaper.track(reaper.workspace / "subdir")
        sub.mkdir()

        errors = reaper.reap()

        assert f"{sub} is not a file" in errors
        # workspace is not empty, so removing it is reported too
        assert any(e.startswith(f"Error deleting {reaper.workspace}") for e in errors)

    def test_failure_does_not_stop_other_deletions(self, work_dir, monkeypatch):
        reaper = ResourceReaper.create(work_dir)
        bad = reaper.track(reaper.workspace / "bad.png")
        good = reaper.track(reaper.workspace / "good.png")
        bad.write_bytes(b"x")
        good.write_bytes(b"x")

        real_unlink = Path.unlink

        def flaky_unlink(self, *args, **kwargs):
            if self.name == "bad.png":
                raise PermissionError(13, "Permission denied")
            return real_unlink(self, *args, **kwargs)

        monkeypatch.setattr(Path, "unlink", flaky_unlink)

        errors = reaper.reap()

        assert f"Error deleting {bad}: Permission denied" in errors
        assert not good.exists()

    def test_each_artifact_deleted_at_most_once(self, work_dir):
        reaper = ResourceReaper.create(work_dir)
        path = reaper.track(reaper.workspace / "a.png")
        reaper.track(path)
        path.write_bytes(b"a")

        assert reaper.tracked == [path]
        reaper.reap()
        assert reaper.tracked == []
        assert reaper.reap() == []


class TestContextManager:
    def test_reaps_on_exception(self, work_dir):
        try:
            with ResourceReaper.create(work_dir) as reaper:
                path = reaper.track(reaper.workspace / "a.png")
                path.write_bytes(b"a")
                raise ValueError("stage failed")
        except ValueError:
            pass

        assert not path.exists()
        assert not reaper.workspace.exists()
        assert reaper.errors == []
