"""Tests for the packaging stages."""

from pathlib import Path
import zipfile

import pytest

from parkpack.objects import discover_objects
from parkpack.pipeline import package_objects, package_remaining, reprocess_objects

from conftest import write_manifest


class TestPackageObjects:
    """Tests for package_objects() function."""

    @pytest.mark.asyncio
    async def test_packages_directories_with_object_json(self, tmp_path, archiver):
        """Test that only directories holding object.json are packaged."""
        write_manifest(tmp_path / "group" / "foo" / "object.1.json", {"id": "foo"})
        write_manifest(tmp_path / "group" / "foo" / "object.json", {"id": "foo"})
        write_manifest(tmp_path / "group" / "bar" / "object.1.json", {"id": "bar"})
        records = await discover_objects(tmp_path)

        packaged = await package_objects(records, archiver)

        assert [r.id for r in packaged] == ["foo"]
        assert not (tmp_path / "group" / "foo").exists()
        assert (tmp_path / "group" / "bar").exists()
        parkobj = tmp_path / "group" / "foo.parkobj"
        with zipfile.ZipFile(parkobj) as zf:
            assert sorted(zf.namelist()) == ["object.1.json", "object.json"]

    @pytest.mark.asyncio
    async def test_archive_holds_directory_contents(self, tmp_path, archiver):
        """Test that the archive is rooted inside the object directory."""
        obj_dir = tmp_path / "foo"
        write_manifest(obj_dir / "object.json", {"id": "foo"})
        (obj_dir / "sub").mkdir()
        (obj_dir / "sub" / "data.bin").write_bytes(b"x")
        write_manifest(obj_dir / "object.1.json", {"id": "foo"})
        records = await discover_objects(tmp_path)

        await package_objects(records, archiver)

        cwd, output, paths, recurse = archiver.calls[0]
        assert cwd == obj_dir
        assert output == "../foo.parkobj"
        assert paths == ["object.1.json", "object.json", "sub"]
        assert recurse is True
        with zipfile.ZipFile(tmp_path / "foo.parkobj") as zf:
            assert "sub/data.bin" in zf.namelist()

    @pytest.mark.asyncio
    async def test_parallel_mode(self, tmp_path, archiver):
        """Test that parallel packaging handles every object."""
        for name in ["a", "b", "c"]:
            write_manifest(tmp_path / name / "object.1.json", {"id": name})
            write_manifest(tmp_path / name / "object.json", {"id": name})
        records = await discover_objects(tmp_path)

        packaged = await package_objects(records, archiver, parallel=True)

        assert len(packaged) == 3
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.parkobj", "b.parkobj", "c.parkobj"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("parallel", [False, True])
    async def test_shared_directory_packaged_once(self, tmp_path, archiver, parallel):
        """Test that two manifests in one directory yield a single archive."""
        write_manifest(tmp_path / "foo" / "object.1.json", {"id": "foo.a"})
        write_manifest(tmp_path / "foo" / "object.2.json", {"id": "foo.b"})
        write_manifest(tmp_path / "foo" / "object.json", {"id": "foo.a"})
        records = await discover_objects(tmp_path)
        assert len(records) == 2

        packaged = await package_objects(records, archiver, parallel=parallel)

        assert [r.id for r in packaged] == ["foo.a"]
        assert len(archiver.calls) == 1
        assert sorted(p.name for p in tmp_path.iterdir()) == ["foo.a.parkobj"]

    @pytest.mark.asyncio
    async def test_child_of_packaged_parent_is_skipped(self, tmp_path, archiver):
        """Test that a child object removed with its parent is not packaged again."""
        write_manifest(tmp_path / "a" / "object.1.json", {"id": "a"})
        write_manifest(tmp_path / "a" / "object.json", {"id": "a"})
        write_manifest(tmp_path / "a" / "z" / "object.1.json", {"id": "z"})
        write_manifest(tmp_path / "a" / "z" / "object.json", {"id": "z"})
        records = await discover_objects(tmp_path)
        assert [r.id for r in records] == ["a", "z"]

        packaged = await package_objects(records, archiver)

        assert [r.id for r in packaged] == ["a"]
        assert len(archiver.calls) == 1
        with zipfile.ZipFile(tmp_path / "a.parkobj") as zf:
            assert "z/object.json" in zf.namelist()

    @pytest.mark.asyncio
    async def test_object_without_id_named_after_directory(self, tmp_path, archiver):
        """Test that a manifest lacking an id still gets an archive name."""
        write_manifest(tmp_path / "plain" / "object.1.json", {"images": []})
        write_manifest(tmp_path / "plain" / "object.json", {"images": []})
        records = await discover_objects(tmp_path)

        await package_objects(records, archiver)

        assert (tmp_path / "plain.parkobj").exists()

    @pytest.mark.asyncio
    async def test_overwrites_existing_parkobj(self, tmp_path, archiver):
        """Test that a stale archive is replaced."""
        (tmp_path / "foo.parkobj").write_bytes(b"stale")
        write_manifest(tmp_path / "foo" / "object.1.json", {"id": "foo"})
        write_manifest(tmp_path / "foo" / "object.json", {"id": "foo"})
        records = await discover_objects(tmp_path)

        await package_objects(records, archiver)

        assert zipfile.is_zipfile(tmp_path / "foo.parkobj")


class TestPackageRemaining:
    """Tests for package_remaining() function."""

    @pytest.mark.asyncio
    async def test_archives_top_level_directories(self, tmp_path, archiver):
        """Test that every top-level directory lands in objects.zip."""
        write_manifest(tmp_path / "rct2" / "bar" / "object.1.json", {"id": "bar"})
        (tmp_path / "rct2tt").mkdir()
        (tmp_path / "rct2tt" / "readme.txt").write_text("hi")
        (tmp_path / "loose.txt").write_text("not archived")

        archived = await package_remaining(tmp_path, archiver)

        assert archived == ["rct2", "rct2tt"]
        assert sorted(p.name for p in tmp_path.iterdir()) == ["loose.txt", "objects.zip"]
        with zipfile.ZipFile(tmp_path / "objects.zip") as zf:
            assert set(zf.namelist()) == {"rct2/bar/object.1.json", "rct2tt/readme.txt"}

    @pytest.mark.asyncio
    async def test_nothing_to_archive(self, tmp_path, archiver):
        """Test that an empty root skips the archiver."""
        assert await package_remaining(tmp_path, archiver) == []
        assert archiver.calls == []

    @pytest.mark.asyncio
    async def test_runs_after_object_archives_removed(self, tmp_path, archiver, compiler):
        """Test that packaged directories are gone before objects.zip is made."""
        write_manifest(tmp_path / "foo" / "object.1.json", {"id": "foo", "images": [{"path": "a.png"}]})
        write_manifest(tmp_path / "bar" / "object.1.json", {"id": "bar", "images": []})
        records = await discover_objects(tmp_path)

        await reprocess_objects(records, compiler)
        await package_objects(records, archiver, parallel=True)
        await package_remaining(tmp_path, archiver)

        outputs = [call[1] for call in archiver.calls]
        assert outputs == ["../foo.parkobj", "objects.zip"]
        assert "foo" not in archiver.snapshots["objects.zip"]
        assert archiver.calls[-1][2] == ["bar"]
